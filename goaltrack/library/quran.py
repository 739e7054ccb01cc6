"""Quran reference table and verse lookup endpoints."""

from collections import namedtuple
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..database import Database
from ..dependencies import get_db, success
from ..errors import BadRequestError, NotFoundError

Surah = namedtuple("Surah", ["number", "name", "verses"])

SURAHS = [
    Surah(number, name, verses)
    for number, (name, verses) in enumerate(
        [
            ("Al-Fatiha", 7), ("Al-Baqara", 286), ("Al-Imran", 200),
            ("An-Nisa", 176), ("Al-Ma'ida", 120), ("Al-An'am", 165),
            ("Al-A'raf", 206), ("Al-Anfal", 75), ("At-Tawba", 129),
            ("Yunus", 109), ("Hud", 123), ("Yusuf", 111),
            ("Ar-Ra'd", 43), ("Ibrahim", 52), ("Al-Hijr", 99),
            ("An-Nahl", 128), ("Al-Isra", 111), ("Al-Kahf", 110),
            ("Maryam", 98), ("Ta-Ha", 135), ("Al-Anbiya", 112),
            ("Al-Hajj", 78), ("Al-Mu'minun", 118), ("An-Nur", 64),
            ("Al-Furqan", 77), ("Ash-Shu'ara", 227), ("An-Naml", 93),
            ("Al-Qasas", 88), ("Al-Ankabut", 69), ("Ar-Rum", 60),
            ("Luqman", 34), ("As-Sajda", 30), ("Al-Ahzab", 73),
            ("Saba", 54), ("Fatir", 45), ("Ya-Sin", 83),
            ("As-Saffat", 182), ("Sad", 88), ("Az-Zumar", 75),
            ("Ghafir", 85), ("Fussilat", 54), ("Ash-Shura", 53),
            ("Az-Zukhruf", 89), ("Ad-Dukhan", 59), ("Al-Jathiya", 37),
            ("Al-Ahqaf", 35), ("Muhammad", 38), ("Al-Fath", 29),
            ("Al-Hujurat", 18), ("Qaf", 45), ("Adh-Dhariyat", 60),
            ("At-Tur", 49), ("An-Najm", 62), ("Al-Qamar", 55),
            ("Ar-Rahman", 78), ("Al-Waqi'a", 96), ("Al-Hadid", 29),
            ("Al-Mujadila", 22), ("Al-Hashr", 24), ("Al-Mumtahana", 13),
            ("As-Saff", 14), ("Al-Jumu'a", 11), ("Al-Munafiqun", 11),
            ("At-Taghabun", 18), ("At-Talaq", 12), ("At-Tahrim", 12),
            ("Al-Mulk", 30), ("Al-Qalam", 52), ("Al-Haqqa", 52),
            ("Al-Ma'arij", 44), ("Nuh", 28), ("Al-Jinn", 28),
            ("Al-Muzzammil", 20), ("Al-Muddaththir", 56), ("Al-Qiyama", 40),
            ("Al-Insan", 31), ("Al-Mursalat", 50), ("An-Naba", 40),
            ("An-Nazi'at", 46), ("Abasa", 42), ("At-Takwir", 29),
            ("Al-Infitar", 19), ("Al-Mutaffifin", 36), ("Al-Inshiqaq", 25),
            ("Al-Buruj", 22), ("At-Tariq", 17), ("Al-A'la", 19),
            ("Al-Ghashiya", 26), ("Al-Fajr", 30), ("Al-Balad", 20),
            ("Ash-Shams", 15), ("Al-Layl", 21), ("Ad-Duha", 11),
            ("Ash-Sharh", 8), ("At-Tin", 8), ("Al-Alaq", 19),
            ("Al-Qadr", 5), ("Al-Bayyina", 8), ("Az-Zalzala", 8),
            ("Al-Adiyat", 11), ("Al-Qari'a", 11), ("At-Takathur", 8),
            ("Al-Asr", 3), ("Al-Humaza", 9), ("Al-Fil", 5),
            ("Quraysh", 4), ("Al-Ma'un", 7), ("Al-Kawthar", 3),
            ("Al-Kafirun", 6), ("An-Nasr", 3), ("Al-Masad", 5),
            ("Al-Ikhlas", 4), ("Al-Falaq", 5), ("An-Nas", 6),
        ],
        start=1,
    )
]

router = APIRouter(prefix="/api/quran", tags=["quran"])


def parse_surah(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if not 1 <= number <= len(SURAHS):
        raise BadRequestError("Invalid surah number")
    return number


def parse_verse(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise BadRequestError("Invalid verse number")
    return number


@router.get("/surahs")
async def list_surahs():
    data = [surah._asdict() for surah in SURAHS]
    return success(data, count=len(data))


@router.get("/surahs/{surah}")
async def list_verses(surah: str, db: Database = Depends(get_db)):
    verses = db.list_verses(parse_surah(surah))
    return success(verses, count=len(verses))


@router.get("/surahs/{surah}/verses/{verse}")
async def get_verse(surah: str, verse: str, db: Database = Depends(get_db)):
    found = db.get_verse(parse_surah(surah), parse_verse(verse))
    if found is None:
        raise NotFoundError("Verse not found")
    return success(found)


@router.get("/search")
async def search(q: Optional[str] = Query(None), db: Database = Depends(get_db)):
    """Substring search over the Arabic and French texts."""
    if not q:
        raise BadRequestError("Please provide a search term")
    results = db.search_verses(q)
    return success(results, count=len(results))

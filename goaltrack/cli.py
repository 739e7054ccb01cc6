"""Command-line maintenance tasks."""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from .config import Settings
from .database import Database
from .main import configure_logging
from .scheduler import run_sweep

logger = logging.getLogger(__name__)

VERSE_KEYS = ("surah", "verse", "arabic_text", "french_text")


def sweep(db: Database, args: argparse.Namespace) -> int:
    updated = run_sweep(db)
    print(f"{updated} objective(s) updated with missing progress.")
    return 0


def import_verses(db: Database, args: argparse.Namespace) -> int:
    """Load verses from a JSON list of {surah, verse, arabic_text, french_text}."""
    with open(args.file, encoding="utf-8") as f:
        verses = json.load(f)

    missing = [i for i, verse in enumerate(verses) if not all(k in verse for k in VERSE_KEYS)]
    if missing:
        logger.error(f"Verse entries missing fields at positions {missing[:10]}")
        return 1

    count = db.add_verses([{k: verse[k] for k in VERSE_KEYS} for verse in verses])
    print(f"Imported {count} verse(s)")
    return 0


def promote(db: Database, args: argparse.Namespace) -> int:
    user = db.get_user_by_email(args.email)
    if user is None:
        logger.error(f"No user with email {args.email}")
        return 1
    db.set_user_role(user["id"], "admin")
    print(f"{args.email} is now an admin")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="goaltrack", description=__doc__)
    subcommands = parser.add_subparsers(dest="command", required=True)

    subcommands.add_parser("sweep", help="Gap-fill active boolean objectives").set_defaults(
        handler=sweep
    )

    verses = subcommands.add_parser("import-verses", help="Import Quran verses from JSON")
    verses.add_argument("file")
    verses.set_defaults(handler=import_verses)

    admin = subcommands.add_parser("promote", help="Give a user the admin role")
    admin.add_argument("email")
    admin.set_defaults(handler=promote)

    return parser


def main(argv=None) -> int:
    load_dotenv()
    settings = Settings()
    configure_logging(settings)

    args = build_parser().parse_args(argv)
    return args.handler(Database(settings.database_path), args)


if __name__ == "__main__":
    sys.exit(main())

import json

from goaltrack import cli


def test_import_verses_and_promote(tmp_path, monkeypatch, capsys):
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    monkeypatch.setenv("LOG_FILE", "")

    verses = tmp_path / "verses.json"
    verses.write_text(
        json.dumps(
            [{"surah": 1, "verse": 1, "arabic_text": "بِسْمِ اللَّهِ", "french_text": "Au nom d'Allah"}]
        ),
        encoding="utf-8",
    )
    assert cli.main(["import-verses", str(verses)]) == 0
    assert "Imported 1 verse(s)" in capsys.readouterr().out

    assert cli.main(["promote", "nobody@example.com"]) == 1
    assert cli.main(["sweep"]) == 0
    assert "0 objective(s) updated" in capsys.readouterr().out


def test_import_rejects_incomplete_entries(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))
    verses = tmp_path / "verses.json"
    verses.write_text(json.dumps([{"surah": 1, "verse": 1}]), encoding="utf-8")
    assert cli.main(["import-verses", str(verses)]) == 1

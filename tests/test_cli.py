"""Tests for the musiq command line front end."""

import sqlite3

import pytest

from musiq.cli import build_parser, main
from musiq.core.database import get_database_path
from musiq.domain.library import SongTag, add_song, get_song, get_song_tags, list_tags


class TestParser:
    """Tests for argument parsing."""

    def test_aliases(self):
        """s, t and e are aliases for song, tag and export."""
        parser = build_parser()
        assert parser.parse_args(["s", "add", "/a.mp3"]).path == "/a.mp3"
        assert parser.parse_args(["t", "add", "energy"]).name == "energy"
        assert parser.parse_args(["e", "energy>=7"]).conditions == ["energy>=7"]

    def test_command_required(self):
        """Running without a command is a usage error."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestSongCommands:
    """Tests for song subcommands."""

    def test_add_and_remove(self, capsys):
        """song add stores the path, song remove deletes it."""
        assert main(["song", "add", "/music/a.mp3"]) == 0
        assert get_song("/music/a.mp3") is not None

        assert main(["song", "remove", "/music/a.mp3"]) == 0
        assert get_song("/music/a.mp3") is None
        assert "Removed song" in capsys.readouterr().out

    def test_remove_missing_is_ok(self, capsys):
        """Removing an unknown song exits 0."""
        assert main(["song", "remove", "/nope.mp3"]) == 0
        assert "No song stored" in capsys.readouterr().out

    def test_tag_creates_tags(self):
        """song tag defines tags as needed and sets values."""
        add_song("/music/a.mp3")

        assert main(["song", "tag", "/music/a.mp3", "energy=7", "mood=3"]) == 0

        assert list_tags() == ["energy", "mood"]
        assert get_song_tags("/music/a.mp3") == [
            SongTag("energy", 7),
            SongTag("mood", 3),
        ]

    def test_tag_continues_after_bad_pair(self, capsys):
        """Bad pairs are reported, good ones still applied."""
        add_song("/music/a.mp3")

        code = main(["song", "tag", "/music/a.mp3", "energy>7", "mood=12", "calm=2"])

        assert code == 1
        assert get_song_tags("/music/a.mp3") == [SongTag("calm", 2)]
        err = capsys.readouterr().err
        assert "only supports '=' operator" in err
        assert "between 0 and 9" in err

    def test_tag_unknown_song(self, capsys):
        """Tagging a song that was never added fails."""
        assert main(["song", "tag", "/nope.mp3", "energy=1"]) == 1
        assert "Song not found" in capsys.readouterr().err

    def test_show(self, capsys):
        """song show lists tag values."""
        add_song("/music/a.mp3")
        main(["song", "tag", "/music/a.mp3", "energy=7"])
        capsys.readouterr()

        assert main(["song", "show", "/music/a.mp3"]) == 0
        assert "energy=7" in capsys.readouterr().out

    def test_show_unknown_song(self, capsys):
        """song show on an unknown path exits 1."""
        assert main(["song", "show", "/nope.mp3"]) == 1
        assert "Song not found" in capsys.readouterr().err


class TestTagCommands:
    """Tests for tag subcommands."""

    def test_add_list_remove(self, capsys):
        """tag add/list/remove round trip."""
        assert main(["tag", "add", "energy"]) == 0
        assert main(["tag", "add", "mood"]) == 0
        capsys.readouterr()

        assert main(["tag", "list"]) == 0
        assert capsys.readouterr().out.split() == ["energy", "mood"]

        assert main(["tag", "remove", "energy"]) == 0
        assert list_tags() == ["mood"]


class TestExportCommand:
    """Tests for export."""

    @pytest.fixture
    def songs(self):
        for path, energy, mood in [
            ("/music/a.mp3", 8, 3),
            ("/music/b.mp3", 8, 9),
            ("/music/[live] c.mp3", 2, 3),
        ]:
            add_song(path)
            main(["song", "tag", path, f"energy={energy}", f"mood={mood}"])

    def test_prints_matches(self, songs, capsys):
        """Matching paths are printed one per line."""
        capsys.readouterr()
        assert main(["export", "energy>=7", "mood<5"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["Found 1 songs:", "/music/a.mp3"]

    def test_paths_printed_verbatim(self, songs, capsys):
        """Paths with brackets are not treated as markup."""
        capsys.readouterr()
        assert main(["e", "energy<5"]) == 0
        assert "/music/[live] c.mp3" in capsys.readouterr().out

    def test_no_matches(self, songs, capsys):
        """An empty result is reported, not an error."""
        capsys.readouterr()
        assert main(["export", "energy=0"]) == 0
        assert "No songs found" in capsys.readouterr().out

    def test_requires_conditions(self, capsys):
        """export with no conditions fails."""
        assert main(["export"]) == 1
        assert "No tag conditions specified" in capsys.readouterr().err

    def test_parse_error_aborts(self, songs, capsys):
        """A malformed condition stops the export."""
        capsys.readouterr()
        assert main(["export", "energy>=7", "mood"]) == 1
        captured = capsys.readouterr()
        assert "No valid operator found" in captured.err
        assert "/music/a.mp3" not in captured.out


class TestGlobalOptions:
    """Tests for --db and init."""

    def test_db_flag(self, tmp_path):
        """--db selects the database file."""
        target = tmp_path / "other.db"
        assert main(["--db", str(target), "init"]) == 0
        assert target.exists()
        assert get_database_path() == target

    def test_unusable_database(self, tmp_path, capsys):
        """A corrupt database file exits 1 with an error."""
        target = tmp_path / "broken.db"
        target.write_bytes(b"not a database " * 200)

        assert main(["--db", str(target), "tag", "list"]) == 1
        assert "Cannot open database" in capsys.readouterr().err

    def test_init_writes_default_config(self, tmp_path, capsys):
        """init creates a default config file once and leaves it alone after."""
        config_file = tmp_path / "config" / "musiq" / "config.toml"

        assert main(["init"]) == 0
        assert config_file.exists()
        assert "Created default configuration" in capsys.readouterr().out

        config_file.write_text('[logging]\nlevel = "DEBUG"\n')
        assert main(["init"]) == 0
        assert "Created default configuration" not in capsys.readouterr().out
        assert config_file.read_text() == '[logging]\nlevel = "DEBUG"\n'

    def test_bad_log_rotation(self, tmp_path, capsys):
        """A rotation value loguru can't parse exits 1 with an error."""
        (tmp_path / "config.toml").write_text('[logging]\nrotation = "whenever"\n')

        assert main(["tag", "list"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_locked_database(self, db_path, monkeypatch, capsys):
        """A database locked by another writer exits 1 with an error."""
        monkeypatch.setattr("musiq.core.database.BUSY_TIMEOUT", 0.1)
        assert main(["init"]) == 0
        capsys.readouterr()

        blocker = sqlite3.connect(db_path, isolation_level=None)
        try:
            blocker.execute("BEGIN IMMEDIATE")
            assert main(["song", "add", "/music/b.mp3"]) == 1
        finally:
            blocker.execute("ROLLBACK")
            blocker.close()

        assert "locked" in capsys.readouterr().err
        assert get_song("/music/b.mp3") is None

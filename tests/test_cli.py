"""End-to-end tests for the pacrepo command line."""

import csv
import json

import pytest

from common import msg
from constants import ExitCodes
from pacrepo import load_lines_file, main


def write_pkg(db_dir, name, version="1.0-1", depends=(), provides=()):
    entry = db_dir / f"{name}-{version}"
    entry.mkdir(parents=True)
    lines = [f"%FILENAME%\n{name}-{version}-x86_64.pkg.tar.zst", f"%NAME%\n{name}", f"%VERSION%\n{version}"]
    if depends:
        lines.append("%DEPENDS%\n" + "\n".join(depends))
    if provides:
        lines.append("%PROVIDES%\n" + "\n".join(provides))
    (entry / "desc").write_text("\n\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory with no user config."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("PACREPO_CONFIG", raising=False)
    monkeypatch.delenv("PACREPO_LOG_LEVEL", raising=False)
    monkeypatch.setenv("CLICOLOR", "0")
    msg.set_console(None)
    yield work
    msg.set_console(None)


@pytest.fixture
def core_db(tmp_path):
    db_dir = tmp_path / "core"
    write_pkg(db_dir, "a", depends=["b", "sh"])
    write_pkg(db_dir, "b", "2:0.5-3", depends=["c>=1"])
    write_pkg(db_dir, "c")
    write_pkg(db_dir, "bash", "5.2-1", provides=["sh"])
    write_pkg(db_dir, "needs-ghost", depends=["ghost"])
    return db_dir


class TestLoadLinesFile:
    """Target and database list files."""

    def test_skips_blank_and_comment_lines(self, tmp_path):
        path = tmp_path / "list.txt"
        path.write_text("# targets\n a \n\n  # indented comment\nb\n", encoding="utf-8")
        assert load_lines_file(str(path)) == ["a", "b"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_lines_file(str(tmp_path / "missing.txt"))


class TestVercmp:
    """The vercmp subcommand."""

    @pytest.mark.parametrize("a,b,expected", [
        ("1.0", "1.0rc", "1"),
        ("1.0-1", "1.0-1", "0"),
        ("1.0", "1:0.1", "-1"),
    ])
    def test_prints_result(self, capsys, a, b, expected):
        assert main(["vercmp", a, b]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == expected

    def test_missing_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["vercmp", "1"])
        assert exc_info.value.code == 2


class TestListSrcinfo:
    """The list-srcinfo subcommand."""

    def test_lists_packages(self, tmp_path, capsys):
        pkg_dir = tmp_path / "pkgs" / "foo"
        pkg_dir.mkdir(parents=True)
        (pkg_dir / ".SRCINFO").write_text(
            "pkgbase = foo\n\tpkgver = 1.0\n\tpkgrel = 1\n\nruntime = 1\npkgname = foo\n\npkgname = foo-docs\n",
            encoding="utf-8",
        )
        assert main(["-q", "list-srcinfo", str(tmp_path / "pkgs")]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.splitlines() == ["foo-1.0-1", "foo-docs-1.0-1"]

    def test_parse_error(self, tmp_path, capsys):
        pkg_dir = tmp_path / "pkgs" / "bad"
        pkg_dir.mkdir(parents=True)
        (pkg_dir / ".SRCINFO").write_text("garbage\n", encoding="utf-8")
        assert main(["list-srcinfo", str(tmp_path / "pkgs")]) == ExitCodes.PARSE_ERROR.value
        assert "==> ERROR:" in capsys.readouterr().err

    def test_not_a_directory(self, tmp_path):
        assert main(["list-srcinfo", str(tmp_path / "nope")]) == ExitCodes.FILE_ERROR.value


class TestResolve:
    """The resolve subcommand."""

    def test_targets_only(self, core_db, capsys):
        assert main(["resolve", "-r", str(core_db), "-p", "a", "-p", "sh"]) == ExitCodes.SUCCESS.value
        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["a 1.0-1", "bash 5.2-1"]
        assert "==> " in captured.err
        assert "core: 5 package(s)" in captured.err

    def test_with_dependencies(self, core_db, capsys):
        assert main(["-q", "resolve", "-r", str(core_db), "-p", "a", "-d"]) == ExitCodes.SUCCESS.value
        captured = capsys.readouterr()
        assert captured.out.splitlines() == ["a 1.0-1", "b 2:0.5-3", "bash 5.2-1", "c 1.0-1"]
        assert captured.err == ""

    def test_targets_from_file(self, core_db, tmp_path, capsys):
        targets = tmp_path / "targets.txt"
        targets.write_text("# wanted\nc\n\nb\n", encoding="utf-8")
        assert main(["-q", "resolve", "-r", str(core_db), "-f", str(targets)]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.splitlines() == ["b 2:0.5-3", "c 1.0-1"]

    def test_databases_from_file(self, core_db, tmp_path, capsys):
        dbs = tmp_path / "dbs.txt"
        dbs.write_text(f"{core_db}\n", encoding="utf-8")
        assert main(["-q", "resolve", "--database-file", str(dbs), "-p", "c"]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.splitlines() == ["c 1.0-1"]

    def test_json_to_stdout(self, core_db, capsys):
        assert main(["-q", "resolve", "-r", str(core_db), "-p", "sh", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == [{
            "name": "bash",
            "version": "5.2-1",
            "repository": "core",
            "filename": "bash-5.2-1-x86_64.pkg.tar.zst",
        }]

    def test_csv_output_file_inferred(self, core_db, tmp_path):
        out = tmp_path / "out.csv"
        assert main(["-q", "resolve", "-r", str(core_db), "-p", "b", "-d", "-o", str(out)]) == 0
        rows = list(csv.reader(out.open("r", encoding="utf-8")))
        assert rows[0] == ["name", "version", "repository", "filename"]
        assert [row[0] for row in rows[1:]] == ["b", "c"]
        assert rows[1][2] == "core"

    def test_text_output_file(self, core_db, tmp_path):
        out = tmp_path / "out.txt"
        assert main(["-q", "resolve", "-r", str(core_db), "-p", "c", "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8") == "c 1.0-1\n"

    def test_json_output_file(self, core_db, tmp_path):
        out = tmp_path / "out.json"
        assert main(["-q", "resolve", "-r", str(core_db), "-p", "c", "-o", str(out)]) == 0
        assert [p["name"] for p in json.loads(out.read_text(encoding="utf-8"))] == ["c"]

    def test_no_provider(self, core_db, capsys):
        code = main(["resolve", "-r", str(core_db), "-p", "needs-ghost", "-d"])
        assert code == ExitCodes.RESOLVE_ERROR.value
        captured = capsys.readouterr()
        assert "no provider found for target: ghost" in captured.err
        assert captured.out == ""

    def test_duplicate_repository_names(self, core_db, tmp_path):
        other = tmp_path / "elsewhere" / "core"
        write_pkg(other, "z")
        code = main(["resolve", "-r", str(core_db), "-r", str(other), "-p", "z"])
        assert code == ExitCodes.USAGE_ERROR.value

    def test_no_databases(self):
        assert main(["resolve", "-p", "a"]) == ExitCodes.USAGE_ERROR.value

    def test_no_targets(self, core_db):
        assert main(["resolve", "-r", str(core_db)]) == ExitCodes.SUCCESS.value

    def test_missing_database(self, tmp_path):
        code = main(["resolve", "-r", str(tmp_path / "missing.db.tar.gz"), "-p", "a"])
        assert code == ExitCodes.FILE_ERROR.value

    def test_missing_target_file(self, core_db, tmp_path):
        code = main(["resolve", "-r", str(core_db), "-f", str(tmp_path / "missing.txt")])
        assert code == ExitCodes.FILE_ERROR.value

    def test_malformed_database(self, tmp_path):
        db_dir = tmp_path / "broken"
        (db_dir / "x-1-1").mkdir(parents=True)
        (db_dir / "x-1-1" / "desc").write_text("%NAME%\nx\n%VERSION%\n1.0\n", encoding="utf-8")
        code = main(["resolve", "-r", str(db_dir), "-p", "x"])
        assert code == ExitCodes.PARSE_ERROR.value

    def test_duplicate_packages_first_repository_wins(self, tmp_path, capsys):
        first = tmp_path / "testing"
        second = tmp_path / "stable"
        write_pkg(first, "foo", "2.0-1")
        write_pkg(second, "foo", "1.0-1")
        assert main(["-q", "resolve", "-r", str(first), "-r", str(second), "-p", "foo"]) == 0
        assert capsys.readouterr().out.splitlines() == ["foo 2.0-1"]


class TestConfigFile:
    """Configuration file defaults for resolve."""

    def test_config_in_working_directory(self, core_db, isolated_env, capsys):
        (isolated_env / "pacrepo.yml").write_text(
            f"databases:\n  - {core_db}\ndependencies: true\n", encoding="utf-8")
        assert main(["-q", "resolve", "-p", "b"]) == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.splitlines() == ["b 2:0.5-3", "c 1.0-1"]

    def test_cli_overrides_config_format(self, core_db, tmp_path, capsys):
        config = tmp_path / "cfg.json"
        config.write_text(json.dumps({"databases": [str(core_db)], "format": "json"}), encoding="utf-8")
        assert main(["-q", "-c", str(config), "resolve", "-p", "c", "--format", "text"]) == 0
        assert capsys.readouterr().out.splitlines() == ["c 1.0-1"]

    def test_config_format(self, core_db, tmp_path, capsys):
        config = tmp_path / "cfg.json"
        config.write_text(json.dumps({"databases": [str(core_db)], "format": "json"}), encoding="utf-8")
        assert main(["-q", "-c", str(config), "resolve", "-p", "c"]) == 0
        assert json.loads(capsys.readouterr().out)[0]["name"] == "c"

    def test_malformed_config_is_ignored(self, core_db, tmp_path, capsys):
        config = tmp_path / "cfg.yml"
        config.write_text("databases: [unclosed\n", encoding="utf-8")
        assert main(["-q", "-c", str(config), "resolve", "-r", str(core_db), "-p", "c"]) == 0
        assert capsys.readouterr().out.splitlines() == ["c 1.0-1"]

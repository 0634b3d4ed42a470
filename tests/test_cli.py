"""
Tests for the dynimport command line.
"""
import json
import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
import dynimport


@pytest.fixture
def project():
    with tempfile.TemporaryDirectory() as tmpdir:
        for path in ["src/main.ts", "src/views/foo.js", "src/views/nested/deep.js"]:
            full = os.path.join(tmpdir, path)
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, "w") as f:
                f.write("export default 1;\n")
        with open(os.path.join(tmpdir, "dynimport.json"), "w") as f:
            json.dump({"alias": [{"find": "@", "replacement": os.path.join(tmpdir, "src")}]}, f)
        yield tmpdir


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["dynimport", *argv])
    dynimport.main()


class TestGlobCommand:
    """Tests for `dynimport glob`."""

    def test_glob(self, project, monkeypatch, capsys):
        run(monkeypatch, "--config", os.path.join(project, "dynimport.json"),
            "glob", "import(`@/views/${id}.js`)", "--importer", os.path.join(project, "src", "main.ts"))

        out = capsys.readouterr().out
        assert "raw:      @/views/*.js" in out
        assert "glob:     ./views/*.js" in out
        assert "  ./views/**/*.js" in out

    def test_strict(self, project, monkeypatch, capsys):
        run(monkeypatch, "--strict", "--config", os.path.join(project, "dynimport.json"),
            "glob", "`./views/${id}.js`", "--importer", os.path.join(project, "src", "main.ts"))
        assert "**" not in capsys.readouterr().out

    def test_rejected(self, project, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "--config", os.path.join(project, "dynimport.json"),
                "glob", "`./${x}.js`", "--importer", os.path.join(project, "src", "main.ts"))
        assert exc_info.value.code == 1
        assert "SelfDirectoryAmbiguity" in capsys.readouterr().err


class TestFilesCommand:
    """Tests for `dynimport files`."""

    def test_files(self, project, monkeypatch, capsys):
        run(monkeypatch, "--config", os.path.join(project, "dynimport.json"),
            "files", "`./views/${id}.js`", "--importer", os.path.join(project, "src", "main.ts"))
        assert capsys.readouterr().out.splitlines() == ["./views/foo.js", "./views/nested/deep.js"]


class TestTransformCommand:
    """Tests for `dynimport transform`."""

    def test_transform(self, project, monkeypatch, capsys):
        run(monkeypatch, "--config", os.path.join(project, "dynimport.json"),
            "transform", os.path.join(project, "src", "main.ts"), "import(`@/views/${id}.js`)")

        out = capsys.readouterr().out
        assert "-> __variableDynamicImportRuntime0__(`@/views/${id}.js`)" in out
        assert '"@/views/foo": function () { return import("./views/foo.js"); },' in out
        assert "// [dynimport-vars] runtime -E-" in out

    def test_failure_exit_code(self, project, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "--config", os.path.join(project, "dynimport.json"),
                "transform", os.path.join(project, "src", "main.ts"),
                "import(`./views/${id}.js`)", "import(`${x}.js`)")
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "__variableDynamicImportRuntime0__" in captured.out
        assert "UnboundedWildcard" in captured.err


class TestInitCommand:
    """Tests for `dynimport init`."""

    def test_init(self, monkeypatch):
        with tempfile.TemporaryDirectory() as tmpdir:
            monkeypatch.chdir(tmpdir)
            run(monkeypatch, "init")
            assert os.path.exists(os.path.join(tmpdir, "dynimport.json"))

            with pytest.raises(SystemExit):
                run(monkeypatch, "init")

from pathlib import Path

import pytest

from export_lens import run


def _module(tmp_path: Path, source: str, name: str = "page.ts") -> str:
    f = tmp_path / name
    f.write_text(source, encoding="utf-8")
    return str(f)


def test_check_found(tmp_path: Path, capsys) -> None:
    path = _module(tmp_path, "export function config() {}\n")

    assert run.main(["check", path, "config"]) == 0
    assert "exported as function (lines 1-1)" in capsys.readouterr().out


def test_check_not_found(tmp_path: Path, capsys) -> None:
    path = _module(tmp_path, "export let a, b\n")

    assert run.main(["check", path, "b"]) == 1
    assert "is not a named export" in capsys.readouterr().out


def test_strip_prints_remaining(tmp_path: Path, capsys) -> None:
    source = "export const { a, b: c, d } = obj\n"
    path = _module(tmp_path, source)

    assert run.main(["strip", path, "a", "c"]) == 0

    out = capsys.readouterr().out
    assert "Removed 2 destructured properties" in out
    assert "line 1: { d }" in out
    # Only the in-memory tree is rewritten.
    assert Path(path).read_text(encoding="utf-8") == source


def test_missing_file_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main(["check", str(tmp_path / "nope.ts"), "x"])
    assert "File does not exist" in str(excinfo.value)


def test_unsupported_file_exits(tmp_path: Path) -> None:
    path = _module(tmp_path, "{}", name="data.json")
    with pytest.raises(SystemExit) as excinfo:
        run.main(["check", path, "x"])
    assert "Unsupported file type" in str(excinfo.value)


def test_serve_runs_uvicorn(monkeypatch) -> None:
    calls = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr(run.uvicorn, "run", fake_run)

    assert run.main(["serve", "--port", "9123"]) == 0
    assert calls["app"] == "export_lens.main:app"
    assert calls["port"] == 9123
    assert calls["host"] == "127.0.0.1"

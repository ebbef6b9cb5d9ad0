from __future__ import annotations

import json
from pathlib import Path

import pytest

from apicompat import codec
from apicompat.cli import main


def _func(*out: dict) -> dict:
    return {"Kind": "func", "Out": list(out)}


_MARSHAL = {
    "MarshalJSON": {
        "PtrReceiver": False,
        "Name": "MarshalJSON",
        "Type": _func({"Kind": "slice", "Elem": {"Kind": "uint8"}}, {"Name": "error", "Kind": "interface"}),
    }
}

OLD = {
    "Types": {
        "p#Config": {
            "Name": "p#Config",
            "Kind": "struct",
            "Fields": [
                {"Name": "Name", "Type": {"Kind": "string"}, "Tag": 'json:"name"'},
                {"Name": "Port", "Type": {"Kind": "int"}},
            ],
            "Methods": {"String": {"PtrReceiver": False, "Name": "String", "Type": _func({"Kind": "string"})}},
        },
        "p#Stamp": {
            "Name": "p#Stamp",
            "Kind": "struct",
            "Fields": [{"Name": "Sec", "Type": {"Kind": "int64"}}],
            "Methods": _MARSHAL,
        },
        "p#Legacy": {"Name": "p#Legacy", "Kind": "struct"},
    }
}

NEW = {
    "Types": {
        "p#Config": {
            "Name": "p#Config",
            "Kind": "struct",
            "Fields": [{"Name": "Name", "Type": {"Kind": "string"}, "Tag": 'json:"fullName"'}],
        },
        "p#Stamp": {"Name": "p#Stamp", "Kind": "struct", "Methods": _MARSHAL},
    }
}


def _write(tmp_path: Path, name: str, obj: dict) -> str:
    p = tmp_path / name
    p.write_text(json.dumps(obj), encoding="utf-8")
    return str(p)


def _run_check(capsys, *argv: str) -> tuple[int, list[str]]:
    code = 0
    try:
        main(["check", *argv])
    except SystemExit as e:
        code = e.code
    return code, capsys.readouterr().out.splitlines()


def test_check_reports_incompatibilities(tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("APICOMPAT_METHODS", raising=False)
    old, new = _write(tmp_path, "old.json", OLD), _write(tmp_path, "new.json", NEW)

    code, lines = _run_check(capsys, old, new)

    assert code == 1
    assert lines == [
        "type p#Legacy has gone away",
        'p#Config incompatible: .Name: incompatible tag json:"name" vs json:"fullName"',
        "p#Config incompatible: .Port: field is missing",
    ]


def test_check_all_methods_and_marshalers(tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("APICOMPAT_METHODS", raising=False)
    old, new = _write(tmp_path, "old.json", OLD), _write(tmp_path, "new.json", NEW)

    code, lines = _run_check(capsys, old, new, "--all-methods", "--no-ignore-marshalers")

    assert code == 1
    assert "p#Config incompatible: : method String is missing" in lines
    assert "p#Stamp incompatible: .Sec: field is missing" in lines


def test_check_method_names_from_environment(tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APICOMPAT_METHODS", "String")
    old, new = _write(tmp_path, "old.json", OLD), _write(tmp_path, "new.json", NEW)

    code, lines = _run_check(capsys, old, new)

    # Config declares String, so it is ignored; Stamp's marshaler is pruned.
    assert code == 1
    assert lines == [
        "type p#Legacy has gone away",
        "p#Stamp incompatible: .Sec: field is missing",
    ]


def test_check_identical_graphs_succeeds(tmp_path: Path, capsys):
    old, new = _write(tmp_path, "old.json", OLD), _write(tmp_path, "new.json", OLD)

    code, lines = _run_check(capsys, old, new, "--all-methods")

    assert code == 0
    assert lines == []


def test_check_load_failure_exits_with_message(tmp_path: Path, capsys):
    new = _write(tmp_path, "new.json", NEW)

    code, _ = _run_check(capsys, str(tmp_path / "missing.json"), new)

    assert "graph file not found" in str(code)


def test_convert_json_to_msgpack(tmp_path: Path, capsys):
    src = _write(tmp_path, "api.json", OLD)
    dst = tmp_path / "api.msgpack"

    main(["convert", src, str(dst)])

    assert capsys.readouterr().out.strip() == str(dst)
    assert codec.info_to_obj(codec.read_info(dst)) == OLD


def test_version_prints_something(capsys):
    main(["version"])
    assert capsys.readouterr().out.strip()

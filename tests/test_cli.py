import plistlib
import runpy
from pathlib import Path

import pytest

from bplist_reader import cli


def _write_bplist(path: Path, obj) -> None:
    path.write_bytes(plistlib.dumps(obj, fmt=plistlib.FMT_BINARY))


class _FakeStdin:
    def __init__(self, *, is_tty: bool) -> None:
        self._is_tty = is_tty

    def isatty(self) -> bool:
        return self._is_tty


def test_main_prints_decoded_tree(capsys, tmp_path) -> None:
    path = tmp_path / "Info.plist"
    _write_bplist(path, {"CFBundleIdentifier": "com.demo.main"})

    rc = cli.main(["-i", str(path)])
    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == '{\n  "CFBundleIdentifier" => "com.demo.main"\n}\n'
    assert "[bplist-reader] Decoding objects" in captured.err


def test_main_inspect_prints_geometry(capsys, tmp_path) -> None:
    path = tmp_path / "Info.plist"
    _write_bplist(path, {"k": 42})

    rc = cli.main(["-i", str(path), "--inspect"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Binary Plist Info:" in out
    assert "Object Count        : 3" in out


def test_main_verbose_logs_geometry(capsys, tmp_path) -> None:
    path = tmp_path / "Info.plist"
    _write_bplist(path, [1])

    cli.main(["-i", str(path), "--verbose"])
    assert "2 objects, offsetIntSize=1" in capsys.readouterr().err


def test_main_rejects_xml_plist(tmp_path) -> None:
    path = tmp_path / "Info.plist"
    path.write_bytes(plistlib.dumps({"a": 1}, fmt=plistlib.FMT_XML))

    with pytest.raises(SystemExit) as e:
        cli.main(["-i", str(path)])
    assert "not a binary plist" in str(e.value)


def test_main_reports_decode_error(tmp_path) -> None:
    data = bytearray(plistlib.dumps(["a"], fmt=plistlib.FMT_BINARY))
    # 把字符串对象的标记改成未知类型。
    data[10] = 0x70
    path = tmp_path / "bad.plist"
    path.write_bytes(bytes(data))

    with pytest.raises(SystemExit) as e:
        cli.main(["-i", str(path)])
    assert "failed to decode" in str(e.value)
    assert "unknown tag" in str(e.value)


def test_main_errors_when_input_missing(tmp_path) -> None:
    with pytest.raises(SystemExit) as e:
        cli.main(["-i", str(tmp_path / "nope.plist")])
    assert "plist not found" in str(e.value)


def test_main_auto_detects_single_plist_in_cwd(monkeypatch, capsys, tmp_path) -> None:
    _write_bplist(tmp_path / "only.plist", True)
    monkeypatch.chdir(tmp_path)

    rc = cli.main([])
    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert f"Auto input plist: {tmp_path / 'only.plist'}" in captured.err


def test_main_selects_plist_when_multiple_in_cwd(monkeypatch, capsys, tmp_path) -> None:
    _write_bplist(tmp_path / "a.plist", "first")
    _write_bplist(tmp_path / "b.bplist", "second")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli.sys, "stdin", _FakeStdin(is_tty=True))
    monkeypatch.setattr("builtins.input", lambda _prompt: "2")

    rc = cli.main([])
    assert rc == 0
    assert capsys.readouterr().out.endswith('"second"\n')


def test_main_errors_when_multiple_plists_non_interactive(monkeypatch, tmp_path) -> None:
    _write_bplist(tmp_path / "a.plist", 1)
    _write_bplist(tmp_path / "b.plist", 2)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli.sys, "stdin", _FakeStdin(is_tty=False))

    with pytest.raises(SystemExit) as e:
        cli.main([])
    assert "multiple plist files found" in str(e.value)
    assert "non-interactive mode" in str(e.value)


def test_main_errors_when_no_plist_in_cwd(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as e:
        cli.main([])
    assert "no .plist file found" in str(e.value)


def test_python_dash_m_runs_cli(monkeypatch, capsys, tmp_path) -> None:
    path = tmp_path / "Info.plist"
    _write_bplist(path, ["x"])
    monkeypatch.setattr(cli.sys, "argv", ["bplist-reader", "-i", str(path)])

    with pytest.raises(SystemExit) as e:
        runpy.run_module("bplist_reader", run_name="__main__")
    assert e.value.code == 0
    assert '0 => "x"' in capsys.readouterr().out

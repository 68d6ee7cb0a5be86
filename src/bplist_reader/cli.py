"""
`bplist-reader` 的命令行入口模块。

读取文件后交给 `bplist_reader.reader` 解码，并以文本形式打印值树或容器信息。
"""

import argparse
import os
import sys
from collections.abc import Sequence

from .errors import DecodeError
from .reader import inspect_bplist, is_binary_plist, read_binary_plist
from .render import print_bplist_info, print_value

_PLIST_SUFFIXES = (".plist", ".bplist")


def _log_step(message: str) -> None:
    """输出简洁的流程阶段提示（写到 stderr，stdout 只保留解码结果）。"""
    print(f"[bplist-reader] {message}", file=sys.stderr)


def _choose_candidate(*, candidates: list[str], context: str) -> str:
    """当候选有多个时，交互式让用户选择；非交互环境则报错。"""
    ordered = sorted(os.path.abspath(x) for x in candidates)
    if not sys.stdin.isatty():
        names = ", ".join(os.path.basename(x) for x in ordered)
        raise SystemExit(
            f"Error: multiple plist files found {context} in non-interactive mode.\n"
            f"Candidates: {names}\n"
            "Please pass the desired one via -i/--input.\n"
        )

    print(f"Multiple plist files found {context}. Please choose one:")
    for i, path in enumerate(ordered, start=1):
        print(f"  {i}) {path}")

    while True:
        raw = input(f"Select plist file [1-{len(ordered)}]: ").strip()
        if raw.isdigit():
            idx = int(raw)
            if 1 <= idx <= len(ordered):
                selected = ordered[idx - 1]
                print(f"Selected plist file: {selected}")
                return selected
        print("Invalid selection. Please enter a valid number.")


def _find_input_plist_in_cwd() -> str:
    """在当前工作目录自动发现输入 plist。"""
    cwd = os.getcwd()
    candidates: list[str] = []
    with os.scandir(cwd) as it:
        for entry in it:
            if not entry.is_file():
                continue
            if entry.name.lower().endswith(_PLIST_SUFFIXES):
                candidates.append(entry.path)

    if len(candidates) == 1:
        return os.path.abspath(candidates[0])
    if len(candidates) > 1:
        return _choose_candidate(candidates=candidates, context="in current directory")
    raise SystemExit(
        "Error: missing -i/--input and no .plist file found in current directory.\n"
        "Hint: pass input plist path via -i.\n"
    )


def build_parser() -> argparse.ArgumentParser:
    """构建并返回 `bplist-reader` 命令行参数解析器。"""
    p = argparse.ArgumentParser(
        prog="bplist-reader",
        formatter_class=argparse.RawTextHelpFormatter,
        description=(
            "Decode a binary property list (bplist00) and print its value tree.\n"
            "UIDs are shown as {\"CF$UID\" => n} dictionaries, as plutil does for XML."
        ),
    )
    p.add_argument("-i", "--input", default="", help="Input binary plist path")
    p.add_argument(
        "--inspect",
        action="store_true",
        help="Only validate header/trailer and print container geometry",
    )
    p.add_argument("--verbose", action="store_true", help="Verbose logging")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    """CLI 入口：解析参数、读取文件并解码。"""
    parser = build_parser()
    ns = parser.parse_args(argv)

    _log_step("Resolving input plist")
    if ns.input:
        input_path = os.path.abspath(os.path.expanduser(ns.input))
        if not os.path.isfile(input_path):
            raise SystemExit(f"Error: plist not found: {input_path}")
        _log_step(f"Using input plist: {input_path}")
    else:
        input_path = _find_input_plist_in_cwd()
        _log_step(f"Auto input plist: {input_path}")

    with open(input_path, "rb") as f:
        data = f.read()

    if not is_binary_plist(data):
        raise SystemExit(
            f"Error: not a binary plist (too short or missing bplist00 header): {input_path}\n"
            "Hint: XML/OpenStep plists can be read with plistlib or plutil.\n"
        )

    try:
        info = inspect_bplist(data)
        if ns.inspect:
            _log_step("Inspecting container")
            print_bplist_info(info)
            return 0
        if ns.verbose:
            _log_step(
                f"{info.object_count} objects, offsetIntSize={info.offset_int_size}, "
                f"objectRefSize={info.object_ref_size}, top={info.top_level_index}"
            )

        _log_step("Decoding objects")
        value = read_binary_plist(data)
    except DecodeError as e:
        raise SystemExit(f"Error: failed to decode {input_path}.\nDetail: {e}\n") from e
    except RecursionError as e:
        raise SystemExit(
            f"Error: failed to decode {input_path}.\n"
            "Detail: object graph is too deep or references itself.\n"
        ) from e

    print_value(value)
    return 0

"""
把解码后的值树与容器信息渲染为便于阅读的文本（风格接近 `plutil -p`）。
"""

from __future__ import annotations

from .types import (
    Array,
    Bool,
    BplistInfo,
    Data,
    Date,
    Dictionary,
    Int,
    Null,
    Real,
    String,
    Value,
)

_DATA_PREVIEW = 24
_INDENT = "  "


def _format_scalar(value: Value) -> str:
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "1" if value.value else "0"
    if isinstance(value, (Int, Real)):
        return repr(value.value)
    if isinstance(value, String):
        escaped = value.value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if isinstance(value, Date):
        try:
            return value.to_datetime().strftime("%Y-%m-%d %H:%M:%S +0000")
        except (OverflowError, ValueError):
            return f"<date {value.seconds!r}>"
    if isinstance(value, Data):
        preview = value.value[:_DATA_PREVIEW].hex()
        more = "..." if len(value.value) > _DATA_PREVIEW else ""
        return f"{{length = {len(value.value)}, bytes = 0x{preview}{more}}}"
    raise TypeError(f"not a plist value: {value!r}")


def _format(value: Value, depth: int, out: list[str], prefix: str) -> None:
    pad = _INDENT * depth
    if isinstance(value, Array):
        if not value.items:
            out.append(f"{pad}{prefix}[]")
            return
        out.append(f"{pad}{prefix}[")
        for i, item in enumerate(value.items):
            _format(item, depth + 1, out, f"{i} => ")
        out.append(f"{pad}]")
    elif isinstance(value, Dictionary):
        if not value.pairs:
            out.append(f"{pad}{prefix}{{}}")
            return
        out.append(f"{pad}{prefix}{{")
        for key, item in value.pairs:
            # 容器类型的键不展开。
            if isinstance(key, (Array, Dictionary)):
                key_text = "<container>"
            else:
                key_text = _format_scalar(key)
            _format(item, depth + 1, out, f"{key_text} => ")
        out.append(f"{pad}}}")
    else:
        out.append(f"{pad}{prefix}{_format_scalar(value)}")


def format_value(value: Value) -> str:
    """渲染整棵值树为多行文本。"""
    out: list[str] = []
    _format(value, 0, out, "")
    return "\n".join(out)


def print_value(value: Value) -> None:
    print(format_value(value))


def print_bplist_info(info: BplistInfo) -> None:
    """打印二进制 plist 容器几何信息。"""
    print("Binary Plist Info:")
    print(f"  Length              : {info.length}")
    print(f"  Object Count        : {info.object_count}")
    print(f"  Top Level Index     : {info.top_level_index}")
    print(f"  Offset Table Offset : {info.offset_table_offset}")
    print(f"  Offset Int Size     : {info.offset_int_size}")
    print(f"  Object Ref Size     : {info.object_ref_size}")

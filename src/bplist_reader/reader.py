"""
二进制 plist（`bplist00`）读取入口。

解码是纯函数：输入字节不会被修改，缓存只在单次调用内有效，
任何子对象失败都会让整个解码失败，不返回部分结果。
"""

from __future__ import annotations

from .context import is_binary_plist, load_context
from .extract import Cache, extract_object
from .types import BplistInfo, Value

__all__ = ["inspect_bplist", "is_binary_plist", "read_binary_plist"]


def read_binary_plist(data: bytes) -> Value:
    """完整解码二进制 plist，返回顶层值；失败时抛出 `DecodeError`。"""
    ctx = load_context(data)
    cache: Cache = {}
    try:
        return extract_object(ctx, ctx.top_level_index, cache)
    finally:
        cache.clear()
        ctx.data.release()


def inspect_bplist(data: bytes) -> BplistInfo:
    """只校验文件头与 trailer，返回容器几何信息，不解码对象。"""
    ctx = load_context(data)
    try:
        return ctx.info()
    finally:
        ctx.data.release()

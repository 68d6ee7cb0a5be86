"""
对象提取：按标记字节高 4 位分派到各类型的提取函数。

每个提取函数接收已确认在缓冲区内的标记字节偏移，自行完成长度解析与越界检查。
子对象通过 `extract_object` 递归解析，并在单次解码内按对象索引缓存。
"""

from __future__ import annotations

import struct
from collections.abc import Callable

from .context import (
    DecodeContext,
    checked_add,
    checked_mul,
    read_offset,
    read_self_sized_int,
    read_sized_int,
)
from .errors import (
    ObjectReferenceError,
    ResourceError,
    SizeError,
    TagError,
    TextDecodeError,
)
from .types import Array, Bool, Data, Date, Dictionary, Int, Null, Real, String, Value

# 对象标记（高 4 位）
TAG_SIMPLE = 0x00
TAG_INT = 0x10
TAG_REAL = 0x20
TAG_DATE = 0x30
TAG_DATA = 0x40
TAG_ASCII_STRING = 0x50
TAG_UNICODE_STRING = 0x60
TAG_UID = 0x80
TAG_ARRAY = 0xA0
TAG_DICTIONARY = 0xD0

# simple 对象取值
VALUE_NULL = 0x00
VALUE_FALSE = 0x08
VALUE_TRUE = 0x09
VALUE_FILLER = 0x0F

# 日期只接受 8 字节 double，整个字节作为标记。
FULL_DATE_TAG = 0x33

# 低 4 位为 0x0F 表示其后跟随一个显式长度整数。
EXPLICIT_LENGTH = 0x0F

Cache = dict[int, Value]


def extract_object(ctx: DecodeContext, index: int, cache: Cache) -> Value:
    """按对象索引提取值；成功后写入缓存，失败不缓存。"""
    if index >= ctx.object_count:
        raise ObjectReferenceError(
            f"Bad binary plist: object index {index} is out of range "
            f"(object count {ctx.object_count})."
        )

    cached = cache.get(index)
    if cached is not None:
        return cached

    offset = read_offset(ctx, index)
    if offset >= ctx.length:
        raise ObjectReferenceError(
            f"Bad binary plist: object {index} at offset {offset} is outside container."
        )

    tag = ctx.data[offset]
    extractor = _EXTRACTORS.get(tag & 0xF0)
    if extractor is None:
        raise TagError(f"Bad binary plist: unknown tag 0x{tag >> 4:X}.")

    result = extractor(ctx, offset, cache)
    cache[index] = result
    return result


def _check_payload(ctx: DecodeContext, offset: int, size: int, what: str) -> None:
    if checked_add(offset, size, what=what) > ctx.length:
        raise SizeError(f"Bad binary plist: {what} object overlaps end of container.")


def _read_length(ctx: DecodeContext, offset: int, what: str) -> tuple[int, int]:
    """解析变长对象的长度/数量，返回 `(size, payload_offset)`。"""
    size = ctx.data[offset] & 0x0F
    offset += 1
    if size == EXPLICIT_LENGTH:
        if offset >= ctx.length:
            raise SizeError(f"Bad binary plist: invalid {what} object size tag.")
        if ctx.data[offset] & 0xF0 != TAG_INT:
            raise TagError(f"Bad binary plist: {what} object size is not tagged as int.")
        size, extra = read_self_sized_int(ctx, offset)
        offset += extra
    return size, offset


def _extract_simple(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    marker = ctx.data[offset]
    if marker == VALUE_NULL:
        return Null()
    if marker == VALUE_TRUE:
        return Bool(True)
    if marker == VALUE_FALSE:
        return Bool(False)
    # VALUE_FILLER 也视为非法。
    raise TagError(f"Bad binary plist: invalid atom 0x{marker:02X}.")


def _extract_int(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    value, consumed = read_self_sized_int(ctx, offset)
    # 负数总是以 8 字节存储；更窄的宽度一律按无符号处理，不做符号扩展。
    if consumed == 9 and value & (1 << 63):
        value -= 1 << 64
    return Int(value)


def _extract_real(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    size = 1 << (ctx.data[offset] & 0x0F)
    if size == 4:
        fmt = ">f"
    elif size == 8:
        fmt = ">d"
    else:
        raise SizeError(f"Bad binary plist: can't handle {size}-byte float.")
    _check_payload(ctx, offset + 1, size, "floating-point number")
    return Real(struct.unpack_from(fmt, ctx.data, offset + 1)[0])


def _extract_date(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    if ctx.data[offset] != FULL_DATE_TAG:
        raise TagError("Bad binary plist: invalid size for date object.")
    _check_payload(ctx, offset + 1, 8, "date")
    return Date(struct.unpack_from(">d", ctx.data, offset + 1)[0])


def _extract_data(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    size, offset = _read_length(ctx, offset, "data")
    _check_payload(ctx, offset, size, "data")
    return Data(bytes(ctx.data[offset:offset + size]))


def _extract_ascii_string(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    size, offset = _read_length(ctx, offset, "string")
    _check_payload(ctx, offset, size, "string")
    try:
        return String(bytes(ctx.data[offset:offset + size]).decode("ascii"))
    except UnicodeDecodeError as e:
        raise TextDecodeError(f"Bad binary plist: invalid ASCII string: {e}") from e


def _extract_unicode_string(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    count, offset = _read_length(ctx, offset, "string")
    size = checked_mul(count, 2, what="string")
    _check_payload(ctx, offset, size, "string")
    try:
        return String(bytes(ctx.data[offset:offset + size]).decode("utf-16-be"))
    except UnicodeDecodeError as e:
        raise TextDecodeError(f"Bad binary plist: invalid UTF-16 string: {e}") from e


def _extract_uid(ctx: DecodeContext, offset: int, _cache: Cache) -> Value:
    # UID 在写成 XML/OpenStep plist 时展开为 {"CF$UID": n}，这里读取时保持一致。
    value, _consumed = read_self_sized_int(ctx, offset)
    return Dictionary.uid(value)


def _read_refs(ctx: DecodeContext, offset: int, count: int, what: str) -> list[int]:
    ref_size = ctx.object_ref_size
    try:
        return [read_sized_int(ctx, offset + i * ref_size, ref_size) for i in range(count)]
    except MemoryError as e:
        raise ResourceError(f"Not enough memory to read {what} of {count} entries.") from e


def _extract_array(ctx: DecodeContext, offset: int, cache: Cache) -> Value:
    count, offset = _read_length(ctx, offset, "array")
    size = checked_mul(ctx.object_ref_size, count, what="array")
    _check_payload(ctx, offset, size, "array")
    if count == 0:
        return Array()

    refs = _read_refs(ctx, offset, count, "array")
    items: list[Value] = []
    for ref in refs:
        items.append(extract_object(ctx, ref, cache))
    return Array(tuple(items))


def _extract_dictionary(ctx: DecodeContext, offset: int, cache: Cache) -> Value:
    count, offset = _read_length(ctx, offset, "dictionary")
    # 键表与值表各 count 项，依次排列，不交错。
    size = checked_mul(ctx.object_ref_size * 2, count, what="dictionary")
    _check_payload(ctx, offset, size, "dictionary")
    if count == 0:
        return Dictionary()

    refs = _read_refs(ctx, offset, count * 2, "dictionary")
    pairs: list[tuple[Value, Value]] = []
    for i in range(count):
        key = extract_object(ctx, refs[i], cache)
        value = extract_object(ctx, refs[count + i], cache)
        pairs.append((key, value))
    return Dictionary(tuple(pairs))


_EXTRACTORS: dict[int, Callable[[DecodeContext, int, Cache], Value]] = {
    TAG_SIMPLE: _extract_simple,
    TAG_INT: _extract_int,
    TAG_REAL: _extract_real,
    TAG_DATE: _extract_date,
    TAG_DATA: _extract_data,
    TAG_ASCII_STRING: _extract_ascii_string,
    TAG_UNICODE_STRING: _extract_unicode_string,
    TAG_UID: _extract_uid,
    TAG_ARRAY: _extract_array,
    TAG_DICTIONARY: _extract_dictionary,
}

"""
容器校验、偏移表与定长/自描述整数读取。

所有偏移与长度运算都在无符号 64 位范围内做溢出检查，再与缓冲区长度比较。
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import FormatError, SizeError
from .types import BplistInfo

HEADER = b"bplist00"
HEADER_SIZE = len(HEADER)
TRAILER_SIZE = 32
MIN_SANE_SIZE = HEADER_SIZE + TRAILER_SIZE

UINT64_MAX = (1 << 64) - 1

# 6 字节保留、offsetIntSize、objectRefSize、objectCount、topLevelObject、offsetTableOffset
_TRAILER = struct.Struct(">6xBBQQQ")


@dataclass(frozen=True)
class DecodeContext:
    """一次解码调用的只读上下文。"""

    data: memoryview
    length: int
    object_count: int
    top_level_index: int
    offset_table_offset: int
    offset_int_size: int
    object_ref_size: int

    def info(self) -> BplistInfo:
        return BplistInfo(
            length=self.length,
            object_count=self.object_count,
            top_level_index=self.top_level_index,
            offset_table_offset=self.offset_table_offset,
            offset_int_size=self.offset_int_size,
            object_ref_size=self.object_ref_size,
        )


def checked_add(a: int, b: int, *, what: str) -> int:
    """u64 加法，溢出时抛出 `SizeError`。"""
    total = a + b
    if total > UINT64_MAX:
        raise SizeError(f"Bad binary plist: {what} offset overflows.")
    return total


def checked_mul(a: int, b: int, *, what: str) -> int:
    """u64 乘法，溢出时抛出 `SizeError`。"""
    product = a * b
    if product > UINT64_MAX:
        raise SizeError(f"Bad binary plist: {what} size overflows.")
    return product


def is_binary_plist(data: bytes) -> bool:
    """只检查长度与 magic，不做完整校验。"""
    return len(data) >= MIN_SANE_SIZE and bytes(data[:HEADER_SIZE]) == HEADER


def load_context(data: bytes) -> DecodeContext:
    """校验文件头与 trailer，并建立解码上下文。"""
    if not is_binary_plist(data):
        raise FormatError("Bad binary plist: too short or invalid header.")

    view = memoryview(data)
    try:
        return _context_from_trailer(view)
    except BaseException:
        # 校验失败时不再持有调用方的缓冲区。
        view.release()
        raise


def _context_from_trailer(view: memoryview) -> DecodeContext:
    length = len(view)
    (
        offset_int_size,
        object_ref_size,
        object_count,
        top_level_index,
        offset_table_offset,
    ) = _TRAILER.unpack_from(view, length - TRAILER_SIZE)

    if (
        not 1 <= offset_int_size <= 8
        or not 1 <= object_ref_size <= 8
        or offset_table_offset < HEADER_SIZE
    ):
        raise FormatError("Bad binary plist: trailer declared insane.")

    try:
        table_size = checked_mul(offset_int_size, object_count, what="offset table")
        table_end = checked_add(table_size, offset_table_offset, what="offset table")
        table_end = checked_add(table_end, TRAILER_SIZE, what="offset table")
    except SizeError as e:
        raise FormatError(
            "Bad binary plist: offset table overlaps end of container."
        ) from e
    if table_end > length:
        raise FormatError("Bad binary plist: offset table overlaps end of container.")

    return DecodeContext(
        data=view,
        length=length,
        object_count=object_count,
        top_level_index=top_level_index,
        offset_table_offset=offset_table_offset,
        offset_int_size=offset_int_size,
        object_ref_size=object_ref_size,
    )


def read_sized_int(ctx: DecodeContext, offset: int, size: int) -> int:
    """读取 `size`（1-8）字节的大端无符号整数；调用方保证 `offset + size <= length`。"""
    return int.from_bytes(ctx.data[offset:offset + size], "big")


def read_offset(ctx: DecodeContext, index: int) -> int:
    """返回对象 `index` 在对象表中的字节偏移；调用方保证 `index < object_count`。"""
    return read_sized_int(
        ctx,
        ctx.offset_table_offset + ctx.offset_int_size * index,
        ctx.offset_int_size,
    )


def read_self_sized_int(ctx: DecodeContext, offset: int) -> tuple[int, int]:
    """
    读取自描述宽度整数，返回 `(value, consumed)`。

    标记字节低 4 位 `n` 表示宽度 `1 << n`；`consumed` 包含标记字节本身。
    格式允许超过 8 字节的编码，这里一律拒绝。
    """
    if offset >= ctx.length:
        raise SizeError("Bad binary plist: integer object overlaps end of container.")
    size = 1 << (ctx.data[offset] & 0x0F)
    if size > 8:
        raise SizeError(f"Bad binary plist: can't handle {size}-byte integer.")
    if checked_add(offset, 1 + size, what="integer") > ctx.length:
        raise SizeError("Bad binary plist: integer object overlaps end of container.")
    return read_sized_int(ctx, offset + 1, size), size + 1

import struct

import pytest


def _build_bplist(
    objects: list[bytes],
    *,
    top: int = 0,
    offset_int_size: int = 1,
    object_ref_size: int = 1,
    object_count: int | None = None,
    offsets: list[int] | None = None,
) -> bytes:
    """按原始对象字节拼出 `bplist00` 容器：头部、对象表、偏移表、trailer。"""
    body = bytearray(b"bplist00")
    computed: list[int] = []
    for obj in objects:
        computed.append(len(body))
        body += obj

    table_offset = len(body)
    for off in computed if offsets is None else offsets:
        body += off.to_bytes(offset_int_size, "big")

    count = len(objects) if object_count is None else object_count
    body += struct.pack(">6xBBQQQ", offset_int_size, object_ref_size, count, top, table_offset)
    return bytes(body)


@pytest.fixture
def build_bplist():
    return _build_bplist

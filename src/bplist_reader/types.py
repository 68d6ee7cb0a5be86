"""
解码结果与容器信息共享的轻量类型定义。

值树中的每个节点都是不可变的冻结数据类，可以安全地被多个父容器共享。
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Union

# 二进制 plist 的时间零点是 2001-01-01 00:00:00 UTC，而不是 Unix 纪元。
PLIST_EPOCH = datetime.datetime(2001, 1, 1, tzinfo=datetime.timezone.utc)

UID_KEY = "CF$UID"


@dataclass(frozen=True)
class Null:
    """plist 空值。"""


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Int:
    value: int


@dataclass(frozen=True)
class Real:
    value: float


@dataclass(frozen=True)
class Date:
    """自 2001-01-01T00:00:00Z 起的秒数。"""

    seconds: float

    def to_datetime(self) -> datetime.datetime:
        """转换为带 UTC 时区的 `datetime`。"""
        return PLIST_EPOCH + datetime.timedelta(seconds=self.seconds)


@dataclass(frozen=True)
class Data:
    value: bytes


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Array:
    items: tuple[Value, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx: int) -> Value:
        return self.items[idx]


@dataclass(frozen=True)
class Dictionary:
    """
    有序键值对序列。

    - 顺序即文件中键表的顺序。
    - 键可以是任意值类型，重复键不去重。
    - UID 以单键映射 `{"CF$UID": n}` 表示，与 XML/OpenStep plist 中的写法一致。
    """

    pairs: tuple[tuple[Value, Value], ...] = ()

    @classmethod
    def uid(cls, value: int) -> Dictionary:
        """构造 UID 对应的单键映射。"""
        return cls(((String(UID_KEY), Int(value)),))

    @property
    def uid_value(self) -> int | None:
        """若本映射是 UID 形式则返回其数值，否则返回 `None`。"""
        if len(self.pairs) != 1:
            return None
        key, value = self.pairs[0]
        if key == String(UID_KEY) and isinstance(value, Int):
            return value.value
        return None

    def __len__(self) -> int:
        return len(self.pairs)

    def keys(self) -> list[Value]:
        return [k for k, _v in self.pairs]

    def get(self, key: Value | str, default: Value | None = None) -> Value | None:
        """返回第一个键等于 `key` 的值；`str` 按 `String` 键匹配。"""
        if isinstance(key, str):
            key = String(key)
        for k, v in self.pairs:
            if k == key:
                return v
        return default


Value = Union[Null, Bool, Int, Real, Date, Data, String, Array, Dictionary]


@dataclass(frozen=True)
class BplistInfo:
    """二进制 plist 容器几何信息快照（来自 trailer）。"""

    length: int
    object_count: int
    top_level_index: int
    offset_table_offset: int
    offset_int_size: int
    object_ref_size: int

"""
`bplist00` 二进制属性列表解码器。
"""

from .errors import (
    DecodeError,
    FormatError,
    ObjectReferenceError,
    ResourceError,
    SizeError,
    TagError,
    TextDecodeError,
)
from .reader import inspect_bplist, is_binary_plist, read_binary_plist
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

__all__ = [
    "Array",
    "Bool",
    "BplistInfo",
    "Data",
    "Date",
    "DecodeError",
    "Dictionary",
    "FormatError",
    "Int",
    "Null",
    "ObjectReferenceError",
    "Real",
    "ResourceError",
    "SizeError",
    "String",
    "TagError",
    "TextDecodeError",
    "Value",
    "inspect_bplist",
    "is_binary_plist",
    "read_binary_plist",
]

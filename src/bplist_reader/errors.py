"""
二进制 plist 解码错误类型。

所有错误都继承自 `DecodeError`（同时也是 `ValueError`），调用方可以统一捕获，
把输入视为“不是合法的二进制 plist”。
"""

from __future__ import annotations


class DecodeError(ValueError):
    """二进制 plist 解码失败的基类。"""


class FormatError(DecodeError):
    """文件头 magic 错误或 trailer 声明的几何信息不合理。"""


class ObjectReferenceError(DecodeError):
    """对象索引越界，或偏移表给出的偏移落在容器之外。"""


class TagError(DecodeError):
    """未知类型标记，或固定形态类型的标记字节不匹配。"""


class SizeError(DecodeError):
    """声明的长度/数量越界、溢出，或宽度不受支持。"""


class TextDecodeError(DecodeError):
    """字符串字节按声明的编码无法解码。"""


class ResourceError(DecodeError):
    """物化数组/字典时内存不足。"""

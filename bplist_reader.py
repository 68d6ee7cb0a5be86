#!/usr/bin/env python3
"""
从源码目录直接运行 `bplist-reader`，无需先安装：

  python3 bplist_reader.py -i Preferences.plist --inspect
"""

import os
import sys

_PKG_ROOT = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if _PKG_ROOT not in sys.path:
    sys.path.insert(0, _PKG_ROOT)

# 以 `bplist_reader` 名义被导入时，子模块仍从 `src/bplist_reader/` 解析。
__path__ = [os.path.join(_PKG_ROOT, "bplist_reader")]


if __name__ == "__main__":
    from bplist_reader.cli import main

    raise SystemExit(main(sys.argv[1:]))

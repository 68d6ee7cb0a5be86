"""支持 `python -m bplist_reader`，与控制台脚本 `bplist-reader` 共用 `cli.main`。"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

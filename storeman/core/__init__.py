"""Storeman 核心模块"""

from .. import __version__
from .interfaces import PackageIndex, RepoManager
from .package import PackageIdentity
from .registry import BookmarkStore, RepoMeta, RepoRegistry, RepoStatus
from .version import Ordering, Version, compare, compare_strings

__all__ = [
    "__version__",
    # 系统接口
    "PackageIndex",
    "RepoManager",
    # 软件包
    "PackageIdentity",
    # 本地状态
    "BookmarkStore",
    "RepoMeta",
    "RepoRegistry",
    "RepoStatus",
    # 版本比较
    "Ordering",
    "Version",
    "compare",
    "compare_strings",
]

"""备份模块常量

定义备份文件键名、状态、事件以及备份和恢复的结果
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .errors import BackupErrorCode


# 备份文件中的分组和键名
GENERAL_SECTION = "General"
REPOS_SECTION = "repos"
PACKAGES_SECTION = "packages"

KEY_CREATED = "created"
KEY_REPOS_ALL = "all"
KEY_REPOS_DISABLED = "disabled"
KEY_INSTALLED = "installed"
KEY_BOOKMARKS = "bookmarks"

LIST_SEPARATOR = ","
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class BackupStatus(str, Enum):
    """备份/恢复状态"""

    IDLE = "idle"
    BACKING_UP = "backing_up"
    RESTORING_BOOKMARKS = "restoring_bookmarks"
    RESTORING_REPOS = "restoring_repos"
    SEARCHING_PACKAGES = "searching_packages"
    INSTALLING_PACKAGES = "installing_packages"
    REFRESHING_REPOS = "refreshing_repos"


class BackupEventType(str, Enum):
    """备份/恢复事件类型"""

    STATUS_CHANGED = "status_changed"
    BACKED_UP = "backed_up"
    RESTORED = "restored"
    ERROR = "error"


@dataclass
class BackupEvent:
    """备份/恢复事件"""

    type: BackupEventType
    status: BackupStatus
    error: Optional[BackupErrorCode] = None
    message: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.error is not None:
            return f"BackupEvent({self.type.value}: {self.error.value})"
        return f"BackupEvent({self.type.value}: {self.status.value})"


@dataclass(frozen=True)
class BackupSnapshot:
    """备份快照

    不可变值，由 BackupStore 读写
    """

    created_at: datetime
    """创建时间（UTC）"""

    repos: Tuple[str, ...] = ()
    """仓库作者列表"""

    disabled_repos: FrozenSet[str] = frozenset()
    """被禁用的仓库作者，必须是 repos 的子集"""

    installed_package_names: Tuple[str, ...] = ()
    """已安装的软件包名称"""

    bookmark_ids: Tuple[int, ...] = ()
    """收藏 ID"""

    def __post_init__(self):
        stray = set(self.disabled_repos) - set(self.repos)
        if stray:
            raise ValueError(f"禁用的仓库不在仓库列表中: {sorted(stray)}")


@dataclass
class BackupDetails:
    """备份文件摘要"""

    created_at: Optional[datetime]
    """创建时间（本地时间）"""

    repos: int = 0
    """仓库数量"""

    packages: int = 0
    """软件包数量"""

    bookmarks: int = 0
    """收藏数量"""

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "created": self.created_at.isoformat() if self.created_at else None,
            "repos": self.repos,
            "packages": self.packages,
            "bookmarks": self.bookmarks,
        }


@dataclass
class BackupResult:
    """备份操作结果"""

    success: bool
    """是否成功"""

    path: str = ""
    """备份文件路径"""

    message: str = ""
    """结果消息"""

    error: Optional[BackupErrorCode] = None
    """错误类型"""

    repos: int = 0
    """备份的仓库数量"""

    packages: int = 0
    """备份的软件包数量"""

    bookmarks: int = 0
    """备份的收藏数量"""

    duration: float = 0.0
    """耗时（秒）"""

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "success": self.success,
            "path": self.path,
            "message": self.message,
            "error": self.error.value if self.error else None,
            "repos": self.repos,
            "packages": self.packages,
            "bookmarks": self.bookmarks,
            "duration": self.duration,
        }


@dataclass
class RestoreResult:
    """恢复操作结果"""

    success: bool
    """是否成功"""

    message: str = ""
    """结果消息"""

    error: Optional[BackupErrorCode] = None
    """终止恢复的错误类型"""

    bookmarks_added: int = 0
    """新增的收藏数量"""

    repos_added: List[str] = field(default_factory=list)
    """新增的仓库别名"""

    installed: List[str] = field(default_factory=list)
    """提交安装的软件包 ID"""

    not_found: List[str] = field(default_factory=list)
    """未在任何仓库中找到的软件包名称"""

    errors: List[str] = field(default_factory=list)
    """错误列表"""

    duration: float = 0.0
    """耗时（秒）"""

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "success": self.success,
            "message": self.message,
            "error": self.error.value if self.error else None,
            "bookmarks_added": self.bookmarks_added,
            "repos_added": self.repos_added,
            "installed": self.installed,
            "not_found": self.not_found,
            "errors": self.errors,
            "duration": self.duration,
        }


__all__ = [
    "GENERAL_SECTION",
    "REPOS_SECTION",
    "PACKAGES_SECTION",
    "KEY_CREATED",
    "KEY_REPOS_ALL",
    "KEY_REPOS_DISABLED",
    "KEY_INSTALLED",
    "KEY_BOOKMARKS",
    "LIST_SEPARATOR",
    "TIMESTAMP_FORMAT",
    "BackupStatus",
    "BackupEventType",
    "BackupEvent",
    "BackupSnapshot",
    "BackupDetails",
    "BackupResult",
    "RestoreResult",
]

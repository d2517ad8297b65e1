"""备份模块

提供仓库、已安装软件包和收藏的备份与恢复功能
"""

from .bookmarks import merge_bookmarks
from .constants import (
    BackupDetails,
    BackupEvent,
    BackupEventType,
    BackupResult,
    BackupSnapshot,
    BackupStatus,
    RestoreResult,
)
from .errors import (
    BackupDirectoryError,
    BackupError,
    BackupErrorCode,
    BackupFileExistsError,
    BackupFileNotFoundError,
    BackupFormatError,
    BackupStoreError,
    ExternalCallError,
)
from .exporter import BackupStateMachine
from .importer import RestoreStateMachine
from .manager import BackupManager
from .repos import RepoReconciler
from .search import PackageSearchCoordinator, RestoreContext
from .selector import PackageSelector, newest
from .state import OperationState
from .store import BackupStore

__all__ = [
    "merge_bookmarks",
    "BackupDetails",
    "BackupEvent",
    "BackupEventType",
    "BackupResult",
    "BackupSnapshot",
    "BackupStatus",
    "RestoreResult",
    "BackupDirectoryError",
    "BackupError",
    "BackupErrorCode",
    "BackupFileExistsError",
    "BackupFileNotFoundError",
    "BackupFormatError",
    "BackupStoreError",
    "ExternalCallError",
    "BackupStateMachine",
    "RestoreStateMachine",
    "BackupManager",
    "RepoReconciler",
    "PackageSearchCoordinator",
    "RestoreContext",
    "PackageSelector",
    "newest",
    "OperationState",
    "BackupStore",
]

"""备份管理器

组合备份和恢复状态机，二者共享同一个操作状态，因此互斥
"""

from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Union

from loguru import logger

from ...config import get_default_config
from ..interfaces import PackageIndex, RepoManager
from ..registry import BookmarkStore, RepoRegistry
from ..utils import get_storeman_backups_path
from .constants import BackupDetails, BackupResult, BackupStatus, RestoreResult
from .exporter import BackupStateMachine
from .importer import RestoreStateMachine
from .repos import RepoReconciler
from .search import PackageSearchCoordinator
from .state import BackupWatcher, OperationState
from .store import BackupStore


PathLike = Union[str, Path]


class BackupManager:
    """备份管理器

    对宿主应用暴露备份、恢复、摘要、删除和状态监听接口
    """

    def __init__(
        self,
        registry: RepoRegistry,
        bookmarks: BookmarkStore,
        repo_manager: RepoManager,
        index: PackageIndex,
        config: Optional[Mapping] = None,
    ):
        """初始化备份管理器

        Args:
            registry: 本地仓库表
            bookmarks: 收藏集合
            repo_manager: 系统仓库管理接口
            index: 软件包索引
            config: 配置（StoremanConfig 或同结构的字典），为 None 时使用默认配置
        """
        if config is None:
            config = get_default_config()

        repos_conf = config["repos"]
        backup_conf = config["backup"]
        restore_conf = config["restore"]

        self.registry = registry
        self.bookmarks = bookmarks
        self.name_prefix: str = repos_conf["name_prefix"]
        self.backup_directory = Path(backup_conf["directory"] or get_storeman_backups_path())
        self.file_suffix: str = backup_conf["file_suffix"]

        self.state = OperationState()
        self.store = BackupStore(file_suffix=self.file_suffix)

        self.backup_machine = BackupStateMachine(
            state=self.state,
            store=self.store,
            registry=registry,
            bookmarks=bookmarks,
            name_prefix=self.name_prefix,
        )
        self.restore_machine = RestoreStateMachine(
            state=self.state,
            store=self.store,
            bookmarks=bookmarks,
            reconciler=RepoReconciler(
                registry=registry,
                repo_manager=repo_manager,
                name_prefix=self.name_prefix,
                base_url=repos_conf["base_url"],
                state=self.state,
            ),
            search=PackageSearchCoordinator(
                index=index,
                name_prefix=self.name_prefix,
                installed_repo=repos_conf["installed_repo"],
                state=self.state,
            ),
            index=index,
            refresh_before_search=restore_conf["refresh_before_search"],
            force_refresh=restore_conf["force_refresh"],
        )

    @property
    def status(self) -> BackupStatus:
        """当前状态"""
        return self.state.status

    def watch(self, watcher: BackupWatcher) -> None:
        """添加事件监听器"""
        self.state.watch(watcher)

    def remove_watcher(self, watcher: BackupWatcher) -> None:
        """移除事件监听器"""
        self.state.remove_watcher(watcher)

    async def backup(self, path: Optional[PathLike] = None) -> BackupResult:
        """创建备份

        Args:
            path: 备份文件路径，默认在备份目录中按时间命名
        """
        return await self.backup_machine.backup(path or self.default_backup_path())

    async def restore(self, path: PathLike) -> RestoreResult:
        """从备份文件恢复"""
        return await self.restore_machine.restore(path)

    def not_found(self) -> List[str]:
        """上一次恢复中未找到的软件包名称"""
        return self.restore_machine.not_found()

    def details(self, path: PathLike) -> BackupDetails:
        """读取备份摘要"""
        return self.store.summarize(path)

    def remove_file(self, path: PathLike) -> bool:
        """删除备份文件"""
        return self.store.delete_file(path)

    def list_backups(self) -> List[Path]:
        """列出备份目录中的备份文件"""
        return self.store.list_backups(self.backup_directory)

    def default_backup_path(self, moment: Optional[datetime] = None) -> Path:
        """按时间生成的备份文件路径"""
        moment = moment or datetime.now()
        path = self.backup_directory / f"storeman-{moment:%Y%m%d-%H%M%S}{self.file_suffix}"
        logger.debug(f"默认备份路径: {path}")
        return path


__all__ = ["BackupManager"]

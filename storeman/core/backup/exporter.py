"""备份导出器

从当前仓库表、已安装软件包和收藏生成备份文件
"""

import asyncio
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from loguru import logger

from ..registry import BookmarkStore, RepoRegistry
from .constants import BackupEventType, BackupResult, BackupSnapshot
from .errors import BackupErrorCode, BackupStoreError
from .state import BackingUp, OperationState
from .store import BackupStore


class BackupStateMachine:
    """备份状态机

    Idle -> BackingUp -> Idle，文件写入在工作线程中执行
    """

    def __init__(
        self,
        state: OperationState,
        store: BackupStore,
        registry: RepoRegistry,
        bookmarks: BookmarkStore,
        name_prefix: str,
    ):
        """初始化备份状态机

        Args:
            state: 共享操作状态
            store: 备份文件存储
            registry: 本地仓库表
            bookmarks: 收藏集合
            name_prefix: 仓库别名前缀
        """
        self.state = state
        self.store = store
        self.registry = registry
        self.bookmarks = bookmarks
        self.name_prefix = name_prefix

    def collect(self) -> BackupSnapshot:
        """收集当前状态

        只备份来自受管仓库的已安装软件包
        """
        authors = self.registry.authors(self.name_prefix)
        repos = [author for author, _ in authors]
        disabled = {author for author, enabled in authors if not enabled}

        repo_packages = self.registry.repo_package_names()
        installed = sorted(
            name for name in self.registry.installed_packages if name in repo_packages
        )

        return BackupSnapshot(
            created_at=datetime.now(timezone.utc),
            repos=tuple(repos),
            disabled_repos=frozenset(disabled),
            installed_package_names=tuple(installed),
            bookmark_ids=tuple(sorted(self.bookmarks.bookmarks)),
        )

    async def _fail(self, result: BackupResult, code: BackupErrorCode, message: str) -> BackupResult:
        result.error = code
        result.message = message
        await self.state.emit(BackupEventType.ERROR, code, message)
        return result

    async def backup(self, path: Union[str, Path]) -> BackupResult:
        """创建备份

        Args:
            path: 备份文件路径，文件不能已存在

        Returns:
            备份结果
        """
        start_time = time.time()
        path = Path(path)
        result = BackupResult(success=False, path=str(path))

        if not self.state.is_idle:
            logger.warning(f"无法备份，当前状态: {self.state.status.value}")
            result.error = BackupErrorCode.ALREADY_BUSY
            result.message = "已有备份或恢复操作在进行中"
            return result

        if path.exists():
            logger.error(f"备份文件已存在: {path}")
            return await self._fail(
                result, BackupErrorCode.FILE_ALREADY_EXISTS, f"备份文件已存在: {path}"
            )

        directory = path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"无法创建目录 {directory}: {e}")
            return await self._fail(
                result, BackupErrorCode.DIRECTORY_ERROR, f"无法创建目录: {directory}"
            )

        snapshot = self.collect()
        if not self.state.try_acquire(BackingUp(path=str(path))):
            result.error = BackupErrorCode.ALREADY_BUSY
            result.message = "已有备份或恢复操作在进行中"
            return result

        logger.info(f"开始备份: {path}")
        error = None
        try:
            await self.state.emit(BackupEventType.STATUS_CHANGED)
            await asyncio.to_thread(self.store.write, path, snapshot)
        except BackupStoreError as e:
            error = e
        finally:
            await self.state.release()

        result.duration = time.time() - start_time
        if error is not None:
            logger.error(f"备份失败: {error}")
            return await self._fail(result, error.code, str(error))

        result.success = True
        result.message = "备份完成"
        result.repos = len(snapshot.repos)
        result.packages = len(snapshot.installed_package_names)
        result.bookmarks = len(snapshot.bookmark_ids)

        logger.info(
            f"备份完成: {result.repos} 个仓库, {result.packages} 个软件包, "
            f"{result.bookmarks} 个收藏"
        )
        await self.state.emit(BackupEventType.BACKED_UP)
        return result


__all__ = ["BackupStateMachine"]

"""备份导入器

从备份文件恢复收藏、仓库和软件包

恢复阶段（固定顺序）：
    Idle -> RestoringBookmarks -> RestoringRepos -> SearchingPackages
         -> InstallingPackages -> RefreshingRepos -> Idle

每个阶段处理完成后返回下一个状态，由驱动循环依次执行，
同一时间至多有一个外部调用在进行
"""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger

from ..interfaces import PackageIndex
from ..registry import BookmarkStore
from .bookmarks import merge_bookmarks
from .constants import BackupEventType, BackupSnapshot, RestoreResult
from .errors import BackupErrorCode, BackupStoreError, ExternalCallError
from .repos import RepoReconciler
from .search import PackageSearchCoordinator, RestoreContext
from .selector import PackageSelector
from .state import (
    Idle,
    InstallingPackages,
    OperationState,
    OperationStep,
    RefreshingRepos,
    RestoringBookmarks,
    RestoringRepos,
    SearchingPackages,
)
from .store import BackupStore


@dataclass
class _RestoreRun:
    snapshot: BackupSnapshot
    result: RestoreResult
    context: Optional[RestoreContext] = None


class RestoreStateMachine:
    """恢复状态机"""

    def __init__(
        self,
        state: OperationState,
        store: BackupStore,
        bookmarks: BookmarkStore,
        reconciler: RepoReconciler,
        search: PackageSearchCoordinator,
        index: PackageIndex,
        selector: Optional[PackageSelector] = None,
        refresh_before_search: bool = False,
        force_refresh: bool = False,
    ):
        """初始化恢复状态机

        Args:
            state: 共享操作状态
            store: 备份文件存储
            bookmarks: 收藏集合
            reconciler: 仓库恢复器
            search: 软件包搜索协调器
            index: 软件包索引（安装和刷新缓存）
            selector: 软件包选择器
            refresh_before_search: 是否在搜索前刷新缓存，使新添加的仓库可被搜索
            force_refresh: 是否强制刷新缓存
        """
        self.state = state
        self.store = store
        self.bookmarks = bookmarks
        self.reconciler = reconciler
        self.search = search
        self.index = index
        self.selector = selector or PackageSelector()
        self.refresh_before_search = refresh_before_search
        self.force_refresh = force_refresh

        self._not_found: List[str] = []
        self._handlers: Dict[type, Callable[[OperationStep, _RestoreRun], Awaitable[OperationStep]]] = {
            RestoringBookmarks: self._restore_bookmarks,
            RestoringRepos: self._restore_repos,
            SearchingPackages: self._search_packages,
            InstallingPackages: self._install_packages,
            RefreshingRepos: self._refresh_repos,
        }

    def not_found(self) -> List[str]:
        """上一次恢复中未在任何受管仓库找到的软件包名称"""
        return list(self._not_found)

    # ========== 各阶段 ==========

    async def _restore_bookmarks(self, step: RestoringBookmarks, run: _RestoreRun) -> OperationStep:
        logger.info("恢复收藏...")
        run.result.bookmarks_added = await merge_bookmarks(self.bookmarks, step.bookmark_ids)
        return RestoringRepos(
            authors=run.snapshot.repos,
            disabled=run.snapshot.disabled_repos,
        )

    async def _restore_repos(self, step: RestoringRepos, run: _RestoreRun) -> OperationStep:
        logger.info("恢复仓库...")
        run.result.repos_added = await self.reconciler.reconcile(step.authors, step.disabled)
        if self.refresh_before_search:
            return RefreshingRepos(force=self.force_refresh, then_search=True)
        return SearchingPackages(names=run.snapshot.installed_package_names)

    async def _search_packages(self, step: SearchingPackages, run: _RestoreRun) -> OperationStep:
        logger.info("搜索软件包...")
        run.context = await self.search.search(step.names)
        self._not_found = run.context.not_found()
        run.result.not_found = list(self._not_found)
        if self._not_found:
            logger.warning(f"未找到的软件包: {', '.join(self._not_found)}")

        return InstallingPackages(
            packages_found=run.context.packages_found,
            already_installed=run.context.already_installed,
        )

    async def _install_packages(self, step: InstallingPackages, run: _RestoreRun) -> OperationStep:
        selected = self.selector.select(step.packages_found, step.already_installed)
        package_ids = [p.package_id for p in selected]
        if not package_ids:
            logger.info("没有需要安装的软件包")
            return Idle()

        logger.info(f"安装软件包: {', '.join(package_ids)}")
        await self.index.install_packages(package_ids)
        run.result.installed = package_ids
        return RefreshingRepos(force=self.force_refresh)

    async def _refresh_repos(self, step: RefreshingRepos, run: _RestoreRun) -> OperationStep:
        logger.info("刷新仓库...")
        await self.index.refresh_cache(step.force)
        if step.then_search:
            return SearchingPackages(names=run.snapshot.installed_package_names)
        return Idle()

    # ========== 驱动 ==========

    async def _run(self, first: OperationStep, run: _RestoreRun) -> None:
        step = first
        while True:
            handler = self._handlers[type(step)]
            step = await handler(step, run)
            if isinstance(step, Idle):
                return
            await self.state.transition(step)

    async def _fail(self, result: RestoreResult, code: BackupErrorCode, message: str) -> RestoreResult:
        result.error = code
        result.message = message
        result.errors.append(message)
        await self.state.emit(BackupEventType.ERROR, code, message)
        return result

    async def restore(self, path: Union[str, Path]) -> RestoreResult:
        """从备份文件恢复

        Args:
            path: 备份文件路径

        Returns:
            恢复结果
        """
        start_time = time.time()
        path = Path(path)
        result = RestoreResult(success=False)

        if not path.is_file():
            logger.error(f"备份文件不存在: {path}")
            return await self._fail(
                result, BackupErrorCode.FILE_NOT_FOUND, f"备份文件不存在: {path}"
            )

        if not self.state.is_idle:
            logger.warning(f"无法恢复，当前状态: {self.state.status.value}")
            result.error = BackupErrorCode.ALREADY_BUSY
            result.message = "已有备份或恢复操作在进行中"
            return result

        try:
            snapshot = await asyncio.to_thread(self.store.read, path)
        except BackupStoreError as e:
            logger.error(f"读取备份失败: {e}")
            return await self._fail(result, e.code, str(e))

        first = RestoringBookmarks(bookmark_ids=snapshot.bookmark_ids)
        if not self.state.try_acquire(first):
            result.error = BackupErrorCode.ALREADY_BUSY
            result.message = "已有备份或恢复操作在进行中"
            return result

        logger.info(f"开始恢复: {path}")
        self._not_found = []
        run = _RestoreRun(snapshot=snapshot, result=result)
        error = None
        try:
            await self.state.emit(BackupEventType.STATUS_CHANGED)
            await self._run(first, run)
        except ExternalCallError as e:
            error = e
        finally:
            await self.state.release()

        result.duration = time.time() - start_time
        if error is not None:
            logger.error(f"恢复中止: {error}")
            return await self._fail(result, error.code, str(error))

        result.success = True
        result.message = "恢复完成"
        logger.info(f"恢复完成，耗时: {result.duration:.2f}秒")
        await self.state.emit(BackupEventType.RESTORED)
        return result


__all__ = ["RestoreStateMachine"]

"""备份/恢复操作状态

每个状态是一个带数据的不可变变体，当前状态由 OperationState 统一持有，
同一时间只允许一个备份或恢复操作
"""

from dataclasses import dataclass, field
from typing import (
    Awaitable,
    Callable,
    ClassVar,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from loguru import logger

from ..package import PackageIdentity
from .constants import BackupEvent, BackupEventType, BackupStatus
from .errors import BackupErrorCode


@dataclass(frozen=True)
class Idle:
    status: ClassVar[BackupStatus] = BackupStatus.IDLE


@dataclass(frozen=True)
class BackingUp:
    status: ClassVar[BackupStatus] = BackupStatus.BACKING_UP

    path: str


@dataclass(frozen=True)
class RestoringBookmarks:
    status: ClassVar[BackupStatus] = BackupStatus.RESTORING_BOOKMARKS

    bookmark_ids: Tuple[int, ...]


@dataclass(frozen=True)
class RestoringRepos:
    status: ClassVar[BackupStatus] = BackupStatus.RESTORING_REPOS

    authors: Tuple[str, ...]
    disabled: FrozenSet[str]


@dataclass(frozen=True)
class SearchingPackages:
    status: ClassVar[BackupStatus] = BackupStatus.SEARCHING_PACKAGES

    names: Tuple[str, ...]


@dataclass(frozen=True)
class InstallingPackages:
    status: ClassVar[BackupStatus] = BackupStatus.INSTALLING_PACKAGES

    # 搜索结果，在本阶段筛选出要安装的软件包
    packages_found: Mapping[str, Sequence[PackageIdentity]] = field(default_factory=dict, compare=False)
    already_installed: Mapping[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class RefreshingRepos:
    status: ClassVar[BackupStatus] = BackupStatus.REFRESHING_REPOS

    force: bool = False
    # 刷新后是否继续搜索软件包（恢复前刷新）
    then_search: bool = False


OperationStep = Union[
    Idle,
    BackingUp,
    RestoringBookmarks,
    RestoringRepos,
    SearchingPackages,
    InstallingPackages,
    RefreshingRepos,
]

BackupWatcher = Callable[[BackupEvent], Awaitable[None]]


class OperationState:
    """共享的操作状态

    备份和恢复共用一个实例，实现互斥
    """

    def __init__(self):
        self._current: OperationStep = Idle()
        self._watchers: List[BackupWatcher] = []

    @property
    def current(self) -> OperationStep:
        """当前状态变体"""
        return self._current

    @property
    def status(self) -> BackupStatus:
        """当前状态"""
        return self._current.status

    @property
    def is_idle(self) -> bool:
        return isinstance(self._current, Idle)

    def try_acquire(self, step: OperationStep) -> bool:
        """空闲时进入指定状态

        检查和设置之间没有挂起点，因此在同一事件循环中是原子的

        Args:
            step: 要进入的状态

        Returns:
            是否成功，非空闲时返回 False 且状态不变
        """
        if not self.is_idle:
            logger.warning(f"已有操作在进行中: {self.status.value}")
            return False
        self._current = step
        return True

    async def transition(self, step: OperationStep) -> None:
        """切换状态，状态改变时通知监听器"""
        old_status = self.status
        self._current = step
        if step.status != old_status:
            logger.debug(f"状态切换: {old_status.value} -> {step.status.value}")
            await self.emit(BackupEventType.STATUS_CHANGED)

    async def release(self) -> None:
        """回到空闲状态"""
        await self.transition(Idle())

    def watch(self, watcher: BackupWatcher) -> None:
        """添加事件监听器"""
        self._watchers.append(watcher)
        logger.debug(f"添加备份事件监听器: {watcher}")

    def remove_watcher(self, watcher: BackupWatcher) -> None:
        """移除事件监听器"""
        if watcher in self._watchers:
            self._watchers.remove(watcher)
            logger.debug(f"移除备份事件监听器: {watcher}")

    async def emit(
        self,
        event_type: BackupEventType,
        error: Optional[BackupErrorCode] = None,
        message: str = "",
    ) -> None:
        """通知所有监听器"""
        event = BackupEvent(
            type=event_type,
            status=self.status,
            error=error,
            message=message,
        )
        for watcher in self._watchers:
            try:
                await watcher(event)
            except Exception as e:
                logger.error(f"备份事件监听器错误: {e}")


__all__ = [
    "Idle",
    "BackingUp",
    "RestoringBookmarks",
    "RestoringRepos",
    "SearchingPackages",
    "InstallingPackages",
    "RefreshingRepos",
    "OperationStep",
    "BackupWatcher",
    "OperationState",
]

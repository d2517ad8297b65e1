"""本地仓库与收藏状态

仓库表和收藏集合作为显式对象注入到备份/恢复状态机中，
所有修改都发生在状态机所在的事件循环中
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Set, Tuple

from loguru import logger


class RepoStatus(str, Enum):
    """仓库状态"""

    NOT_INSTALLED = "not_installed"
    DISABLED = "disabled"
    ENABLED = "enabled"


@dataclass
class RepoMeta:
    """仓库元数据"""

    enabled: bool = True
    """是否启用"""

    packages: Set[str] = field(default_factory=set)
    """仓库提供的软件包名称"""


class RepoRegistry:
    """本地仓库表

    维护 别名 -> 仓库元数据 的映射以及已安装软件包
    """

    def __init__(
        self,
        repos: Dict[str, RepoMeta] | None = None,
        installed_packages: Dict[str, str] | None = None,
    ):
        """初始化仓库表

        Args:
            repos: 仓库映射 {别名: 元数据}
            installed_packages: 已安装软件包 {名称: 版本}
        """
        self.repos: Dict[str, RepoMeta] = dict(repos or {})
        self.installed_packages: Dict[str, str] = dict(installed_packages or {})

    def repo_status(self, alias: str) -> RepoStatus:
        """获取仓库状态"""
        meta = self.repos.get(alias)
        if meta is None:
            return RepoStatus.NOT_INSTALLED
        return RepoStatus.ENABLED if meta.enabled else RepoStatus.DISABLED

    def set_repo(self, alias: str, enabled: bool) -> None:
        """添加仓库或更新启用状态，保留已有的软件包列表"""
        meta = self.repos.get(alias)
        if meta is None:
            self.repos[alias] = RepoMeta(enabled=enabled)
            logger.debug(f"添加仓库记录: {alias} (启用: {enabled})")
        else:
            meta.enabled = enabled
            logger.debug(f"更新仓库记录: {alias} (启用: {enabled})")

    def aliases(self) -> List[str]:
        """按别名排序的仓库列表"""
        return sorted(self.repos)

    def authors(self, prefix: str) -> List[Tuple[str, bool]]:
        """按别名排序的 (作者, 是否启用) 列表

        Args:
            prefix: 仓库别名前缀，别名去掉前缀即为作者名
        """
        result = []
        for alias in self.aliases():
            author = alias[len(prefix):] if alias.startswith(prefix) else alias
            result.append((author, self.repos[alias].enabled))
        return result

    def repo_package_names(self) -> Set[str]:
        """所有仓库提供的软件包名称"""
        names: Set[str] = set()
        for meta in self.repos.values():
            names.update(meta.packages)
        return names


BookmarksWatcher = Callable[[], Awaitable[None]]


class BookmarkStore:
    """收藏集合

    收藏为目录中应用的整数 ID，集合变化时通知监听器
    """

    def __init__(self, bookmarks: Iterable[int] = ()):
        self._bookmarks: Set[int] = set(bookmarks)
        self._watchers: List[BookmarksWatcher] = []

    @property
    def bookmarks(self) -> Set[int]:
        """当前收藏（副本）"""
        return set(self._bookmarks)

    def __contains__(self, bookmark_id: int) -> bool:
        return bookmark_id in self._bookmarks

    def __len__(self) -> int:
        return len(self._bookmarks)

    def watch(self, watcher: BookmarksWatcher) -> None:
        """添加变更监听器"""
        self._watchers.append(watcher)

    def remove_watcher(self, watcher: BookmarksWatcher) -> None:
        """移除变更监听器"""
        if watcher in self._watchers:
            self._watchers.remove(watcher)

    async def add_many(self, ids: Iterable[int]) -> int:
        """合并收藏

        Args:
            ids: 要加入的收藏 ID

        Returns:
            新增的收藏数量，仅在大于 0 时通知监听器
        """
        before = len(self._bookmarks)
        self._bookmarks.update(ids)
        added = len(self._bookmarks) - before
        if added:
            await self._notify()
        return added

    async def _notify(self) -> None:
        for watcher in self._watchers:
            try:
                await watcher()
            except Exception as e:
                logger.error(f"收藏监听器错误: {e}")


__all__ = [
    "RepoStatus",
    "RepoMeta",
    "RepoRegistry",
    "BookmarksWatcher",
    "BookmarkStore",
]

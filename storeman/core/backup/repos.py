"""仓库恢复

重新添加备份中缺失的仓库
"""

from typing import AbstractSet, Iterable, List, Optional

from loguru import logger

from ..interfaces import RepoManager
from ..registry import RepoRegistry, RepoStatus
from .errors import ExternalCallError
from .state import OperationState
from .constants import BackupEventType


class RepoReconciler:
    """仓库恢复器

    仓库别名为 `<前缀><作者>`，仓库地址由作者名填充地址模板得到
    """

    def __init__(
        self,
        registry: RepoRegistry,
        repo_manager: RepoManager,
        name_prefix: str,
        base_url: str,
        state: Optional[OperationState] = None,
    ):
        """初始化仓库恢复器

        Args:
            registry: 本地仓库表
            repo_manager: 系统仓库管理接口
            name_prefix: 仓库别名前缀
            base_url: 仓库地址模板，包含 `{author}` 占位符
            state: 操作状态，用于转发错误事件
        """
        self.registry = registry
        self.repo_manager = repo_manager
        self.name_prefix = name_prefix
        self.base_url = base_url
        self.state = state

    def alias_for(self, author: str) -> str:
        """作者对应的仓库别名"""
        return f"{self.name_prefix}{author}"

    def url_for(self, author: str) -> str:
        """作者对应的仓库地址"""
        return self.base_url.format(author=author)

    async def reconcile(
        self, authors: Iterable[str], disabled: AbstractSet[str]
    ) -> List[str]:
        """恢复仓库

        Args:
            authors: 备份中的仓库作者
            disabled: 被禁用的仓库作者

        Returns:
            新添加或更新的仓库别名
        """
        added = []
        for author in authors:
            alias = self.alias_for(author)
            enabled = author not in disabled
            wanted = RepoStatus.ENABLED if enabled else RepoStatus.DISABLED

            if self.registry.repo_status(alias) == wanted:
                logger.debug(f"仓库 {alias} 已存在，跳过")
                continue

            try:
                await self.repo_manager.add_repo(alias, self.url_for(author))
            except ExternalCallError as e:
                logger.error(f"添加仓库 {alias} 失败: {e}")
                if self.state is not None:
                    await self.state.emit(BackupEventType.ERROR, e.code, str(e))
                continue

            self.registry.set_repo(alias, enabled)
            added.append(alias)
            logger.info(f"已添加仓库: {alias}")

        return added


__all__ = ["RepoReconciler"]

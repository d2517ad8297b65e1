"""软件包搜索

在所有仓库中搜索备份中的软件包，收集候选包和已安装版本
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..interfaces import PackageIndex
from ..package import PackageIdentity
from .constants import BackupEventType
from .errors import ExternalCallError
from .state import OperationState


@dataclass
class RestoreContext:
    """一次恢复过程的上下文"""

    names_to_search: List[str] = field(default_factory=list)
    """备份中的软件包名称"""

    packages_found: Dict[str, List[PackageIdentity]] = field(default_factory=dict)
    """候选包 {名称: [软件包标识]}"""

    already_installed: Dict[str, str] = field(default_factory=dict)
    """已安装版本 {名称: 版本}"""

    def add_candidate(self, package: PackageIdentity) -> None:
        self.packages_found.setdefault(package.name, []).append(package)

    def not_found(self) -> List[str]:
        """没有任何候选包的软件包名称"""
        return [
            name for name in self.names_to_search
            if not self.packages_found.get(name)
        ]


class PackageSearchCoordinator:
    """软件包搜索协调器

    索引的批量搜索只处理第一个名称，因此逐个名称依次搜索
    """

    def __init__(
        self,
        index: PackageIndex,
        name_prefix: str,
        installed_repo: str = "installed",
        state: Optional[OperationState] = None,
    ):
        """初始化搜索协调器

        Args:
            index: 软件包索引
            name_prefix: 受管仓库别名前缀
            installed_repo: 表示已安装软件包的伪仓库名称
            state: 操作状态，用于转发错误事件
        """
        self.index = index
        self.name_prefix = name_prefix
        self.installed_repo = installed_repo
        self.state = state

    def _record(self, ctx: RestoreContext, names: set, package: PackageIdentity) -> None:
        if package.name not in names:
            return
        if package.repo_alias.startswith(self.name_prefix):
            # 最新版本稍后再筛选
            ctx.add_candidate(package)
        elif package.repo_alias == self.installed_repo:
            ctx.already_installed[package.name] = package.version

    async def search(self, names: Sequence[str]) -> RestoreContext:
        """搜索所有软件包

        Args:
            names: 软件包名称

        Returns:
            恢复上下文
        """
        # 重复的名称只搜索一次
        unique = list(dict.fromkeys(names))
        ctx = RestoreContext(names_to_search=unique)
        wanted = set(unique)

        for name in unique:
            logger.debug(f"搜索软件包: {name}")
            try:
                async for package in self.index.search_names(name):
                    self._record(ctx, wanted, package)
            except ExternalCallError as e:
                logger.error(f"搜索软件包 {name} 失败: {e}")
                if self.state is not None:
                    await self.state.emit(BackupEventType.ERROR, e.code, str(e))

        found = sum(1 for n in unique if ctx.packages_found.get(n))
        logger.info(f"搜索完成，找到 {found}/{len(unique)} 个软件包")
        return ctx


__all__ = ["RestoreContext", "PackageSearchCoordinator"]

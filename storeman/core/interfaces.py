"""系统接口抽象

备份/恢复依赖的系统服务：仓库管理（SSU）和软件包索引（PackageKit）。
具体实现由宿主应用注入，失败时抛出 ExternalCallError
"""

import abc
from typing import AsyncIterator, Sequence

from .package import PackageIdentity


class RepoManager(abc.ABC):
    """系统仓库管理接口"""

    @abc.abstractmethod
    async def add_repo(self, alias: str, url: str) -> None:
        """添加仓库

        Args:
            alias: 仓库别名
            url: 仓库地址

        Raises:
            ExternalCallError: 添加失败
        """
        raise NotImplementedError


class PackageIndex(abc.ABC):
    """系统软件包索引接口"""

    @abc.abstractmethod
    def search_names(self, name: str) -> AsyncIterator[PackageIdentity]:
        """按名称搜索软件包

        每个匹配的软件包（含已安装的 `installed` 伪仓库条目）产出一次

        Args:
            name: 软件包名称

        Raises:
            ExternalCallError: 搜索失败
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def install_packages(self, package_ids: Sequence[str]) -> None:
        """批量安装软件包

        Args:
            package_ids: 软件包复合 ID 列表

        Raises:
            ExternalCallError: 安装失败
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def refresh_cache(self, force: bool = False) -> None:
        """刷新软件包缓存

        Args:
            force: 是否强制刷新

        Raises:
            ExternalCallError: 刷新失败
        """
        raise NotImplementedError


__all__ = ["RepoManager", "PackageIndex"]

"""软件包选择

为每个软件包名称选出要安装的版本
"""

from typing import List, Mapping, Optional, Sequence

from loguru import logger

from ..package import PackageIdentity
from ..version import Version


def newest(candidates: Sequence[PackageIdentity]) -> Optional[PackageIdentity]:
    """版本最高的候选包，版本相同时取最先出现的"""
    best: Optional[PackageIdentity] = None
    best_version: Optional[Version] = None
    for package in candidates:
        version = package.version_info
        if best_version is None or version > best_version:
            best = package
            best_version = version
    return best


class PackageSelector:
    """软件包选择器

    只选择未安装或比已安装版本更新的候选包
    """

    def select(
        self,
        packages_found: Mapping[str, Sequence[PackageIdentity]],
        already_installed: Optional[Mapping[str, str]] = None,
    ) -> List[PackageIdentity]:
        """选择要安装的软件包

        Args:
            packages_found: 候选包 {名称: [软件包标识]}
            already_installed: 已安装版本 {名称: 版本}

        Returns:
            每个名称至多一个的软件包列表
        """
        installed: Mapping[str, str] = already_installed or {}
        selected = []

        for name, candidates in packages_found.items():
            package = newest(candidates)
            if package is None:
                continue

            current = installed.get(name)
            if current is not None and not Version.parse(current) < package.version_info:
                logger.debug(f"跳过已安装的软件包: {name} ({current})")
                continue

            selected.append(package)

        return selected


__all__ = ["newest", "PackageSelector"]

"""测试公共夹具

提供系统仓库管理和软件包索引的内存实现
"""

from typing import List, Optional, Sequence, Set

import pytest

from storeman.config import get_default_config
from storeman.core.backup import BackupManager, ExternalCallError
from storeman.core.interfaces import PackageIndex, RepoManager
from storeman.core.package import PackageIdentity
from storeman.core.registry import BookmarkStore, RepoMeta, RepoRegistry


class FakeRepoManager(RepoManager):
    """记录添加调用的仓库管理器"""

    def __init__(self, failing: Optional[Set[str]] = None):
        self.calls: List[tuple] = []
        self.failing = failing or set()

    async def add_repo(self, alias: str, url: str) -> None:
        self.calls.append((alias, url))
        if alias in self.failing:
            raise ExternalCallError("add_repo", f"无法添加 {alias}")


class FakePackageIndex(PackageIndex):
    """按名称返回预设结果的软件包索引"""

    def __init__(self, packages: Optional[Sequence[str]] = None):
        self.packages: List[PackageIdentity] = [
            PackageIdentity.from_package_id(p) for p in (packages or [])
        ]
        self.searches: List[str] = []
        self.installs: List[List[str]] = []
        self.refreshes: List[bool] = []
        self.failing_searches: Set[str] = set()
        self.fail_install = False
        self.fail_refresh = False
        self.events: List[str] = []

    async def search_names(self, name: str):
        self.searches.append(name)
        self.events.append(f"search:{name}")
        if name in self.failing_searches:
            raise ExternalCallError("search_names", f"搜索 {name} 失败")
        for package in self.packages:
            if name in package.name:
                yield package

    async def install_packages(self, package_ids: Sequence[str]) -> None:
        self.events.append("install")
        if self.fail_install:
            raise ExternalCallError("install_packages", "安装失败")
        self.installs.append(list(package_ids))
        # 安装后出现在 installed 伪仓库中
        for package_id in package_ids:
            package = PackageIdentity.from_package_id(package_id)
            self.packages = [
                p for p in self.packages
                if not (p.repo_alias == "installed" and p.name == package.name)
            ]
            self.packages.append(
                PackageIdentity(package.name, package.version, package.arch, "installed")
            )

    async def refresh_cache(self, force: bool = False) -> None:
        self.events.append("refresh")
        if self.fail_refresh:
            raise ExternalCallError("refresh_cache", "刷新失败")
        self.refreshes.append(force)


@pytest.fixture
def registry():
    """包含两个仓库和若干已安装软件包的仓库表"""
    return RepoRegistry(
        repos={
            "openrepos-alice": RepoMeta(enabled=True, packages={"foo", "baz"}),
            "openrepos-bob": RepoMeta(enabled=False, packages={"bar"}),
        },
        installed_packages={
            "foo": "1.0",
            "bar": "2.1",
            "vim": "8.2",
        },
    )


@pytest.fixture
def bookmarks():
    """收藏集合"""
    return BookmarkStore({12, 40})


@pytest.fixture
def repo_manager():
    return FakeRepoManager()


@pytest.fixture
def package_index():
    return FakePackageIndex()


@pytest.fixture
def config(tmp_path):
    """指向临时备份目录的默认配置"""
    conf = get_default_config()
    conf["backup"]["directory"] = str(tmp_path / "backups")
    return conf


@pytest.fixture
def manager(registry, bookmarks, repo_manager, package_index, config):
    """备份管理器"""
    return BackupManager(
        registry=registry,
        bookmarks=bookmarks,
        repo_manager=repo_manager,
        index=package_index,
        config=config,
    )


@pytest.fixture
def events(manager):
    """收集管理器发出的事件"""
    received = []

    async def watcher(event):
        received.append(event)

    manager.watch(watcher)
    return received

"""备份模块单元测试

测试备份导出、仓库表、收藏合并和仓库恢复
"""

from datetime import datetime
from pathlib import Path

import pytest

from storeman.core.backup import (
    BackupErrorCode,
    BackupEventType,
    BackupManager,
    BackupStatus,
    OperationState,
    RepoReconciler,
    merge_bookmarks,
)
from storeman.core.backup.state import BackingUp, RestoringRepos
from storeman.core.registry import BookmarkStore, RepoStatus

from conftest import FakeRepoManager


class TestBackupExport:
    """测试备份导出"""

    def test_collect(self, manager):
        """测试收集仓库、软件包和收藏"""
        snapshot = manager.backup_machine.collect()

        assert snapshot.repos == ("alice", "bob")
        assert snapshot.disabled_repos == frozenset({"bob"})
        # vim 不来自受管仓库
        assert snapshot.installed_package_names == ("bar", "foo")
        assert snapshot.bookmark_ids == (12, 40)

    @pytest.mark.asyncio
    async def test_backup(self, manager, events, tmp_path):
        """测试创建备份"""
        path = tmp_path / "out" / "backup.ini"

        result = await manager.backup(path)

        assert result.success is True
        assert result.path == str(path)
        assert result.repos == 2
        assert result.packages == 2
        assert result.bookmarks == 2
        assert path.is_file()

        snapshot = manager.store.read(path)
        assert snapshot.repos == ("alice", "bob")
        assert snapshot.installed_package_names == ("bar", "foo")

        assert [(e.type, e.status) for e in events] == [
            (BackupEventType.STATUS_CHANGED, BackupStatus.BACKING_UP),
            (BackupEventType.STATUS_CHANGED, BackupStatus.IDLE),
            (BackupEventType.BACKED_UP, BackupStatus.IDLE),
        ]
        assert manager.status == BackupStatus.IDLE

    @pytest.mark.asyncio
    async def test_backup_rejected_when_busy(self, manager, events, tmp_path):
        """测试忙碌时拒绝备份且不写入文件"""
        busy = RestoringRepos(authors=("alice",), disabled=frozenset())
        assert manager.state.try_acquire(busy)
        path = tmp_path / "backup.ini"

        result = await manager.backup(path)

        assert result.success is False
        assert result.error == BackupErrorCode.ALREADY_BUSY
        assert not path.exists()
        assert manager.state.current is busy
        assert events == []

    @pytest.mark.asyncio
    async def test_backup_rejected_while_backing_up(self, manager, events, tmp_path):
        """测试备份进行中再次备份被拒绝"""
        running = BackingUp(path=str(tmp_path / "running.ini"))
        assert manager.state.try_acquire(running)
        path = tmp_path / "second.ini"

        result = await manager.backup(path)

        assert result.success is False
        assert result.error == BackupErrorCode.ALREADY_BUSY
        assert manager.state.current is running
        assert manager.status == BackupStatus.BACKING_UP
        assert not path.exists()
        assert not any(tmp_path.glob("*.ini"))
        assert events == []

    @pytest.mark.asyncio
    async def test_backup_file_exists(self, manager, events, tmp_path):
        """测试不覆盖已有备份"""
        path = tmp_path / "backup.ini"
        path.write_text("old", encoding="utf-8")

        result = await manager.backup(path)

        assert result.error == BackupErrorCode.FILE_ALREADY_EXISTS
        assert path.read_text(encoding="utf-8") == "old"
        assert [e.type for e in events] == [BackupEventType.ERROR]
        assert events[0].error == BackupErrorCode.FILE_ALREADY_EXISTS

    @pytest.mark.asyncio
    async def test_backup_directory_error(self, manager, events, tmp_path):
        """测试无法创建备份目录"""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        result = await manager.backup(blocker / "backup.ini")

        assert result.error == BackupErrorCode.DIRECTORY_ERROR
        assert [e.type for e in events] == [BackupEventType.ERROR]
        assert manager.status == BackupStatus.IDLE

    @pytest.mark.asyncio
    async def test_backup_default_path(self, manager, config):
        """测试默认备份路径"""
        result = await manager.backup()

        assert result.success is True
        path = Path(result.path)
        assert path.parent == Path(config["backup"]["directory"])
        assert path.name.startswith("storeman-")
        assert manager.list_backups() == [path]

    def test_default_backup_path_name(self, manager):
        """测试按时间命名"""
        path = manager.default_backup_path(datetime(2026, 10, 19, 8, 30, 15))
        assert path.name == "storeman-20261019-083015.ini"

    @pytest.mark.asyncio
    async def test_details_and_remove(self, manager, tmp_path):
        """测试读取摘要和删除备份"""
        path = tmp_path / "backup.ini"
        await manager.backup(path)

        details = manager.details(path)
        assert (details.repos, details.packages, details.bookmarks) == (2, 2, 2)

        assert manager.remove_file(path) is True
        assert not path.exists()

    def test_default_config(self, registry, bookmarks, repo_manager, package_index):
        """测试不传配置时使用默认配置"""
        manager = BackupManager(registry, bookmarks, repo_manager, package_index)
        assert manager.name_prefix == "openrepos-"
        assert manager.file_suffix == ".ini"


class TestOperationState:
    """测试操作状态"""

    def test_try_acquire(self):
        """测试只有空闲时可以进入操作"""
        state = OperationState()
        assert state.is_idle

        assert state.try_acquire(BackingUp(path="a.ini")) is True
        assert state.status == BackupStatus.BACKING_UP
        assert state.try_acquire(BackingUp(path="b.ini")) is False
        assert state.current.path == "a.ini"

    @pytest.mark.asyncio
    async def test_release(self):
        """测试回到空闲状态并通知"""
        state = OperationState()
        received = []

        async def watcher(event):
            received.append(event)

        state.watch(watcher)
        state.try_acquire(BackingUp(path="a.ini"))
        await state.release()

        assert state.is_idle
        assert [e.status for e in received] == [BackupStatus.IDLE]

        state.remove_watcher(watcher)
        await state.emit(BackupEventType.ERROR)
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_failing_watcher_ignored(self):
        """测试监听器异常不影响其他监听器"""
        state = OperationState()
        received = []

        async def broken(event):
            raise RuntimeError("boom")

        async def watcher(event):
            received.append(event)

        state.watch(broken)
        state.watch(watcher)
        await state.emit(BackupEventType.ERROR, BackupErrorCode.IO_ERROR, "失败")

        assert received[0].error == BackupErrorCode.IO_ERROR
        assert received[0].message == "失败"


class TestRegistry:
    """测试仓库表"""

    def test_repo_status(self, registry):
        """测试仓库状态"""
        assert registry.repo_status("openrepos-alice") == RepoStatus.ENABLED
        assert registry.repo_status("openrepos-bob") == RepoStatus.DISABLED
        assert registry.repo_status("openrepos-carol") == RepoStatus.NOT_INSTALLED

    def test_set_repo_keeps_packages(self, registry):
        """测试更新启用状态时保留软件包列表"""
        registry.set_repo("openrepos-bob", True)

        assert registry.repo_status("openrepos-bob") == RepoStatus.ENABLED
        assert registry.repos["openrepos-bob"].packages == {"bar"}

    def test_authors(self, registry):
        """测试去掉前缀得到作者名"""
        registry.set_repo("local", True)

        assert registry.authors("openrepos-") == [
            ("local", True),
            ("alice", True),
            ("bob", False),
        ]

    def test_repo_package_names(self, registry):
        """测试汇总仓库软件包"""
        assert registry.repo_package_names() == {"foo", "baz", "bar"}


class TestBookmarks:
    """测试收藏合并"""

    @pytest.mark.asyncio
    async def test_merge(self):
        """测试合并收藏并通知"""
        store = BookmarkStore({1, 2})
        notified = []

        async def watcher():
            notified.append(len(store))

        store.watch(watcher)

        assert await merge_bookmarks(store, [2, 3, 4]) == 2
        assert store.bookmarks == {1, 2, 3, 4}
        assert notified == [4]

    @pytest.mark.asyncio
    async def test_merge_no_change(self):
        """测试没有新增收藏时不通知"""
        store = BookmarkStore({1, 2})
        notified = []

        async def watcher():
            notified.append(True)

        store.watch(watcher)

        assert await merge_bookmarks(store, [1, 2]) == 0
        assert notified == []

    def test_bookmarks_is_copy(self):
        """测试返回收藏副本"""
        store = BookmarkStore({1})
        store.bookmarks.add(2)
        assert 2 not in store


class TestRepoReconciler:
    """测试仓库恢复"""

    @pytest.fixture
    def reconciler(self, registry, repo_manager):
        return RepoReconciler(
            registry=registry,
            repo_manager=repo_manager,
            name_prefix="openrepos-",
            base_url="https://sailfish.openrepos.net/{author}/personal/main",
        )

    def test_alias_and_url(self, reconciler):
        """测试仓库别名和地址"""
        assert reconciler.alias_for("carol") == "openrepos-carol"
        assert reconciler.url_for("carol") == "https://sailfish.openrepos.net/carol/personal/main"

    @pytest.mark.asyncio
    async def test_skip_matching_repos(self, reconciler, repo_manager):
        """测试状态一致的仓库不重复添加"""
        added = await reconciler.reconcile(("alice", "bob"), frozenset({"bob"}))

        assert added == []
        assert repo_manager.calls == []

    @pytest.mark.asyncio
    async def test_add_missing_and_update_status(self, reconciler, repo_manager, registry):
        """测试添加缺失仓库并更新启用状态"""
        added = await reconciler.reconcile(("alice", "bob", "carol"), frozenset({"alice", "carol"}))

        assert added == ["openrepos-alice", "openrepos-bob", "openrepos-carol"]
        assert [alias for alias, _ in repo_manager.calls] == added
        assert registry.repo_status("openrepos-alice") == RepoStatus.DISABLED
        assert registry.repo_status("openrepos-bob") == RepoStatus.ENABLED
        assert registry.repo_status("openrepos-carol") == RepoStatus.DISABLED

    @pytest.mark.asyncio
    async def test_failure_continues(self, registry):
        """测试添加失败时继续处理其余仓库"""
        repo_manager = FakeRepoManager(failing={"openrepos-carol"})
        state = OperationState()
        received = []

        async def watcher(event):
            received.append(event)

        state.watch(watcher)
        reconciler = RepoReconciler(
            registry, repo_manager, "openrepos-", "https://example.org/{author}", state
        )

        added = await reconciler.reconcile(("carol", "dave"), frozenset())

        assert added == ["openrepos-dave"]
        assert [e.type for e in received] == [BackupEventType.ERROR]
        assert received[0].error == BackupErrorCode.EXTERNAL_CALL_ERROR

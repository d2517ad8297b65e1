"""路径管理单元测试"""

import os

from storeman.core.utils import (
    ensure_directories,
    get_storeman_backups_path,
    get_storeman_config_file,
    get_storeman_root,
)


class TestPathManager:
    """测试路径管理"""

    def test_root_from_env(self, tmp_path, monkeypatch):
        """测试从环境变量读取根目录"""
        monkeypatch.setenv("STOREMAN_ROOT", str(tmp_path))

        root = os.path.realpath(tmp_path)
        assert get_storeman_root() == root
        assert get_storeman_backups_path() == os.path.join(root, "data", "backups")
        assert get_storeman_config_file() == os.path.join(root, "data", "config", "storeman.json")

    def test_root_defaults_to_cwd(self, tmp_path, monkeypatch):
        """测试默认使用当前工作目录"""
        monkeypatch.delenv("STOREMAN_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)

        assert get_storeman_root() == os.path.realpath(tmp_path)

    def test_ensure_directories(self, tmp_path, monkeypatch):
        """测试创建数据目录"""
        monkeypatch.setenv("STOREMAN_ROOT", str(tmp_path))

        ensure_directories()

        for name in ("config", "backups", "logs"):
            assert (tmp_path / "data" / name).is_dir()

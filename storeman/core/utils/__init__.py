"""核心工具模块"""

from .path_manager import (
    get_storeman_root,
    get_storeman_data_path,
    get_storeman_config_path,
    get_storeman_config_file,
    get_storeman_backups_path,
    get_storeman_logs_path,
    ensure_directories,
)

__all__ = [
    "get_storeman_root",
    "get_storeman_data_path",
    "get_storeman_config_path",
    "get_storeman_config_file",
    "get_storeman_backups_path",
    "get_storeman_logs_path",
    "ensure_directories",
]

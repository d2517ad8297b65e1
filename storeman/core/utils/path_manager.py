"""Storeman 统一路径管理模块

根目录路径：默认为当前工作目录，可通过环境变量 STOREMAN_ROOT 指定
数据目录路径：固定为根目录下的 data 目录
配置文件路径：固定为数据目录下的 config 目录
备份目录路径：固定为数据目录下的 backups 目录
日志目录路径：固定为数据目录下的 logs 目录
"""

import os


def get_storeman_root() -> str:
    """获取 Storeman 根目录路径"""
    if path := os.environ.get("STOREMAN_ROOT"):
        return os.path.realpath(path)
    return os.path.realpath(os.getcwd())


def get_storeman_data_path() -> str:
    """获取数据目录路径"""
    return os.path.realpath(os.path.join(get_storeman_root(), "data"))


def get_storeman_config_path() -> str:
    """获取配置目录路径"""
    return os.path.realpath(os.path.join(get_storeman_data_path(), "config"))


def get_storeman_config_file() -> str:
    """获取配置文件路径"""
    return os.path.join(get_storeman_config_path(), "storeman.json")


def get_storeman_backups_path() -> str:
    """获取备份目录路径"""
    return os.path.realpath(os.path.join(get_storeman_data_path(), "backups"))


def get_storeman_logs_path() -> str:
    """获取日志目录路径"""
    return os.path.realpath(os.path.join(get_storeman_data_path(), "logs"))


def ensure_directories() -> None:
    """确保所有必要的目录存在"""
    directories = [
        get_storeman_data_path(),
        get_storeman_config_path(),
        get_storeman_backups_path(),
        get_storeman_logs_path(),
    ]
    for directory in directories:
        os.makedirs(directory, exist_ok=True)

"""Storeman 入口文件

查看和管理 Storeman 备份文件
"""

import os
import sys

# 禁止生成 __pycache__ 目录
os.environ["PYTHONDONTWRITEBYTECODE"] = "1"

from loguru import logger
import asyncio
import argparse
from pathlib import Path

from storeman import __version__
from storeman.config import ConfigValidationError, StoremanConfig
from storeman.core.backup import BackupError, BackupStore
from storeman.core.utils import (
    ensure_directories,
    get_storeman_backups_path,
    get_storeman_config_file,
    get_storeman_logs_path,
)

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>[{level}]</level> {message}"


def setup_logging(config: StoremanConfig) -> None:
    """配置日志输出"""
    level = config.get("log.level", "INFO")
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level, colorize=True)
    if config.get("log.file_enabled", False):
        logger.add(
            Path(get_storeman_logs_path()) / "storeman.log",
            format=LOG_FORMAT,
            level=level,
            rotation="1 MB",
            retention=5,
            encoding="utf-8",
        )


def backup_store(config: StoremanConfig) -> tuple[BackupStore, Path]:
    """备份存储和备份目录"""
    directory = config.get("backup.directory") or get_storeman_backups_path()
    return BackupStore(file_suffix=config.get("backup.file_suffix", ".ini")), Path(directory)


async def show_details(config: StoremanConfig, path: str) -> int:
    """显示备份摘要"""
    store, _ = backup_store(config)
    try:
        details = store.summarize(path)
    except BackupError as e:
        logger.error(f"读取备份失败: {e}")
        return 1

    created = details.created_at.strftime("%Y-%m-%d %H:%M:%S") if details.created_at else "未知"
    print(f"创建时间: {created}")
    print(f"仓库: {details.repos}")
    print(f"软件包: {details.packages}")
    print(f"收藏: {details.bookmarks}")
    return 0


async def list_backups(config: StoremanConfig) -> int:
    """列出备份文件"""
    store, directory = backup_store(config)
    backups = store.list_backups(directory)
    if not backups:
        print(f"{directory} 中没有备份")
        return 0
    for path in backups:
        print(path)
    return 0


async def remove_backup(config: StoremanConfig, path: str) -> int:
    """删除备份文件"""
    store, _ = backup_store(config)
    return 0 if store.delete_file(path) else 1


async def show_version() -> int:
    """显示版本信息"""
    print(f"Storeman {__version__}")
    return 0


async def show_help() -> int:
    """显示帮助信息"""
    help_text = """
Storeman - OpenRepos 仓库管理客户端

用法:
    python main.py [命令] [参数]

可用命令:
    details FILE     显示备份摘要
    list             列出备份目录中的备份
    remove FILE      删除备份文件
    version, -v      显示版本信息
    help, -h         显示帮助信息

环境变量:
    STOREMAN_ROOT    根目录，默认为当前工作目录
"""
    print(help_text)
    return 0


async def main() -> int:
    """主函数：执行命令行操作"""
    parser = argparse.ArgumentParser(
        description="Storeman 命令行工具",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-h", "--help", action="store_true", dest="show_help", help="显示帮助信息"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", dest="show_version", help="显示版本信息"
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["details", "list", "remove", "version", "help"],
        help="要执行的命令",
    )
    parser.add_argument("file", nargs="?", help="备份文件路径")

    args = parser.parse_args()

    if args.show_help or args.command in (None, "help"):
        return await show_help()
    if args.show_version or args.command == "version":
        return await show_version()

    ensure_directories()
    try:
        config = StoremanConfig(Path(get_storeman_config_file()))
    except ConfigValidationError as e:
        logger.error(f"配置无效: {e}")
        for error in e.errors:
            logger.error(f"  - {error}")
        return 1
    setup_logging(config)

    if args.command == "list":
        return await list_backups(config)

    if not args.file:
        logger.error(f"命令 {args.command} 需要备份文件路径")
        return 2
    if args.command == "details":
        return await show_details(config, args.file)
    return await remove_backup(config, args.file)


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level="INFO", colorize=True)
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code if exit_code is not None else 0)
    except KeyboardInterrupt:
        logger.info("收到退出信号")
    except Exception as e:
        logger.error(f"操作失败: {e}")
        sys.exit(1)

"""备份文件存储

备份文件为 INI 格式，便于手工编辑：

    [General]
    created=2026-10-19T08:30:00Z

    [repos]
    all=alice,bob
    disabled=bob

    [packages]
    installed=foo,bar
    bookmarks=12,40
"""

import configparser
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from .constants import (
    GENERAL_SECTION,
    REPOS_SECTION,
    PACKAGES_SECTION,
    KEY_CREATED,
    KEY_REPOS_ALL,
    KEY_REPOS_DISABLED,
    KEY_INSTALLED,
    KEY_BOOKMARKS,
    LIST_SEPARATOR,
    TIMESTAMP_FORMAT,
    BackupDetails,
    BackupSnapshot,
)
from .errors import (
    BackupDirectoryError,
    BackupFileExistsError,
    BackupFileNotFoundError,
    BackupFormatError,
    BackupStoreError,
)


PathLike = Union[str, Path]


def _join(values) -> str:
    return LIST_SEPARATOR.join(str(v) for v in values)


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(LIST_SEPARATOR) if item.strip()]


def format_timestamp(moment: datetime) -> str:
    """格式化为 UTC ISO-8601 时间戳（秒级精度）"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """解析 ISO-8601 时间戳，无时区信息时按 UTC 处理

    Raises:
        ValueError: 时间戳格式错误
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class BackupStore:
    """备份文件读写

    备份文件不会被静默覆盖
    """

    def __init__(self, file_suffix: str = ".ini"):
        """初始化存储

        Args:
            file_suffix: 备份文件扩展名，用于列出备份
        """
        self.file_suffix = file_suffix

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        return configparser.ConfigParser(interpolation=None)

    def _load(self, path: Path) -> configparser.ConfigParser:
        if not path.is_file():
            raise BackupFileNotFoundError(f"备份文件不存在: {path}")

        parser = self._new_parser()
        try:
            with open(path, "r", encoding="utf-8") as f:
                parser.read_file(f)
        except (configparser.Error, UnicodeDecodeError) as e:
            raise BackupFormatError(f"备份文件格式错误: {path}: {e}") from e
        except OSError as e:
            raise BackupStoreError(f"读取备份文件失败: {path}: {e}") from e
        return parser

    def write(self, path: PathLike, snapshot: BackupSnapshot) -> None:
        """写入备份文件

        Args:
            path: 备份文件路径
            snapshot: 备份快照

        Raises:
            BackupFileExistsError: 文件已存在
            BackupDirectoryError: 无法创建目录
            BackupStoreError: 写入失败
        """
        path = Path(path)
        if path.exists():
            raise BackupFileExistsError(f"备份文件已存在: {path}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupDirectoryError(f"无法创建目录: {path.parent}: {e}") from e

        parser = self._new_parser()
        parser[GENERAL_SECTION] = {
            KEY_CREATED: format_timestamp(snapshot.created_at),
        }
        parser[REPOS_SECTION] = {
            KEY_REPOS_ALL: _join(snapshot.repos),
            KEY_REPOS_DISABLED: _join(
                a for a in snapshot.repos if a in snapshot.disabled_repos
            ),
        }
        parser[PACKAGES_SECTION] = {
            KEY_INSTALLED: _join(snapshot.installed_package_names),
            KEY_BOOKMARKS: _join(snapshot.bookmark_ids),
        }

        try:
            with open(path, "x", encoding="utf-8") as f:
                parser.write(f, space_around_delimiters=False)
        except FileExistsError as e:
            raise BackupFileExistsError(f"备份文件已存在: {path}") from e
        except OSError as e:
            raise BackupStoreError(f"写入备份文件失败: {path}: {e}") from e

        logger.debug(f"已写入备份文件: {path}")

    def read(self, path: PathLike) -> BackupSnapshot:
        """读取备份文件

        Args:
            path: 备份文件路径

        Returns:
            备份快照

        Raises:
            BackupFileNotFoundError: 文件不存在
            BackupFormatError: 文件格式错误或创建时间无效
        """
        path = Path(path)
        parser = self._load(path)

        created = parser.get(GENERAL_SECTION, KEY_CREATED, fallback="").strip()
        if created:
            try:
                created_at = parse_timestamp(created)
            except ValueError as e:
                raise BackupFormatError(f"无效的创建时间: {created!r}") from e
        else:
            # 缺少创建时间时使用文件修改时间
            logger.warning(f"备份文件缺少创建时间，使用文件修改时间: {path}")
            created_at = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

        repos = _split(parser.get(REPOS_SECTION, KEY_REPOS_ALL, fallback=""))
        disabled = set(_split(parser.get(REPOS_SECTION, KEY_REPOS_DISABLED, fallback="")))
        stray = disabled.difference(repos)
        if stray:
            logger.warning(f"忽略不在仓库列表中的禁用仓库: {', '.join(sorted(stray))}")
            disabled -= stray

        installed = _split(parser.get(PACKAGES_SECTION, KEY_INSTALLED, fallback=""))
        raw_bookmarks = _split(parser.get(PACKAGES_SECTION, KEY_BOOKMARKS, fallback=""))
        try:
            bookmarks = tuple(int(b) for b in raw_bookmarks)
        except ValueError as e:
            raise BackupFormatError(f"无效的收藏 ID: {e}") from e

        return BackupSnapshot(
            created_at=created_at,
            repos=tuple(repos),
            disabled_repos=frozenset(disabled),
            installed_package_names=tuple(installed),
            bookmark_ids=bookmarks,
        )

    def summarize(self, path: PathLike) -> BackupDetails:
        """读取备份摘要，仅统计数量

        Args:
            path: 备份文件路径

        Returns:
            备份摘要，创建时间为本地时间

        Raises:
            BackupFileNotFoundError: 文件不存在
            BackupFormatError: 文件格式错误
        """
        parser = self._load(Path(path))

        created_at: Optional[datetime] = None
        created = parser.get(GENERAL_SECTION, KEY_CREATED, fallback="")
        if created:
            try:
                created_at = parse_timestamp(created).astimezone()
            except ValueError:
                logger.warning(f"备份文件创建时间无效: {created!r}")

        return BackupDetails(
            created_at=created_at,
            repos=len(_split(parser.get(REPOS_SECTION, KEY_REPOS_ALL, fallback=""))),
            packages=len(_split(parser.get(PACKAGES_SECTION, KEY_INSTALLED, fallback=""))),
            bookmarks=len(_split(parser.get(PACKAGES_SECTION, KEY_BOOKMARKS, fallback=""))),
        )

    def delete_file(self, path: PathLike) -> bool:
        """删除备份文件

        Args:
            path: 备份文件路径

        Returns:
            是否删除成功，路径为目录时拒绝删除
        """
        path = Path(path)
        if path.is_dir():
            logger.warning(f"拒绝删除目录: {path}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"备份文件不存在: {path}")
            return False
        except OSError as e:
            logger.error(f"删除备份文件失败: {path}: {e}")
            return False

        logger.info(f"已删除备份文件: {path}")
        return True

    def list_backups(self, directory: PathLike) -> List[Path]:
        """列出目录中的备份文件（按修改时间倒序）

        Args:
            directory: 备份目录

        Returns:
            备份文件路径列表
        """
        directory = Path(directory)
        if not directory.is_dir():
            return []

        files = [
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == self.file_suffix
        ]
        return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)


__all__ = ["BackupStore", "format_timestamp", "parse_timestamp"]

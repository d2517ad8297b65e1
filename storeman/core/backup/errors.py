"""备份与恢复错误定义"""

from enum import Enum
from typing import Optional


class BackupErrorCode(str, Enum):
    """错误类型"""

    ALREADY_BUSY = "already_busy"
    DIRECTORY_ERROR = "directory_error"
    FILE_NOT_FOUND = "file_not_found"
    FILE_ALREADY_EXISTS = "file_already_exists"
    FORMAT_ERROR = "format_error"
    IO_ERROR = "io_error"
    SEARCH_MISS = "search_miss"
    EXTERNAL_CALL_ERROR = "external_call_error"


class BackupError(Exception):
    """备份模块错误基类"""

    code: BackupErrorCode = BackupErrorCode.IO_ERROR

    def __init__(self, message: str, code: Optional[BackupErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class BackupStoreError(BackupError, OSError):
    """备份文件读写错误"""

    code = BackupErrorCode.IO_ERROR


class BackupFileExistsError(BackupStoreError):
    """备份文件已存在"""

    code = BackupErrorCode.FILE_ALREADY_EXISTS


class BackupFileNotFoundError(BackupStoreError):
    """备份文件不存在"""

    code = BackupErrorCode.FILE_NOT_FOUND


class BackupDirectoryError(BackupStoreError):
    """无法创建备份目录"""

    code = BackupErrorCode.DIRECTORY_ERROR


class BackupFormatError(BackupStoreError):
    """备份文件格式错误"""

    code = BackupErrorCode.FORMAT_ERROR


class ExternalCallError(BackupError):
    """外部调用（添加仓库、搜索、安装、刷新）失败"""

    code = BackupErrorCode.EXTERNAL_CALL_ERROR

    def __init__(self, call: str, message: str):
        super().__init__(f"{call}: {message}")
        self.call = call
        self.reason = message


__all__ = [
    "BackupErrorCode",
    "BackupError",
    "BackupStoreError",
    "BackupFileExistsError",
    "BackupFileNotFoundError",
    "BackupDirectoryError",
    "BackupFormatError",
    "ExternalCallError",
]

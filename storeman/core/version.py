"""软件包版本比较

将版本字符串按 `.`、`+`、`~`、`-` 拆分为段，逐段比较

比较规则：
- 数字段按数值比较，字符串段按字典序比较
- 同一位置上数字段大于字符串段（与 RPM 一致）
- `~` 引导的段为预发布标记，小于任何其他段，也小于版本结尾
  （`1.0~rc1` < `1.0`）
- 公共段全部相等时，段数少的版本更小（`1.2` < `1.2.0`）
"""

import re
from enum import IntEnum
from functools import total_ordering
from typing import Tuple, Union


_SEPARATOR_RE = re.compile(r"([.+~-])")
_DIGITS_RE = re.compile(r"[0-9]+")

# 版本结尾的比较键：大于预发布段，小于其他任何段
_END_KEY = (1, -1)


class Ordering(IntEnum):
    """比较结果"""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def _segment_key(token: str, pre_release: bool) -> tuple:
    if _DIGITS_RE.fullmatch(token):
        return (0 if pre_release else 1, 1, int(token))
    return (0 if pre_release else 1, 0, token)


@total_ordering
class Version:
    """不可变的已解析版本"""

    __slots__ = ("_raw", "_segments", "_key")

    def __init__(self, raw: str = ""):
        self._raw = raw
        segments = []
        keys = []
        pre_release = False
        for token in _SEPARATOR_RE.split(raw):
            if token in (".", "+", "~", "-"):
                pre_release = token == "~"
                continue
            segments.append(int(token) if _DIGITS_RE.fullmatch(token) else token)
            keys.append(_segment_key(token, pre_release))
            pre_release = False
        keys.append(_END_KEY)
        self._segments: Tuple[Union[int, str], ...] = tuple(segments)
        self._key = tuple(keys)

    @classmethod
    def parse(cls, raw: str) -> "Version":
        """解析版本字符串，任何字符串都可解析"""
        return cls(raw)

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def segments(self) -> Tuple[Union[int, str], ...]:
        """版本段（整数或字符串）"""
        return self._segments

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"Version({self._raw!r})"


def compare(a: Version, b: Version) -> Ordering:
    """比较两个版本

    Args:
        a: 左侧版本
        b: 右侧版本

    Returns:
        LESS / EQUAL / GREATER
    """
    if a == b:
        return Ordering.EQUAL
    return Ordering.LESS if a < b else Ordering.GREATER


def compare_strings(a: str, b: str) -> Ordering:
    """直接比较两个版本字符串"""
    return compare(Version.parse(a), Version.parse(b))


__all__ = ["Ordering", "Version", "compare", "compare_strings"]

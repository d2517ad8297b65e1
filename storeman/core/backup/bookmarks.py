"""收藏合并"""

from typing import Iterable

from loguru import logger

from ..registry import BookmarkStore


async def merge_bookmarks(store: BookmarkStore, bookmark_ids: Iterable[int]) -> int:
    """将备份中的收藏并入当前收藏

    Args:
        store: 当前收藏集合
        bookmark_ids: 备份中的收藏 ID

    Returns:
        新增的收藏数量
    """
    added = await store.add_many(bookmark_ids)
    if added:
        logger.info(f"恢复了 {added} 个收藏")
    else:
        logger.info("收藏无变化")
    return added


__all__ = ["merge_bookmarks"]

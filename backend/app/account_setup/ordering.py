"""
Order list helpers / 排序列表工具

Both attributes and quests carry an explicit ``order`` field for persistence.
It is always recomputed from the list index, never trusted from callers.
"""

from typing import List, Optional, Sequence, TypeVar

from pydantic import BaseModel

from app.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def swap_elements(items: Sequence[T], index_a: int, index_b: int) -> List[T]:
    """Return a new list with the two positions exchanged."""
    updated = list(items)
    updated[index_a], updated[index_b] = updated[index_b], updated[index_a]
    return updated


def reindex(items: Sequence[T]) -> List[T]:
    """
    Return a list whose ``order`` fields equal their index.

    Items already in place are reused; only shifted ones are copied.
    """
    return [
        item if item.order == index else item.model_copy(update={"order": index})
        for index, item in enumerate(items)
    ]


def find_index_by_name(
    items: Sequence[T],
    name: str,
    order_hint: Optional[int] = None,
    kind: str = "item",
) -> int:
    """
    Locate an item by name. Returns -1 when absent.

    ``order_hint`` is a cached position from the caller. It is checked against
    the looked-up index and a desync warning is logged when they disagree.
    """
    if order_hint is not None and 0 <= order_hint < len(items) and items[order_hint].name == name:
        return order_hint

    index = next((i for i, item in enumerate(items) if item.name == name), -1)
    if order_hint is not None and index != -1:
        logger.warning(
            "%s order index out of sync for %r (hint=%s, actual=%s), using name lookup",
            kind.capitalize(),
            name,
            order_hint,
            index,
        )
    return index


def orders_are_contiguous(items: Sequence[T]) -> bool:
    """True when orders are exactly 0..n-1 in list order."""
    return [item.order for item in items] == list(range(len(items)))

"""任务列表筛选与排序

1. 按 search_query 对 title + description 做大小写不敏感子串匹配
2. 按 sort_field 计算排序键（title 近似 locale 比较、priority 序数、due_date 缺省为 +inf）
3. 按 sort_order 排序；升序/降序都保持插入顺序稳定
"""

import math
import unicodedata
from collections.abc import Callable, Iterable
from typing import Any

from .models.enums import PRIORITY_RANK, SortField, SortOrder
from .models.task import Task


def matches_search(task: Task, search_query: str) -> bool:
    """title 或 description 包含 search_query（大小写不敏感），空查询匹配全部"""
    if not search_query:
        return True
    needle = search_query.casefold()
    return needle in task.title.casefold() or needle in task.description.casefold()


def collation_key(text: str) -> tuple[str, str, str]:
    """近似 locale 排序的比较键

    主键忽略重音和大小写；相同时重音次之；最后小写排在大写前面。
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), text.casefold(), text.swapcase())


def _title_key(task: Task) -> tuple[str, str, str]:
    return collation_key(task.title)


def _priority_key(task: Task) -> int:
    return PRIORITY_RANK[task.priority]


def _due_date_key(task: Task) -> float:
    # 无截止时间视为 +inf
    if task.due_date is None:
        return math.inf
    return task.due_date.timestamp()


SORT_KEYS: dict[SortField, Callable[[Task], Any]] = {
    SortField.TITLE: _title_key,
    SortField.PRIORITY: _priority_key,
    SortField.DUE_DATE: _due_date_key,
}


def sort_tasks(
    tasks: Iterable[Task],
    sort_field: SortField = SortField.PRIORITY,
    sort_order: SortOrder = SortOrder.DESC,
) -> list[Task]:
    """按字段排序

    sorted(reverse=True) 对相等键同样保持原始顺序。
    """
    key = SORT_KEYS[SortField(sort_field)]
    return sorted(tasks, key=key, reverse=SortOrder(sort_order) is SortOrder.DESC)


def filter_and_sort(
    tasks: Iterable[Task],
    search_query: str = "",
    sort_field: SortField = SortField.PRIORITY,
    sort_order: SortOrder = SortOrder.DESC,
) -> list[Task]:
    """筛选后排序，返回新列表"""
    filtered = [t for t in tasks if matches_search(t, search_query)]
    return sort_tasks(filtered, sort_field, sort_order)

"""任务筛选与排序测试

测试内容：
1. 搜索：title/description 大小写不敏感子串，空查询匹配全部
2. 排序：priority 序数、due_date 缺省视为最后、title 近似 locale 比较
3. 稳定性：相等键保持插入顺序（升序/降序均如此）
"""

from datetime import UTC, datetime

import pytest
from focusdesk.core.collection import TaskCollection
from focusdesk.core.models import SortField, SortOrder, TaskDraft, TaskPriority, TaskQuery
from focusdesk.core.ordering import collation_key, matches_search, sort_tasks


def _due(day: int) -> datetime:
    return datetime(2025, 1, day, tzinfo=UTC)


class TestSearch:
    """搜索匹配"""

    def test_empty_query_matches_all(self, collection: TaskCollection):
        collection.create(TaskDraft(title="A"))
        collection.create(TaskDraft(title="B"))
        assert len(collection.query("")) == 2

    def test_case_insensitive_title(self, collection: TaskCollection):
        collection.create(TaskDraft(title="Ship report"))
        collection.create(TaskDraft(title="Clean desk"))
        result = collection.query("REPORT")
        assert [t.title for t in result] == ["Ship report"]

    def test_matches_description(self, collection: TaskCollection):
        task = collection.create(TaskDraft(title="Errand", description="Pick up Groceries"))
        assert matches_search(task, "groceries")
        assert not matches_search(task, "laundry")

    def test_no_match(self, collection: TaskCollection):
        collection.create(TaskDraft(title="A"))
        assert collection.query("zzz") == []


class TestSort:
    """排序规则"""

    def test_default_priority_desc(self, collection: TaskCollection):
        collection.create(TaskDraft(title="low", priority=TaskPriority.LOW))
        collection.create(TaskDraft(title="high", priority=TaskPriority.HIGH))
        collection.create(TaskDraft(title="medium"))
        assert [t.title for t in collection.query()] == ["high", "medium", "low"]

    def test_priority_ties_keep_insertion_order(self, collection: TaskCollection):
        for title in ["m1", "m2", "m3"]:
            collection.create(TaskDraft(title=title))
        collection.create(TaskDraft(title="h1", priority=TaskPriority.HIGH))
        result = collection.query(sort_field=SortField.PRIORITY, sort_order=SortOrder.DESC)
        assert [t.title for t in result] == ["h1", "m1", "m2", "m3"]

    def test_due_date_asc_undated_last(self, collection: TaskCollection):
        collection.create(TaskDraft(title="none"))
        collection.create(TaskDraft(title="late", due_date=_due(20)))
        collection.create(TaskDraft(title="early", due_date=_due(5)))
        result = collection.query(sort_field=SortField.DUE_DATE, sort_order=SortOrder.ASC)
        assert [t.title for t in result] == ["early", "late", "none"]

    def test_due_date_desc_undated_first(self, collection: TaskCollection):
        collection.create(TaskDraft(title="early", due_date=_due(5)))
        collection.create(TaskDraft(title="none"))
        collection.create(TaskDraft(title="late", due_date=_due(20)))
        result = collection.query(sort_field=SortField.DUE_DATE, sort_order=SortOrder.DESC)
        assert [t.title for t in result] == ["none", "late", "early"]

    def test_title_asc_ignores_case_and_accents(self, collection: TaskCollection):
        for title in ["banana", "Apple", "éclair", "cherry"]:
            collection.create(TaskDraft(title=title))
        result = collection.query(sort_field=SortField.TITLE, sort_order=SortOrder.ASC)
        assert [t.title for t in result] == ["Apple", "banana", "cherry", "éclair"]

    def test_lowercase_before_uppercase_on_tie(self):
        assert collation_key("apple") < collation_key("Apple")

    def test_query_does_not_mutate_collection(self, collection: TaskCollection):
        collection.create(TaskDraft(title="b", priority=TaskPriority.LOW))
        collection.create(TaskDraft(title="a", priority=TaskPriority.HIGH))
        collection.query(sort_field=SortField.TITLE, sort_order=SortOrder.ASC)
        assert [t.title for t in collection] == ["b", "a"]

    @pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
    def test_sort_accepts_raw_values(self, collection: TaskCollection, order: SortOrder):
        collection.create(TaskDraft(title="x"))
        assert len(sort_tasks(collection, "priority", order.value)) == 1


class TestSearchThenSort:
    """先筛选后排序"""

    def test_filter_then_sort(self, collection: TaskCollection):
        collection.create(TaskDraft(title="Ship report", priority=TaskPriority.HIGH))
        collection.create(TaskDraft(title="Clean desk", priority=TaskPriority.LOW))
        collection.create(TaskDraft(title="Report bug", priority=TaskPriority.LOW))

        result = collection.query("report", SortField.PRIORITY, SortOrder.ASC)

        assert [t.title for t in result] == ["Report bug", "Ship report"]

    def test_query_with_criteria(self, collection: TaskCollection):
        collection.create(TaskDraft(title="Ship report", due_date=_due(10)))
        collection.create(TaskDraft(title="Report bug"))
        criteria = TaskQuery(
            search_query="report", sort_field=SortField.DUE_DATE, sort_order=SortOrder.ASC
        )
        assert [t.title for t in collection.query_with(criteria)] == ["Ship report", "Report bug"]

    def test_ship_report_before_clean_desk(self, collection: TaskCollection):
        collection.create(
            TaskDraft(title="Ship report", priority=TaskPriority.HIGH, due_date=_due(10))
        )
        collection.create(TaskDraft(title="Clean desk", priority=TaskPriority.LOW))
        result = collection.query("", SortField.PRIORITY, SortOrder.DESC)
        assert [t.title for t in result] == ["Ship report", "Clean desk"]

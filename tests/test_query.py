from datetime import datetime

from todo_tracker.models import Priority
from todo_tracker.query import SortSpec, TodoFilter, apply_query


def todo(id, title="Task", description=None, completed=False, priority=Priority.MEDIUM,
         due_date=None, created_at=None):
    return {
        "id": id,
        "owner_id": "alice",
        "title": title,
        "description": description,
        "completed": completed,
        "priority": priority,
        "due_date": due_date,
        "created_at": created_at or datetime(2025, 1, 1, 0, 0, id),
        "updated_at": created_at or datetime(2025, 1, 1, 0, 0, id),
    }


def ids(items):
    return [t["id"] for t in items]


class TestFilter:
    def setup_method(self):
        self.todos = [
            todo(1, due_date=datetime(2025, 8, 1)),
            todo(2),
            todo(3, due_date=datetime(2025, 12, 31)),
        ]

    def test_due_before_excludes_missing_due_date(self):
        f = TodoFilter.from_params(due_before="2025-09-01T00:00:00")
        assert ids(apply_query(self.todos, f, SortSpec(order="asc"))) == [1]

    def test_due_after_excludes_missing_due_date(self):
        f = TodoFilter.from_params(due_after="2025-09-01T00:00:00")
        assert ids(apply_query(self.todos, f, SortSpec(order="asc"))) == [3]

    def test_due_bounds_are_strict(self):
        f = TodoFilter.from_params(due_before="2025-08-01T00:00:00")
        assert apply_query(self.todos, f) == []

    def test_malformed_date_means_no_filter(self):
        for bad in ["2025-09-01", "01/09/2025", "2025-09-01T00:00:00Z", "2025-9-1T0:0:0", ""]:
            f = TodoFilter.from_params(due_before=bad, due_after=bad)
            assert f.due_before is None and f.due_after is None
            assert len(apply_query(self.todos, f)) == 3

    def test_completed_and_priority_are_anded(self):
        todos = [
            todo(1, completed=True, priority=Priority.HIGH),
            todo(2, completed=False, priority=Priority.HIGH),
            todo(3, completed=True, priority=Priority.LOW),
        ]
        f = TodoFilter(completed=True, priority=Priority.HIGH)
        assert ids(apply_query(todos, f)) == [1]

    def test_search_is_case_insensitive_over_title_or_description(self):
        todos = [
            todo(1, title="Buy MILK"),
            todo(2, title="Chores", description="milk the cow"),
            todo(3, title="Other", description=None),
        ]
        assert ids(apply_query(todos, TodoFilter(search="milk"), SortSpec(order="asc"))) == [1, 2]

    def test_empty_search_disables_filter(self):
        assert len(apply_query(self.todos, TodoFilter(search=""))) == 3


class TestSort:
    def test_title_ascending_nulls_last(self):
        todos = [todo(1, title="banana"), todo(2, title=None), todo(3, title="Apple")]
        result = apply_query(todos, sort=SortSpec(field="title", order="asc"))
        assert [t["title"] for t in result] == ["Apple", "banana", None]

    def test_title_descending_nulls_first(self):
        todos = [todo(1, title="banana"), todo(2, title=None), todo(3, title="Apple")]
        result = apply_query(todos, sort=SortSpec(field="title", order="desc"))
        assert [t["title"] for t in result] == [None, "banana", "Apple"]

    def test_priority_uses_declaration_order(self):
        todos = [todo(1, priority=Priority.LOW), todo(2, priority=Priority.HIGH), todo(3, priority=Priority.MEDIUM)]
        assert ids(apply_query(todos, sort=SortSpec(field="priority", order="asc"))) == [2, 3, 1]
        assert ids(apply_query(todos, sort=SortSpec(field="priority", order="desc"))) == [1, 3, 2]

    def test_due_date_nulls_last_ascending(self):
        todos = [todo(1, due_date=datetime(2025, 12, 1)), todo(2), todo(3, due_date=datetime(2025, 1, 1))]
        assert ids(apply_query(todos, sort=SortSpec(field="dueDate", order="asc"))) == [3, 1, 2]
        assert ids(apply_query(todos, sort=SortSpec(field="DUEDATE", order="desc"))) == [2, 1, 3]

    def test_default_is_created_at_descending(self):
        todos = [todo(2), todo(1), todo(3)]
        assert ids(apply_query(todos)) == [3, 2, 1]

    def test_unknown_field_falls_back_to_created_at(self):
        todos = [todo(2), todo(1), todo(3)]
        assert ids(apply_query(todos, sort=SortSpec(field="bogus", order="asc"))) == [1, 2, 3]

    def test_any_order_other_than_desc_is_ascending(self):
        todos = [todo(2), todo(1)]
        assert ids(apply_query(todos, sort=SortSpec(order="sideways"))) == [1, 2]
        assert ids(apply_query(todos, sort=SortSpec(order="DESC"))) == [2, 1]

    def test_input_is_not_mutated(self):
        todos = [todo(1), todo(2)]
        apply_query(todos, sort=SortSpec(order="desc"))
        assert ids(todos) == [1, 2]

from __future__ import annotations

from datetime import date, datetime

import pytest

from taskboard.client.models import Task
from taskboard.client.view import (
    DEFAULT_CATEGORIES,
    CategoryAdded,
    CategoryRemoved,
    LoadFailed,
    Loaded,
    SearchChanged,
    TabSelected,
    TaskAdded,
    TaskRemoved,
    TaskReplaced,
    ViewState,
    due_date_status,
    filter_tasks,
    reduce,
)


def make_task(task_id: str, **fields) -> Task:
    return Task(id=task_id, title=fields.pop("title", f"Task {task_id}"), **fields)


@pytest.fixture()
def two_tasks():
    return [
        make_task("a", completed=False, priority="high", category="work"),
        make_task("b", completed=True, priority="low", category="home"),
    ]


class TestFilterTasks:
    @pytest.mark.parametrize(
        "tab, expected",
        [
            ("all", ["a", "b"]),
            ("active", ["a"]),
            ("completed", ["b"]),
            ("high-priority", ["a"]),
            ("work", ["a"]),
            ("home", ["b"]),
            ("Work", []),
            ("shopping", []),
        ],
    )
    def test_tabs(self, two_tasks, tab, expected):
        assert [t.id for t in filter_tasks(two_tasks, tab)] == expected

    def test_search_is_case_insensitive_over_title_and_description(self):
        tasks = [
            make_task("1", title="Buy MILK"),
            make_task("2", title="Call mom", description="about the milk run"),
            make_task("3", title="Gym"),
        ]
        assert [t.id for t in filter_tasks(tasks, search="milk")] == ["1", "2"]
        assert [t.id for t in filter_tasks(tasks, search="")] == ["1", "2", "3"]

    def test_tab_and_search_combine(self, two_tasks):
        assert filter_tasks(two_tasks, "completed", "task a") == []
        assert [t.id for t in filter_tasks(two_tasks, "all", "task b")] == ["b"]

    def test_preserves_source_order(self):
        tasks = [make_task(str(i), priority="high") for i in (3, 1, 2)]
        assert [t.id for t in filter_tasks(tasks, "high-priority")] == ["3", "1", "2"]


class TestDueDateStatus:
    today = date(2024, 1, 10)

    @pytest.mark.parametrize(
        "due, expected",
        [
            (date(2024, 1, 9), "overdue"),
            (date(2024, 1, 10), "today"),
            (date(2024, 1, 11), "soon"),
            (date(2024, 1, 12), "soon"),
            (date(2024, 1, 13), "future"),
            (date(2024, 1, 20), "future"),
        ],
    )
    def test_classification(self, due, expected):
        assert due_date_status(due, self.today) == expected

    def test_time_of_day_is_ignored(self):
        assert due_date_status(datetime(2024, 1, 10, 23, 59), self.today) == "today"
        assert due_date_status(datetime(2024, 1, 9, 23, 59), self.today) == "overdue"

    def test_no_due_date(self):
        assert due_date_status(None, self.today) is None


class TestReducer:
    def test_initial_state(self):
        state = ViewState()
        assert state.loading is True
        assert state.categories == DEFAULT_CATEGORIES
        assert state.tabs[:4] == ("all", "active", "completed", "high-priority")

    def test_loaded_keeps_default_categories_when_server_has_none(self, two_tasks):
        state = reduce(ViewState(), Loaded(two_tasks, []))
        assert state.loading is False
        assert state.tasks == tuple(two_tasks)
        assert state.categories == DEFAULT_CATEGORIES

        state = reduce(state, Loaded(two_tasks, ["errands"]))
        assert state.categories == ("errands",)

    def test_load_failed(self):
        state = reduce(ViewState(), LoadFailed("boom"))
        assert state.loading is False
        assert state.error == "boom"

    def test_task_lifecycle(self, two_tasks):
        state = reduce(ViewState(), Loaded(two_tasks, []))
        new = make_task("c")
        state = reduce(state, TaskAdded(new))
        assert [t.id for t in state.tasks] == ["c", "a", "b"]

        done = new.model_copy(update={"completed": True})
        state = reduce(state, TaskReplaced(done))
        assert state.tasks[0].completed is True
        assert [t.id for t in state.tasks] == ["c", "a", "b"]

        state = reduce(state, TaskRemoved("a"))
        assert [t.id for t in state.tasks] == ["c", "b"]

    def test_reduce_never_mutates_previous_state(self, two_tasks):
        before = reduce(ViewState(), Loaded(two_tasks, []))
        after = reduce(before, TaskRemoved("a"))
        assert len(before.tasks) == 2
        assert len(after.tasks) == 1

    def test_visible_tasks_are_derived(self, two_tasks):
        state = reduce(ViewState(), Loaded(two_tasks, []))
        state = reduce(state, TabSelected("completed"))
        assert [t.id for t in state.visible_tasks] == ["b"]
        state = reduce(state, TabSelected("all"))
        state = reduce(state, SearchChanged("TASK A"))
        assert [t.id for t in state.visible_tasks] == ["a"]

    def test_categories(self):
        state = reduce(ViewState(), Loaded([], ["home"]))
        state = reduce(state, CategoryAdded("work"))
        state = reduce(state, CategoryAdded("work"))
        assert state.categories == ("home", "work")
        assert state.has_category(" WORK ")

        state = reduce(state, TabSelected("work"))
        state = reduce(state, CategoryRemoved("work"))
        assert state.categories == ("home",)
        assert state.tab == "all"

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(ViewState(), object())  # type: ignore[arg-type]

"""
View state for the task list.

Everything here is pure: the state is an immutable value, every change goes
through `reduce`, and the list of visible tasks is derived from the state on
demand instead of being stored.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, List, Literal, Optional, Sequence, Tuple, Union

from .models import Task

TAB_ALL = "all"
TAB_ACTIVE = "active"
TAB_COMPLETED = "completed"
TAB_HIGH_PRIORITY = "high-priority"
BUILTIN_TABS = (TAB_ALL, TAB_ACTIVE, TAB_COMPLETED, TAB_HIGH_PRIORITY)

# Shown until the server reports at least one category.
DEFAULT_CATEGORIES: Tuple[str, ...] = ("personal", "work", "shopping", "other")

DueStatus = Literal["overdue", "today", "soon", "future"]


def matches_tab(task: Task, tab: str) -> bool:
    """
    Any tab that is not one of the built-in ones is a category name and is
    compared case-sensitively.
    """
    if tab == TAB_ALL:
        return True
    if tab == TAB_ACTIVE:
        return not task.completed
    if tab == TAB_COMPLETED:
        return task.completed
    if tab == TAB_HIGH_PRIORITY:
        return task.priority == "high"
    return task.category == tab


def matches_search(task: Task, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return needle in task.title.lower() or needle in (task.description or "").lower()


# PUBLIC_INTERFACE
def filter_tasks(tasks: Iterable[Task], tab: str = TAB_ALL, search: str = "") -> List[Task]:
    """Return the tasks matching both the tab and the search text, in their source order."""
    return [t for t in tasks if matches_tab(t, tab) and matches_search(t, search)]


# PUBLIC_INTERFACE
def due_date_status(
    due: Optional[Union[date, datetime]], today: Optional[date] = None
) -> Optional[DueStatus]:
    """
    Classify a due date by calendar day relative to `today` (defaults to the
    local current date). Time of day is ignored.

    Returns None when there is no due date.
    """
    if due is None:
        return None
    due_day = due.date() if isinstance(due, datetime) else due
    today = today or date.today()
    days = (due_day - today).days
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    if days <= 2:
        return "soon"
    return "future"


# ----------------------------
# Actions
# ----------------------------
@dataclass(frozen=True)
class Loaded:
    tasks: Sequence[Task]
    categories: Sequence[str]


@dataclass(frozen=True)
class LoadFailed:
    message: str


@dataclass(frozen=True)
class TaskAdded:
    task: Task


@dataclass(frozen=True)
class TaskReplaced:
    task: Task


@dataclass(frozen=True)
class TaskRemoved:
    task_id: str


@dataclass(frozen=True)
class CategoryAdded:
    name: str


@dataclass(frozen=True)
class CategoryRemoved:
    name: str


@dataclass(frozen=True)
class TabSelected:
    tab: str


@dataclass(frozen=True)
class SearchChanged:
    search: str


Action = Union[
    Loaded,
    LoadFailed,
    TaskAdded,
    TaskReplaced,
    TaskRemoved,
    CategoryAdded,
    CategoryRemoved,
    TabSelected,
    SearchChanged,
]


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class ViewState:
    """
    Immutable snapshot of what the client shows.

    Only confirmed server responses are turned into actions, so the state never
    holds a change the server rejected.
    """

    tasks: Tuple[Task, ...] = ()
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    tab: str = TAB_ALL
    search: str = ""
    loading: bool = True
    error: Optional[str] = None

    @property
    def visible_tasks(self) -> List[Task]:
        return filter_tasks(self.tasks, self.tab, self.search)

    @property
    def tabs(self) -> Tuple[str, ...]:
        return BUILTIN_TABS + self.categories

    def has_category(self, name: str) -> bool:
        return name.strip().lower() in self.categories


# PUBLIC_INTERFACE
def reduce(state: ViewState, action: Action) -> ViewState:
    """Return the state that results from applying `action` to `state`."""
    if isinstance(action, Loaded):
        categories = tuple(action.categories) or state.categories
        return replace(state, tasks=tuple(action.tasks), categories=categories, loading=False, error=None)
    if isinstance(action, LoadFailed):
        return replace(state, loading=False, error=action.message)
    if isinstance(action, TaskAdded):
        # Newest first, as the list is shown after a create
        return replace(state, tasks=(action.task,) + state.tasks)
    if isinstance(action, TaskReplaced):
        tasks = tuple(action.task if t.id == action.task.id else t for t in state.tasks)
        return replace(state, tasks=tasks)
    if isinstance(action, TaskRemoved):
        return replace(state, tasks=tuple(t for t in state.tasks if t.id != action.task_id))
    if isinstance(action, CategoryAdded):
        if action.name in state.categories:
            return state
        return replace(state, categories=state.categories + (action.name,))
    if isinstance(action, CategoryRemoved):
        categories = tuple(c for c in state.categories if c != action.name)
        # A removed category tab no longer exists
        tab = TAB_ALL if state.tab == action.name else state.tab
        return replace(state, categories=categories, tab=tab)
    if isinstance(action, TabSelected):
        return replace(state, tab=action.tab)
    if isinstance(action, SearchChanged):
        return replace(state, search=action.search)
    raise TypeError(f"Unknown action: {action!r}")

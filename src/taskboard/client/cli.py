"""Terminal front end for Taskboard.

Each invocation performs one user action against the API and reports the
outcome as a one-line notification. State is only updated from confirmed
responses; a failed request leaves it as it was.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from typing import List, Optional, TextIO

from ..logging_setup import setup_logging
from ..models import PRIORITIES
from .api import DEFAULT_BASE_URL, ApiError, TaskboardClient
from .models import Task
from .view import (
    TAB_ALL,
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
    reduce,
)

logger = logging.getLogger(__name__)

_PRIORITY_MARK = {"high": "!!!", "medium": "!! ", "low": "!  "}
_DUE_BADGE = {"overdue": "OVERDUE", "today": "due today", "soon": "due soon", "future": "due"}


def render_task(task: Task, today: Optional[date] = None) -> str:
    check = "[x]" if task.completed else "[ ]"
    parts = [check, _PRIORITY_MARK.get(task.priority, "   "), task.title, f"#{task.category}"]
    status = due_date_status(task.due_date, today)
    if status is not None and task.due_date is not None:
        parts.append(f"({_DUE_BADGE[status]} {task.due_date.date().isoformat()})")
    parts.append(f"id={task.id}")
    line = "  ".join(parts)
    if task.description:
        line += f"\n      {task.description}"
    return line


def render(state: ViewState, today: Optional[date] = None) -> str:
    header = " | ".join(f"*{t}*" if t == state.tab else t for t in state.tabs)
    lines = [header, ""]
    visible = state.visible_tasks
    if not visible:
        lines.append("No tasks found.")
    lines.extend(render_task(t, today) for t in visible)
    return "\n".join(lines)


class App:
    """Glue between the API client, the view state, and the terminal."""

    def __init__(self, client: TaskboardClient, out: TextIO = sys.stdout, err: TextIO = sys.stderr) -> None:
        self.client = client
        self.state = ViewState()
        self._out = out
        self._err = err

    # notifications
    def notify(self, title: str, description: str) -> None:
        print(f"[ok] {title}: {description}", file=self._out)

    def notify_error(self, description: str, exc: Optional[ApiError] = None) -> None:
        if exc is not None:
            logger.debug("API error status=%s error=%s: %s", exc.status_code, exc.error, exc.message)
        print(f"[error] {description}", file=self._err)

    def dispatch(self, action) -> None:
        self.state = reduce(self.state, action)

    def _find(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.state.tasks if t.id == task_id), None)

    # actions
    def load(self) -> bool:
        try:
            tasks, categories = self.client.load()
        except ApiError as e:
            self.dispatch(LoadFailed("Failed to load data. Please try again later."))
            self.notify_error("Failed to load data. Please try again later.", e)
            return False
        self.dispatch(Loaded(tasks, categories))
        return True

    def show(self, tab: str = TAB_ALL, search: str = "", today: Optional[date] = None) -> bool:
        if not self.load():
            return False
        self.dispatch(TabSelected(tab))
        self.dispatch(SearchChanged(search))
        print(render(self.state, today), file=self._out)
        return True

    def add_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        due_date: Optional[date] = None,
        category: str = "personal",
    ) -> bool:
        if not title.strip():
            self.notify_error("Task title cannot be empty")
            return False
        try:
            created = self.client.create_task(
                title, description=description, priority=priority, due_date=due_date, category=category
            )
        except ApiError as e:
            self.notify_error("Failed to add task. Please try again.", e)
            return False
        self.dispatch(TaskAdded(created))
        self.notify("Task added", f"Your task has been added successfully (id={created.id})")
        return True

    def toggle_task(self, task_id: str) -> bool:
        if not self.load():
            return False
        task = self._find(task_id)
        if task is None:
            self.notify_error("Task not found")
            return False
        try:
            updated = self.client.update_task(task_id, completed=not task.completed)
        except ApiError as e:
            self.notify_error("Failed to update task. Please try again.", e)
            return False
        self.dispatch(TaskReplaced(updated))
        if updated.completed:
            self.notify("Task completed", "Task has been marked as complete")
        else:
            self.notify("Task marked as incomplete", "Task has been marked as incomplete")
        return True

    def edit_task(self, task_id: str, **fields) -> bool:
        if "title" in fields and not (fields["title"] or "").strip():
            self.notify_error("Task title cannot be empty")
            return False
        try:
            updated = self.client.update_task(task_id, **fields)
        except ApiError as e:
            self.notify_error("Failed to update task. Please try again.", e)
            return False
        self.dispatch(TaskReplaced(updated))
        self.notify("Task updated", "Your task has been updated successfully")
        return True

    def delete_task(self, task_id: str) -> bool:
        try:
            self.client.delete_task(task_id)
        except ApiError as e:
            self.notify_error("Failed to delete task. Please try again.", e)
            return False
        self.dispatch(TaskRemoved(task_id))
        self.notify("Task deleted", "Your task has been deleted")
        return True

    def show_categories(self) -> bool:
        if not self.load():
            return False
        for name in self.state.categories:
            print(name, file=self._out)
        return True

    def add_category(self, name: str) -> bool:
        if not name.strip():
            self.notify_error("Category name cannot be empty")
            return False
        if not self.load():
            return False
        if self.state.has_category(name):
            self.notify_error("This category already exists")
            return False
        try:
            created = self.client.create_category(name)
        except ApiError as e:
            self.notify_error("Failed to add category. Please try again.", e)
            return False
        self.dispatch(CategoryAdded(created))
        self.notify("Category added", "New category has been added")
        return True

    def delete_category(self, name: str) -> bool:
        try:
            self.client.delete_category(name)
        except ApiError as e:
            if e.status_code == 404:
                self.notify_error("Category not found", e)
            else:
                self.notify_error("Failed to delete category. Please try again.", e)
            return False
        self.dispatch(CategoryRemoved(name.strip().lower()))
        self.notify("Category deleted", "Tasks in this category keep their label")
        return True


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}; use YYYY-MM-DD") from e


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="taskboard", description="Manage your tasks from the terminal")
    p.add_argument(
        "--base-url",
        default=os.getenv("TASKBOARD_API_URL", DEFAULT_BASE_URL),
        help=f"Server URL (env TASKBOARD_API_URL, default {DEFAULT_BASE_URL})",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Log request failures in detail")
    sub = p.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", help="Show tasks")
    ls.add_argument("--tab", default=TAB_ALL, help="all, active, completed, high-priority, or a category name")
    ls.add_argument("--search", "-s", default="", help="Only tasks whose title or description contains this text")

    add = sub.add_parser("add", help="Create a task")
    add.add_argument("title")
    add.add_argument("--description", "-d", default="")
    add.add_argument("--priority", "-p", choices=PRIORITIES, default="medium")
    add.add_argument("--due", type=_iso_date, default=None, help="Due date, YYYY-MM-DD")
    add.add_argument("--category", "-c", default="personal")

    toggle = sub.add_parser("toggle", help="Flip a task between complete and incomplete")
    toggle.add_argument("id")

    edit = sub.add_parser("edit", help="Change fields of a task")
    edit.add_argument("id")
    edit.add_argument("--title")
    edit.add_argument("--description", "-d")
    edit.add_argument("--priority", "-p", choices=PRIORITIES)
    edit.add_argument("--category", "-c")
    due = edit.add_mutually_exclusive_group()
    due.add_argument("--due", type=_iso_date, help="Due date, YYYY-MM-DD")
    due.add_argument("--clear-due", action="store_true", help="Remove the due date")

    rm = sub.add_parser("rm", help="Delete a task")
    rm.add_argument("id")

    sub.add_parser("categories", help="List categories")

    add_cat = sub.add_parser("add-category", help="Create a category")
    add_cat.add_argument("name")

    rm_cat = sub.add_parser("rm-category", help="Delete a category (tasks keep their label)")
    rm_cat.add_argument("name")

    return p.parse_args(argv)


def _edit_fields(args: argparse.Namespace) -> dict:
    fields = {}
    for name in ("title", "description", "priority", "category"):
        value = getattr(args, name)
        if value is not None:
            fields[name] = value
    if args.clear_due:
        fields["due_date"] = None
    elif args.due is not None:
        fields["due_date"] = args.due
    return fields


def run(app: App, args: argparse.Namespace) -> bool:
    cmd = args.command
    if cmd == "list":
        return app.show(args.tab, args.search)
    if cmd == "add":
        return app.add_task(args.title, args.description, args.priority, args.due, args.category)
    if cmd == "toggle":
        return app.toggle_task(args.id)
    if cmd == "edit":
        return app.edit_task(args.id, **_edit_fields(args))
    if cmd == "rm":
        return app.delete_task(args.id)
    if cmd == "categories":
        return app.show_categories()
    if cmd == "add-category":
        return app.add_category(args.name)
    if cmd == "rm-category":
        return app.delete_category(args.name)
    raise ValueError(f"unknown command {cmd!r}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    with TaskboardClient(args.base_url) as client:
        ok = run(App(client), args)
    raise SystemExit(0 if ok else 1)


if __name__ == "__main__":
    main()

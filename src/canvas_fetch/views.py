"""Canvas listings built on top of the paginated fetch.

Each view names the API path it reads and turns the fetched records into
plain display lines. Nothing here performs I/O.
"""

from __future__ import annotations

from typing import Iterable

from .api.pagination import Record

NO_DUE_DATE = "There is no due date"

COURSES_PATH = "/api/v1/courses?enrollment_state=active"
TODO_PATH = "/api/v1/users/self/todo"


def assignments_path(course_id: int) -> str:
    return f"/api/v1/courses/{course_id}/assignments"


def _due(record: Record) -> str:
    due = record.get("due_at")
    return NO_DUE_DATE if due is None else due


def course_lines(records: Iterable[Record], base_url: str) -> list[str]:
    base = base_url.rstrip("/")
    return [
        f"[{course['course_code']}] {course['name']} {base}/courses/{course['id']}"
        for course in records
    ]


def assignment_lines(
    records: Iterable[Record], base_url: str, course_id: int
) -> list[str]:
    base = base_url.rstrip("/")
    lines = []
    for assignment in records:
        url = f"{base}/courses/{course_id}/assignments/{assignment['id']}"
        lines.append(
            f"[{assignment['id']}] {assignment['name']} {_due(assignment)} {url}"
        )
    return lines


def todo_lines(records: Iterable[Record]) -> list[str]:
    # The due date lives on the to-do item, the name on its assignment.
    return [f"{item['assignment']['name']} {_due(item)}" for item in records]

"""Shared fixtures: an in-memory tracker standing in for Redmine."""

import pytest

from redminefs.errors import NotFoundError, TrackerError
from redminefs.tracker import Issue, Project


class FakeTracker:
    """TrackerClient backed by dictionaries, with injectable failures."""

    def __init__(
        self,
        projects: list[Project] | None = None,
        issues: dict[int, list[Issue]] | None = None,
        bodies: dict[int, str] | None = None,
    ) -> None:
        self.projects = projects or []
        self.issues = issues or {}
        self.bodies = bodies or {}
        self.failures: dict[str, TrackerError] = {}
        self.calls: list[tuple[str, int | None]] = []

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    def list_projects(self) -> list[Project]:
        self.calls.append(("list_projects", None))
        self._maybe_fail("list_projects")
        return list(self.projects)

    def list_issues(self, project_id: int) -> list[Issue]:
        self.calls.append(("list_issues", project_id))
        self._maybe_fail("list_issues")
        if project_id not in self.issues:
            raise NotFoundError(f"Unknown project {project_id}")
        return list(self.issues[project_id])

    def get_issue_body(self, issue_id: int) -> str:
        self.calls.append(("get_issue_body", issue_id))
        self._maybe_fail("get_issue_body")
        if issue_id not in self.bodies:
            raise NotFoundError(f"Unknown issue {issue_id}")
        return self.bodies[issue_id]


@pytest.fixture
def tracker() -> FakeTracker:
    """Tracker with one project 'Demo' holding issue 42."""
    return FakeTracker(
        projects=[Project(id=1, name="Demo")],
        issues={1: [Issue(id=42, subject="Fix bug")]},
        bodies={42: "steps to reproduce"},
    )

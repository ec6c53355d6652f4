"""Shared fixtures: an in-memory stand-in for GitHub's milestone endpoints."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from mrmm.errors import RemoteRejected, ResourceNotFound
from mrmm.github.milestones import MilestoneClient

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeMilestoneService:
    """Implements the Transport protocol against per-repository milestone lists.

    Listing honours state, per_page and page the way GitHub does, returning
    milestones in insertion order (oldest first).
    """

    def __init__(self, *repositories: str):
        self.repos: Dict[str, List[Dict[str, Any]]] = {repo: [] for repo in repositories}
        self.failures: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self._next_number = 1

    def seed(self, repo: str, title: str, state: str = "open", created_at: Optional[datetime] = None) -> Dict[str, Any]:
        return self._insert(repo, {"title": title, "state": state}, created_at)

    @property
    def writes(self) -> List[tuple]:
        return [call for call in self.calls if call[0] != "GET"]

    def request(self, method, path, params=None, body=None):
        self.calls.append((method, path, params, body))
        parts = path.strip("/").split("/")
        repo = f"{parts[1]}/{parts[2]}"
        if repo in self.failures:
            raise self.failures[repo]
        if repo not in self.repos:
            raise ResourceNotFound(f"{method} {path}: HTTP 404: Not Found", 404)

        if len(parts) == 4:
            if method == "GET":
                return self._list(repo, params or {})
            if method == "POST":
                return self._create(repo, body or {})
        else:
            milestone = self._get(repo, int(parts[4]), method, path)
            if method == "PATCH":
                milestone.update(body or {})
                if milestone["state"] == "closed" and milestone["closed_at"] is None:
                    milestone["closed_at"] = "2024-06-01T00:00:00Z"
                return dict(milestone)
            if method == "DELETE":
                self.repos[repo].remove(milestone)
                return None
        raise AssertionError(f"unexpected request {method} {path}")

    def _list(self, repo, params):
        state = params.get("state", "open")
        per_page = params.get("per_page", 30)
        page = params.get("page", 1)
        items = [m for m in self.repos[repo] if state == "all" or m["state"] == state]
        start = (page - 1) * per_page
        return [dict(m) for m in items[start : start + per_page]]

    def _create(self, repo, body):
        if not body.get("title"):
            raise RemoteRejected("POST: HTTP 422: Validation Failed (title: missing_field)", 422)
        due_on = body.get("due_on")
        if due_on is not None and not due_on.endswith("Z"):
            raise RemoteRejected("POST: HTTP 422: Validation Failed (due_on: invalid)", 422)
        return dict(self._insert(repo, body))

    def _insert(self, repo, body, created_at=None):
        number = self._next_number
        self._next_number += 1
        created_at = created_at or EPOCH + timedelta(hours=number)
        milestone = {
            "number": number,
            "title": body["title"],
            "state": body.get("state", "open"),
            "description": body.get("description"),
            "due_on": body.get("due_on"),
            "created_at": created_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "closed_at": None,
            "html_url": f"https://github.com/{repo}/milestone/{number}",
            "open_issues": 0,
        }
        self.repos[repo].append(milestone)
        return milestone

    def _get(self, repo, number, method, path):
        for milestone in self.repos[repo]:
            if milestone["number"] == number:
                return milestone
        raise ResourceNotFound(f"{method} {path}: HTTP 404: Not Found", 404)


@pytest.fixture
def service():
    return FakeMilestoneService("org1/repoA", "org2/repoB")


@pytest.fixture
def client(service):
    return MilestoneClient(service)

from __future__ import annotations

import json
from typing import Any

import pytest

from satis_gitlab.client import RawFileUnavailable
from satis_gitlab.model import ProjectRecord


def make_project(
    pid: int,
    *,
    group: str | None = "acme",
    branch: str | None = "main",
    name: str | None = None,
) -> ProjectRecord:
    slug = name or f"project-{pid}"
    return ProjectRecord(
        id=pid,
        name=f"{group or 'user'} / {slug}",
        namespace=group,
        default_branch=branch,
        clone_url=f"https://gitlab.example.com/{group or 'user'}/{slug}.git",
    )


class FakeGitlabClient:
    """In-memory GitLab: a list of projects plus raw files keyed by project id."""

    def __init__(
        self,
        projects: list[ProjectRecord] | None = None,
        files: dict[int, bytes] | None = None,
    ) -> None:
        self.projects = list(projects or [])
        self.files = dict(files or {})
        self.pages_requested: list[tuple[int, int]] = []
        self.files_requested: list[tuple[int, str, str]] = []
        self.closed = False

    def __enter__(self) -> FakeGitlabClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def add(self, project: ProjectRecord, manifest: Any = None) -> None:
        self.projects.append(project)
        if manifest is None:
            return
        if isinstance(manifest, bytes):
            self.files[project.id] = manifest
        else:
            self.files[project.id] = json.dumps(manifest).encode("utf-8")

    def list_projects(self, page: int, per_page: int) -> list[ProjectRecord]:
        self.pages_requested.append((page, per_page))
        start = (page - 1) * per_page
        return self.projects[start : start + per_page]

    def get_raw_file(self, project_id: int, path: str, ref: str) -> bytes:
        self.files_requested.append((project_id, path, ref))
        try:
            return self.files[project_id]
        except KeyError:
            raise RawFileUnavailable(f"404 {path}") from None


@pytest.fixture
def fake_client() -> FakeGitlabClient:
    return FakeGitlabClient()

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence

from .client import GitlabClient, RawFileUnavailable
from .formats import MANIFEST_FILENAME, MAX_PAGES, MAX_PER_PAGE, PER_PAGE
from .model import ManifestResolution, ProjectOutcome, ProjectRecord


def parse_groups(raw: str | Sequence[str] | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    items = raw.split(",") if isinstance(raw, str) else [str(x) for x in raw]
    return tuple(item.strip() for item in items if item.strip())


def iter_projects(
    client: GitlabClient,
    *,
    per_page: int = PER_PAGE,
    max_pages: int = MAX_PAGES,
) -> Iterator[ProjectRecord]:
    """Yield every listed project, one page at a time.

    Stops at the first empty or partial page, or once ``max_pages`` pages
    were read. Transport errors are not caught here.
    """

    per_page = max(1, min(per_page, MAX_PER_PAGE))
    for page in range(1, max_pages + 1):
        projects = client.list_projects(page, per_page)
        if not projects:
            return
        yield from projects
        if len(projects) < per_page:
            return


def is_filtered(project: ProjectRecord, groups: Sequence[str]) -> bool:
    if not groups or project.namespace is None:
        return False
    return project.namespace not in groups


def resolve_manifest(
    client: GitlabClient,
    project: ProjectRecord,
    path: str = MANIFEST_FILENAME,
) -> ManifestResolution:
    if not project.default_branch:
        return ManifestResolution(skip_reason="not-found")
    try:
        raw = client.get_raw_file(project.id, path, project.default_branch)
    except RawFileUnavailable:
        return ManifestResolution(skip_reason="not-found")

    try:
        manifest = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ManifestResolution(skip_reason="name-missing")
    name = manifest.get("name") if isinstance(manifest, dict) else None
    if not isinstance(name, str) or not name:
        return ManifestResolution(skip_reason="name-missing")
    return ManifestResolution(name=name)


def scan_projects(
    client: GitlabClient,
    *,
    groups: Sequence[str] = (),
    per_page: int = PER_PAGE,
    max_pages: int = MAX_PAGES,
    manifest_path: str = MANIFEST_FILENAME,
    on_filtered: Callable[[ProjectRecord], None] | None = None,
) -> Iterator[ProjectOutcome]:
    """Resolve manifests for every listed project in listing order."""

    for project in iter_projects(client, per_page=per_page, max_pages=max_pages):
        if is_filtered(project, groups):
            if on_filtered is not None:
                on_filtered(project)
            continue
        yield ProjectOutcome(project, resolve_manifest(client, project, manifest_path))

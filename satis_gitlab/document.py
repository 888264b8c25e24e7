from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from .formats import (
    ANY_VERSION,
    ARCHIVE_SETTINGS,
    DEFAULT_HOMEPAGE,
    INSECURE_SSL_OPTIONS,
)
from .model import ProjectRecord


def gitlab_domain(gitlab_url: str) -> str:
    host = urlsplit(gitlab_url).hostname
    if not host:
        raise ValueError(f"cannot extract a host name from {gitlab_url!r}")
    return host


def _section(document: dict[str, Any], key: str) -> dict[str, Any]:
    value = document.get(key)
    if not isinstance(value, dict):
        value = {}
        document[key] = value
    return value


def apply_options(
    document: dict[str, Any],
    *,
    gitlab_url: str,
    token: str | None = None,
    homepage: str = DEFAULT_HOMEPAGE,
    archive: bool = False,
    write_token: bool = True,
) -> str:
    """Merge command line options into a loaded template.

    Returns the GitLab domain registered under ``config.gitlab-domains``.
    """

    domain = gitlab_domain(gitlab_url)
    document["homepage"] = homepage
    if archive:
        document["require-dependencies"] = True
        document["archive"] = dict(ARCHIVE_SETTINGS)

    config = _section(document, "config")
    domains = config.get("gitlab-domains")
    if isinstance(domains, list):
        domains.append(domain)
    else:
        config["gitlab-domains"] = [domain]

    if write_token and token:
        _section(config, "gitlab-token")[domain] = token
    return domain


def repository_entry(clone_url: str, *, verify_ssl: bool = False) -> dict[str, Any]:
    entry: dict[str, Any] = {"type": "vcs", "url": clone_url}
    if not verify_ssl:
        entry["options"] = {"ssl": dict(INSECURE_SSL_OPTIONS)}
    return entry


def add_project(
    document: dict[str, Any],
    project: ProjectRecord,
    package_name: str,
    *,
    verify_ssl: bool = False,
) -> None:
    repositories = document.get("repositories")
    if not isinstance(repositories, list):
        repositories = []
        document["repositories"] = repositories
    repositories.append(repository_entry(project.clone_url, verify_ssl=verify_ssl))
    _section(document, "require")[package_name] = ANY_VERSION

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

SkipReason = Literal["not-found", "name-missing"]


@dataclass(frozen=True)
class ProjectRecord:
    """Represents a project listed by the hosting API."""

    id: int
    name: str  # e.g. "Group / project" (name_with_namespace)
    namespace: str | None  # namespace.name, used by group filtering
    default_branch: str | None  # None for empty repositories
    clone_url: str  # http_url_to_repo

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ProjectRecord:
        namespace = data.get("namespace")
        namespace_name = None
        if isinstance(namespace, dict) and namespace.get("name") is not None:
            namespace_name = str(namespace["name"])
        branch = data.get("default_branch")
        return cls(
            id=int(data["id"]),
            name=str(data.get("name_with_namespace") or data.get("name") or ""),
            namespace=namespace_name,
            default_branch=str(branch) if branch else None,
            clone_url=str(data.get("http_url_to_repo") or ""),
        )


@dataclass(frozen=True)
class ManifestResolution:
    """Outcome of looking up the package name of one project.

    Exactly one of ``name`` and ``skip_reason`` is set.
    """

    name: str | None = None
    skip_reason: SkipReason | None = None

    @property
    def ok(self) -> bool:
        return self.name is not None


@dataclass(frozen=True)
class ProjectOutcome:
    project: ProjectRecord
    resolution: ManifestResolution

    @property
    def has_manifest(self) -> bool:
        return self.resolution.skip_reason != "not-found"

from __future__ import annotations

from typing import Any, Protocol
from urllib.parse import quote

import requests
import urllib3

from .formats import API_V4
from .model import ProjectRecord


class RawFileUnavailable(Exception):
    """Raised when a repository file cannot be fetched for any reason."""


class GitlabClient(Protocol):
    def list_projects(self, page: int, per_page: int) -> list[ProjectRecord]: ...

    def get_raw_file(self, project_id: int, path: str, ref: str) -> bytes: ...


def api_url(base_url: str) -> str:
    url = base_url.rstrip("/")
    if not url.endswith(API_V4):
        url = f"{url}{API_V4}"
    return url


class RestGitlabClient:
    """GitLab REST API v4 client covering project listing and raw file reads.

    Listing errors propagate as ``requests`` exceptions. Raw file errors are
    reported as :class:`RawFileUnavailable`.
    """

    def __init__(
        self, base_url: str, token: str | None = None, *, verify_ssl: bool = False
    ) -> None:
        self.api_url = api_url(base_url)
        self.session = requests.Session()
        self.session.verify = verify_ssl
        if token:
            self.session.headers.update({"PRIVATE-TOKEN": token})
        if not verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def __enter__(self) -> RestGitlabClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, endpoint: str, params: dict[str, Any]) -> requests.Response:
        resp = self.session.get(f"{self.api_url}{endpoint}", params=params)
        resp.raise_for_status()
        return resp

    def list_projects(self, page: int, per_page: int) -> list[ProjectRecord]:
        data = self._get("/projects", {"page": page, "per_page": per_page}).json()
        if not isinstance(data, list):
            raise requests.HTTPError(
                f"unexpected /projects payload: {type(data).__name__}"
            )
        try:
            return [ProjectRecord.from_api(item) for item in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise requests.HTTPError(
                f"malformed project in /projects payload: {e!r}"
            ) from e

    def get_raw_file(self, project_id: int, path: str, ref: str) -> bytes:
        encoded = quote(path, safe="")
        endpoint = f"/projects/{project_id}/repository/files/{encoded}/raw"
        try:
            return self._get(endpoint, {"ref": ref}).content
        except requests.RequestException as e:
            raise RawFileUnavailable(f"{path}@{ref}: {e}") from e

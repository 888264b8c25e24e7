from __future__ import annotations

PER_PAGE = 50
# GitLab caps per_page server side.
MAX_PER_PAGE = 100
MAX_PAGES = 10000

MANIFEST_FILENAME = "composer.json"
DEFAULT_HOMEPAGE = "http://localhost/satis/"
DEFAULT_OUTPUT = "satis.json"
API_V4 = "/api/v4"

ANY_VERSION = "*"

ARCHIVE_SETTINGS: dict[str, object] = {
    "directory": "dist",
    "format": "tar",
    "skip-dev": True,
}

# Repository options used when certificate verification is disabled.
INSECURE_SSL_OPTIONS: dict[str, bool] = {
    "verify_peer": False,
    "verify_peer_name": False,
    "allow_self_signed": True,
}

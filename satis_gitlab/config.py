from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .formats import (
    DEFAULT_HOMEPAGE,
    DEFAULT_OUTPUT,
    MAX_PAGES,
    MAX_PER_PAGE,
    PER_PAGE,
)
from .scan import parse_groups

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

CONFIG_FILENAMES: tuple[str, ...] = (".satis-gitlab.toml", "satis-gitlab.toml")
PYPROJECT_FILENAME = "pyproject.toml"
SECTION = "satis-gitlab"


@dataclass
class Config:
    # Default output path when CLI does not specify -O/--output
    output: str = DEFAULT_OUTPUT
    # Template path; None means the bundled default template.
    template: str | None = None
    homepage: str = DEFAULT_HOMEPAGE
    groups: list[str] = field(default_factory=list)
    archive: bool = False
    # Write the GitLab token into config.gitlab-token (disable with --no-token).
    write_token: bool = True
    # Disabled by default: repository entries then carry ssl options that
    # accept self-signed certificates.
    verify_ssl: bool = False
    per_page: int = PER_PAGE
    max_pages: int = MAX_PAGES


def _find_config_path(root: Path) -> Path | None:
    root = root.resolve()
    for name in CONFIG_FILENAMES:
        p = root / name
        if p.exists():
            return p
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.exists():
        return pyproject
    return None


def _extract_section(data: Any, *, from_pyproject: bool) -> dict[str, Any]:
    section: dict[str, Any] = {}
    if not isinstance(data, dict):
        return section

    if not from_pyproject:
        # Preferred for dedicated config files: [satis-gitlab]
        own = data.get(SECTION)
        if isinstance(own, dict):
            return own

    # Supported in all files; required for pyproject.toml.
    tool = data.get("tool")
    if isinstance(tool, dict):
        own2 = tool.get(SECTION)
        if isinstance(own2, dict):
            return own2

    return section


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def load_config(root: Path) -> Config:
    cfg_path = _find_config_path(root)
    if cfg_path is None:
        return Config()

    data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    section = _extract_section(data, from_pyproject=cfg_path.name == PYPROJECT_FILENAME)
    cfg = Config()

    out = section.get("output", cfg.output)
    if isinstance(out, str) and out.strip():
        cfg.output = out.strip()

    template = section.get("template")
    if isinstance(template, str) and template.strip():
        tpl = Path(template.strip())
        # Relative template paths are resolved against the config file.
        cfg.template = str(tpl if tpl.is_absolute() else cfg_path.parent / tpl)

    homepage = section.get("homepage", cfg.homepage)
    if isinstance(homepage, str) and homepage.strip():
        cfg.homepage = homepage.strip()

    groups = section.get("groups")
    if isinstance(groups, (str, list)):
        cfg.groups = list(parse_groups(groups))

    cfg.archive = bool(section.get("archive", cfg.archive))
    cfg.write_token = bool(section.get("write_token", cfg.write_token))
    cfg.verify_ssl = bool(section.get("verify_ssl", cfg.verify_ssl))
    cfg.per_page = min(
        _positive_int(section.get("per_page"), cfg.per_page), MAX_PER_PAGE
    )
    cfg.max_pages = _positive_int(section.get("max_pages"), cfg.max_pages)

    return cfg

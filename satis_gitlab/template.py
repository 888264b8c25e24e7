from __future__ import annotations

import json
from pathlib import Path
from typing import Any

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "resources" / "default-template.json"


class SatisGitlabError(ValueError):
    """Base class for fatal template and output errors."""


class TemplateUnreadable(SatisGitlabError):
    pass


class TemplateMalformed(SatisGitlabError):
    pass


class OutputUnwritable(SatisGitlabError):
    pass


def load_template(path: Path = DEFAULT_TEMPLATE_PATH) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateUnreadable(f"cannot read template {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateMalformed(f"template {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise TemplateMalformed(
            f"template {path} must contain a JSON object, got {type(data).__name__}"
        )
    return data


def render_document(document: dict[str, Any]) -> str:
    # Key order is insertion order so template keys stay where the user put them.
    return json.dumps(document, indent=4) + "\n"


def write_document(document: dict[str, Any], path: Path) -> None:
    try:
        path.write_text(render_document(document), encoding="utf-8")
    except OSError as e:
        raise OutputUnwritable(f"cannot write {path}: {e}") from e

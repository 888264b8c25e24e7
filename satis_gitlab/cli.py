from __future__ import annotations

import argparse
import importlib.metadata as importlib_metadata
from dataclasses import dataclass
from pathlib import Path

import requests

from .client import RestGitlabClient
from .config import Config, load_config
from .document import add_project, apply_options
from .formats import MANIFEST_FILENAME
from .model import ProjectOutcome, ProjectRecord
from .scan import parse_groups, scan_projects
from .template import (
    DEFAULT_TEMPLATE_PATH,
    SatisGitlabError,
    load_template,
    write_document,
)

QUIET = 0
NORMAL = 1
VERBOSE = 2


def _satis_gitlab_version() -> str:
    try:
        return importlib_metadata.version("satis-gitlab")
    except importlib_metadata.PackageNotFoundError:
        return "0+unknown"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="satis-gitlab",
        description="Generate a SATIS configuration by scanning GitLab repositories.",
        epilog=(
            f"Looks for {MANIFEST_FILENAME} on the default branch of every project, "
            "extracts the package name and registers it in the SATIS configuration."
        ),
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"satis-gitlab {_satis_gitlab_version()}",
    )
    p.add_argument("gitlab_url", metavar="gitlab-url", help="GitLab base URL")
    p.add_argument(
        "gitlab_token",
        metavar="gitlab-token",
        nargs="?",
        default=None,
        help="GitLab private token (optional for public instances)",
    )
    p.add_argument(
        "--template",
        type=Path,
        default=None,
        help=(
            "Template satis.json extended with GitLab repositories "
            "(default: config 'template' or the bundled template)"
        ),
    )
    p.add_argument(
        "-G",
        "--groups",
        default=None,
        help="Only scan projects of these GitLab groups (comma separated)",
    )
    p.add_argument(
        "--homepage",
        default=None,
        help="SATIS homepage (default: config 'homepage' or http://localhost/satis/)",
    )
    p.add_argument(
        "--archive",
        action="store_true",
        default=None,
        help="Enable archive mirroring (require-dependencies + dist tarballs)",
    )
    p.add_argument(
        "--no-token",
        dest="no_token",
        action="store_true",
        default=None,
        help="Do not write the GitLab token in the output configuration",
    )
    p.add_argument(
        "--verify-ssl",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Verify TLS certificates of the GitLab API and of generated "
            "repositories (default: off via config)"
        ),
    )
    p.add_argument(
        "-O",
        "--output",
        type=Path,
        default=None,
        help="Output config file (default: config 'output' or satis.json)",
    )
    noise = p.add_mutually_exclusive_group()
    noise.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also report projects without a manifest and filtered projects",
    )
    noise.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report failures",
    )
    return p


@dataclass(frozen=True)
class RunOptions:
    gitlab_url: str
    token: str | None
    template: Path
    groups: tuple[str, ...]
    homepage: str
    archive: bool
    write_token: bool
    verify_ssl: bool
    output: Path
    per_page: int
    max_pages: int
    verbosity: int


def _resolve_run_options(cfg: Config, args: argparse.Namespace) -> RunOptions:
    if args.template is not None:
        template = Path(args.template)
    elif cfg.template is not None:
        template = Path(cfg.template)
    else:
        template = DEFAULT_TEMPLATE_PATH
    groups = (
        parse_groups(args.groups) if args.groups is not None else tuple(cfg.groups)
    )
    write_token = cfg.write_token if args.no_token is None else not args.no_token
    verbosity = NORMAL
    if args.verbose:
        verbosity = VERBOSE
    elif args.quiet:
        verbosity = QUIET
    return RunOptions(
        gitlab_url=args.gitlab_url,
        token=args.gitlab_token,
        template=template,
        groups=groups,
        homepage=args.homepage if args.homepage is not None else cfg.homepage,
        archive=bool(cfg.archive) if args.archive is None else bool(args.archive),
        write_token=write_token,
        verify_ssl=(
            bool(cfg.verify_ssl) if args.verify_ssl is None else bool(args.verify_ssl)
        ),
        output=Path(args.output) if args.output is not None else Path(cfg.output),
        per_page=cfg.per_page,
        max_pages=cfg.max_pages,
        verbosity=verbosity,
    )


def _emit(options: RunOptions, message: str, *, level: int = NORMAL) -> None:
    if options.verbosity >= level:
        print(message)


def _project_line(project: ProjectRecord, message: str) -> str:
    return f"{project.name} (branch {project.default_branch or '-'}) : {message}"


def _report_outcome(options: RunOptions, outcome: ProjectOutcome) -> None:
    project = outcome.project
    resolution = outcome.resolution
    if resolution.ok:
        _emit(options, _project_line(project, f"{resolution.name}:*"))
    elif resolution.skip_reason == "not-found":
        _emit(
            options,
            _project_line(project, f"{MANIFEST_FILENAME} not found"),
            level=VERBOSE,
        )
    else:
        _emit(
            options,
            _project_line(project, f"name not defined in {MANIFEST_FILENAME}"),
        )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    options = _resolve_run_options(load_config(Path.cwd()), args)

    _emit(options, f"Loading template {options.template}...")
    try:
        document = load_template(options.template)
    except SatisGitlabError as e:
        parser.error(str(e))
    try:
        apply_options(
            document,
            gitlab_url=options.gitlab_url,
            token=options.token,
            homepage=options.homepage,
            archive=options.archive,
            write_token=options.write_token,
        )
    except ValueError as e:
        parser.error(f"gitlab-url: {e}")

    _emit(options, f"Listing gitlab repositories from {options.gitlab_url}...")
    accepted = 0
    skipped = 0
    with RestGitlabClient(
        options.gitlab_url, options.token, verify_ssl=options.verify_ssl
    ) as client:
        outcomes = scan_projects(
            client,
            groups=options.groups,
            per_page=options.per_page,
            max_pages=options.max_pages,
            on_filtered=lambda project: _emit(
                options, _project_line(project, "filtered"), level=VERBOSE
            ),
        )
        try:
            for outcome in outcomes:
                if outcome.resolution.ok:
                    add_project(
                        document,
                        outcome.project,
                        outcome.resolution.name,
                        verify_ssl=options.verify_ssl,
                    )
                    accepted += 1
                else:
                    skipped += 1
                _report_outcome(options, outcome)
        except requests.RequestException as e:
            raise SystemExit(
                f"satis-gitlab: error: listing projects from "
                f"{options.gitlab_url} failed: {e}"
            ) from e

    _emit(options, f"Generating satis configuration file: {options.output}")
    try:
        write_document(document, options.output)
    except SatisGitlabError as e:
        parser.error(str(e))
    _emit(
        options,
        f"Wrote {options.output} ({accepted} package(s), {skipped} skipped).",
    )


if __name__ == "__main__":
    main()

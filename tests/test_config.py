from __future__ import annotations

from pathlib import Path

from satis_gitlab.config import Config, load_config


def test_config_defaults() -> None:
    """Test that Config has correct default values."""
    cfg = Config()
    assert cfg.output == "satis.json"
    assert cfg.template is None
    assert cfg.homepage == "http://localhost/satis/"
    assert cfg.groups == []
    assert cfg.archive is False
    assert cfg.write_token is True
    assert cfg.verify_ssl is False
    assert cfg.per_page == 50
    assert cfg.max_pages == 10000


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Test loading config when file doesn't exist."""
    assert load_config(tmp_path) == Config()


def test_load_config_empty_file(tmp_path: Path) -> None:
    (tmp_path / "satis-gitlab.toml").write_text("", encoding="utf-8")
    assert load_config(tmp_path) == Config()


def test_load_config_custom_values(tmp_path: Path) -> None:
    (tmp_path / "satis-gitlab.toml").write_text(
        """[satis-gitlab]
output = "public/satis.json"
template = "tpl/satis.json"
homepage = "https://packages.example.com/"
groups = ["acme", " tools "]
archive = true
write_token = false
verify_ssl = true
per_page = 100
max_pages = 3
""",
        encoding="utf-8",
    )

    cfg = load_config(tmp_path)
    assert cfg.output == "public/satis.json"
    assert cfg.template == str(tmp_path.resolve() / "tpl" / "satis.json")
    assert cfg.homepage == "https://packages.example.com/"
    assert cfg.groups == ["acme", "tools"]
    assert cfg.archive is True
    assert cfg.write_token is False
    assert cfg.verify_ssl is True
    assert cfg.per_page == 100
    assert cfg.max_pages == 3


def test_load_config_groups_as_comma_string(tmp_path: Path) -> None:
    (tmp_path / ".satis-gitlab.toml").write_text(
        '[satis-gitlab]\ngroups = "acme,tools"\n', encoding="utf-8"
    )
    assert load_config(tmp_path).groups == ["acme", "tools"]


def test_load_config_invalid_numbers_fall_back(tmp_path: Path) -> None:
    (tmp_path / "satis-gitlab.toml").write_text(
        '[satis-gitlab]\nper_page = "lots"\nmax_pages = -1\n', encoding="utf-8"
    )
    cfg = load_config(tmp_path)
    assert cfg.per_page == 50
    assert cfg.max_pages == 10000


def test_load_config_dotfile_preferred(tmp_path: Path) -> None:
    (tmp_path / ".satis-gitlab.toml").write_text(
        '[satis-gitlab]\noutput = "dot.json"\n', encoding="utf-8"
    )
    (tmp_path / "satis-gitlab.toml").write_text(
        '[satis-gitlab]\noutput = "plain.json"\n', encoding="utf-8"
    )
    assert load_config(tmp_path).output == "dot.json"


def test_load_config_from_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """[project]
name = "mirror"

[tool.satis-gitlab]
homepage = "https://mirror.example.com/"
archive = true
""",
        encoding="utf-8",
    )
    cfg = load_config(tmp_path)
    assert cfg.homepage == "https://mirror.example.com/"
    assert cfg.archive is True


def test_load_config_pyproject_ignores_top_level_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[satis-gitlab]\nhomepage = "https://ignored/"\n', encoding="utf-8"
    )
    assert load_config(tmp_path).homepage == "http://localhost/satis/"


def test_load_config_per_page_capped_at_gitlab_limit(tmp_path: Path) -> None:
    (tmp_path / "satis-gitlab.toml").write_text(
        "[satis-gitlab]\nper_page = 150\n", encoding="utf-8"
    )
    assert load_config(tmp_path).per_page == 100

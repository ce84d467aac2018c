"""viewcontext configuration system.

A view's configuration store is a plain mapping. This module provides the
typed, file-backed way to build one: YAML files whose strings may reference
the environment as ``${VAR}`` or ``${VAR:-default}``.

Without an explicit path, ``load_config`` looks in the search directory for
``.viewcontext/config.yaml`` and then ``viewcontext.yaml``.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Configuration keys read by View
CONFIG_VIEWS_PATH = "views_path"
CONFIG_THIS_ALIAS = "this_alias"
CONFIG_ENCODING = "encoding"

CONFIG_DIR_NAME = ".viewcontext"
CONFIG_LOCATIONS = (
    Path(CONFIG_DIR_NAME) / "config.yaml",
    Path("viewcontext.yaml"),
)

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ViewSettings:
    """Settings consumed by the view itself.

    Attributes:
        views_path: Base directory for relative view candidates
        this_alias: Variable name exposing the view to its templates (None to disable)
        encoding: Template file encoding
    """

    views_path: str = ""
    this_alias: str | None = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate view settings."""
        if self.this_alias == "":
            self.this_alias = None

        if self.this_alias is not None and not self.this_alias.isidentifier():
            raise ValueError(f"Invalid this_alias: {self.this_alias!r} is not an identifier")


@dataclass
class JinjaSettings:
    """Jinja2 environment settings.

    Attributes:
        search_paths: Directories for relative include/extends names
        autoescape: File extensions to autoescape, or a fixed True/False
        trim_blocks: Remove the first newline after a block tag
        lstrip_blocks: Strip whitespace before a block tag
    """

    search_paths: list[str] = field(default_factory=list)
    autoescape: bool | list[str] = field(default_factory=lambda: ["html", "xml"])
    trim_blocks: bool = True
    lstrip_blocks: bool = True


@dataclass
class ViewConfig:
    """Top-level viewcontext configuration.

    Attributes:
        view: View settings
        jinja: Jinja2 executor settings
        extra: Additional configuration items passed through to the view
    """

    view: ViewSettings = field(default_factory=ViewSettings)
    jinja: JinjaSettings = field(default_factory=JinjaSettings)
    extra: dict[str, Any] = field(default_factory=dict)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def to_items(self) -> dict[str, Any]:
        """Flatten into the mapping stored as the view's configuration items."""
        items = dict(self.extra)
        items[CONFIG_VIEWS_PATH] = self.view.views_path
        items[CONFIG_THIS_ALIAS] = self.view.this_alias
        items[CONFIG_ENCODING] = self.view.encoding
        return items



# =============================================================================
# Environment Variable Expansion
# =============================================================================

_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def _env_value(match: re.Match[str]) -> str:
    name, default = match.group("name", "default")
    value = os.environ.get(name)
    if not value and default is not None:
        return default
    if value is None:
        raise ValueError(f"Environment variable {name} is not set and ${{{name}}} has no default")
    return value


def expand_env_vars(value: Any) -> Any:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in strings.

    Mappings and lists are walked recursively; other values are returned
    unchanged. A default applies when the variable is unset or empty.

    Raises:
        ValueError: If a referenced variable is unset and has no default
    """
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_env_value, value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


# =============================================================================
# Config Loading
# =============================================================================


def _relative_to(base_dir: Path | None, path: str) -> str:
    if base_dir is None or not path or os.path.isabs(path):
        return path
    return str(base_dir / path)


def _autoescape_setting(value: Any) -> bool | list[str]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return [value]
    return list(value)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section {name!r} must be a mapping, got {type(section).__name__}")
    return section


def load_config_from_dict(
    data: dict[str, Any],
    base_dir: Path | None = None,
) -> ViewConfig:
    """Build a ViewConfig from parsed configuration data.

    Environment references are expanded first. Missing sections and keys
    keep their defaults.

    Args:
        data: Mapping with optional ``view``, ``jinja`` and ``extra`` sections
        base_dir: Directory that relative paths are taken relative to

    Returns:
        ViewConfig instance

    Raises:
        ValueError: If a section is not a mapping or a setting is invalid
    """
    data = expand_env_vars(data)
    view = _section(data, "view")
    jinja = _section(data, "jinja")
    defaults = JinjaSettings()

    return ViewConfig(
        view=ViewSettings(
            views_path=_relative_to(base_dir, view.get("views_path") or ""),
            this_alias=view.get("this_alias"),
            encoding=view.get("encoding") or "utf-8",
        ),
        jinja=JinjaSettings(
            search_paths=[
                _relative_to(base_dir, str(p)) for p in jinja.get("search_paths") or []
            ],
            autoescape=_autoescape_setting(jinja.get("autoescape", defaults.autoescape)),
            trim_blocks=jinja.get("trim_blocks", defaults.trim_blocks),
            lstrip_blocks=jinja.get("lstrip_blocks", defaults.lstrip_blocks),
        ),
        extra=dict(_section(data, "extra")),
    )


def load_config(
    path: str | os.PathLike[str] | None = None,
    search_dir: str | os.PathLike[str] | None = None,
) -> ViewConfig:
    """Load configuration from a YAML file.

    Without ``path``, the first of ``CONFIG_LOCATIONS`` found in
    ``search_dir`` (the current directory by default) is loaded, and
    defaults are returned when there is none.

    Relative paths in the file are anchored to the project directory: the
    directory holding the file, or the parent of ``.viewcontext/``.

    Args:
        path: Explicit config file
        search_dir: Directory searched when no path is given

    Returns:
        ViewConfig instance

    Raises:
        FileNotFoundError: If ``path`` is given and is not a file
        ValueError: If the file does not hold a mapping or a setting is invalid
    """
    if path is None:
        root = Path(search_dir) if search_dir is not None else Path.cwd()
        found = next((root / loc for loc in CONFIG_LOCATIONS if (root / loc).is_file()), None)
        if found is None:
            logger.debug("No config file in %s, using defaults", root)
            return ViewConfig()
        path = found

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No viewcontext config at {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")

    project_dir = path.resolve().parent
    if project_dir.name == CONFIG_DIR_NAME:
        project_dir = project_dir.parent

    config = load_config_from_dict(data, base_dir=project_dir)
    config._config_path = path
    logger.debug("Loaded config from %s", path)
    return config

"""Layered TOML configuration.

A config directory holds ``default.toml`` plus optional per-environment
overlays named ``{INTAKE_ENV}.toml``. Overlays are merged table by table,
so an overlay only lists the keys it changes. The merged result is checked
against the Settings layout before pydantic-settings sees it: sections
must be tables, and keys Settings doesn't know are reported.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, get_origin

from pydantic import BaseModel

from intake.errors import ConfigurationError
from intake.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_ENV = "INTAKE_CONFIG_DIR"
ENVIRONMENT_ENV = "INTAKE_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"


@dataclass(frozen=True)
class ConfigLayers:
    """Merged configuration values and where they came from."""

    values: dict[str, Any]
    environment: str
    files: list[Path] = field(default_factory=list)
    ignored_keys: list[str] = field(default_factory=list)


def find_config_dir(start: Path | None = None) -> Path:
    """Locate the config directory.

    INTAKE_CONFIG_DIR wins when set. Otherwise the nearest ``config/``
    holding a default.toml, searching from ``start`` (the working
    directory) up through its parents.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise ConfigurationError(f"{CONFIG_DIR_ENV} is not a directory: {override}")
        return path

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate

    raise ConfigurationError(
        f"No config/{DEFAULT_FILE} found above {origin}; set {CONFIG_DIR_ENV}"
    )


def current_environment() -> str:
    """Name of the overlay to apply, from INTAKE_ENV."""
    return os.environ.get(ENVIRONMENT_ENV, "").strip() or DEFAULT_ENVIRONMENT


def read_toml(path: Path) -> dict[str, Any]:
    """Parse one TOML file, naming the file in any error."""
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def merge_tables(
    base: dict[str, Any],
    overlay: dict[str, Any],
    prefix: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Return base with overlay applied; neither input is modified.

    Tables present in both are merged recursively. A key that is a table
    on one side and a plain value on the other is an error.
    """
    merged = dict(base)
    for key, value in overlay.items():
        path = (*prefix, key)
        if key not in merged:
            merged[key] = value
            continue

        current = merged[key]
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_tables(current, value, path)
        elif isinstance(current, dict) or isinstance(value, dict):
            raise ConfigurationError(
                f"'{'.'.join(path)}' is a table in one file and a value in another"
            )
        else:
            merged[key] = value
    return merged


def _section_model(annotation: Any) -> type[BaseModel] | None:
    # Parameterized generics such as list[str] are not model classes
    if get_origin(annotation) is not None:
        return None
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def check_layout(
    values: dict[str, Any],
    model: type[BaseModel],
    prefix: tuple[str, ...] = (),
) -> list[str]:
    """Check values against model's fields, recursing into sections.

    Returns:
        Dotted names of keys the model doesn't define

    Raises:
        ConfigurationError: A section such as [extraction] is not a table
    """
    ignored: list[str] = []
    for key, value in values.items():
        dotted = ".".join((*prefix, key))
        field_info = model.model_fields.get(key)
        if field_info is None:
            logger.warning("config_key_ignored", key=dotted)
            ignored.append(dotted)
            continue

        section = _section_model(field_info.annotation)
        if section is None:
            continue
        if not isinstance(value, dict):
            raise ConfigurationError(f"[{dotted}] must be a table")
        ignored.extend(check_layout(value, section, (*prefix, key)))
    return ignored


def load_config(
    model: type[BaseModel],
    config_dir: Path | None = None,
    environment: str | None = None,
) -> ConfigLayers:
    """Read default.toml and the environment overlay for model.

    Args:
        model: Settings class the values are checked against
        config_dir: Directory to read (found with find_config_dir if None)
        environment: Overlay name (INTAKE_ENV or "development" if None)

    Raises:
        ConfigurationError: Missing default.toml, invalid TOML, or a
            layout that can't match model
    """
    directory = config_dir or find_config_dir()
    environment = environment or current_environment()

    files = [directory / DEFAULT_FILE]
    overlay = directory / f"{environment}.toml"
    if environment != "default" and overlay.is_file():
        files.append(overlay)

    values: dict[str, Any] = {}
    for path in files:
        values = merge_tables(values, read_toml(path))

    return ConfigLayers(
        values=values,
        environment=environment,
        files=files,
        ignored_keys=check_layout(values, model),
    )

import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from ragbot.errors import ConfigError

logger = structlog.get_logger()

# $(VAR) or $(VAR:-fallback)
_PLACEHOLDER = re.compile(r"\$\(([A-Za-z_][A-Za-z0-9_]*)(?::-([^)]*))?\)")


def _substitute(match: re.Match[str]) -> str:
    name, fallback = match.group(1), match.group(2)
    return os.getenv(name) or fallback or ""


def expand_env(value: Any) -> Any:
    """Replace ``$(VAR)`` placeholders in every string of a parsed YAML tree.

    ``$(VAR:-fallback)`` yields *fallback* when ``VAR`` is unset or empty;
    a bare ``$(VAR)`` yields an empty string. Non-string scalars pass through.
    """
    match value:
        case str():
            return _PLACEHOLDER.sub(_substitute, value)
        case dict():
            return {key: expand_env(item) for key, item in value.items()}
        case list():
            return [expand_env(item) for item in value]
        case _:
            return value


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load a YAML mapping with environment placeholders expanded.

    A missing file is logged and reads as an empty mapping, so optional
    config files need no special casing by callers.
    """
    if not config_path.exists():
        logger.warning("config_not_found", path=str(config_path))
        return {}

    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")
    return expand_env(document)

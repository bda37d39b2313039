"""Script registry and TOML configuration loader.

Loads script definitions from scripts.toml and decoder defaults from
defaults.toml. Builds the ScriptTable and StreamDecoder instances the rest
of the package uses.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from scriptstream.decoder.stream import StreamDecoder
from scriptstream.decoder.table import ScriptTable
from scriptstream.errors import ConfigError, ScriptTableError
from scriptstream.schemas.config import DecoderConfig
from scriptstream.schemas.scripts import ScriptDefinition, ScriptRange

logger = logging.getLogger(__name__)

# Default config directory inside the scriptstream package
_CONFIG_DIR = Path(__file__).parent / "config"


def _read_toml(path: Path, kind: str) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"{kind} not found: {path}")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_scripts(config_path: Path | None = None) -> dict[str, ScriptDefinition]:
    """Load every script definition from a TOML file.

    Args:
        config_path: Path to scripts.toml. Defaults to scriptstream/config/scripts.toml.

    Returns:
        Dictionary mapping script keys to ScriptDefinition instances.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ScriptTableError: If the [scripts] section is missing or an entry is invalid.
    """
    path = config_path or _CONFIG_DIR / "scripts.toml"
    raw = _read_toml(path, "Script registry")

    scripts_section = raw.get("scripts")
    if not scripts_section or not isinstance(scripts_section, dict):
        raise ScriptTableError(f"No [scripts] section found in {path}")

    registry: dict[str, ScriptDefinition] = {}
    for key, entry in scripts_section.items():
        if not isinstance(entry, dict):
            continue
        try:
            ranges = [ScriptRange(**r) for r in entry.get("ranges", [])]
            registry[key] = ScriptDefinition(
                key=key,
                name=entry.get("name", key.title()),
                block=tuple(entry["block"]) if "block" in entry else None,
                ranges=ranges,
            )
        except (ValidationError, TypeError) as e:
            raise ScriptTableError(f"Invalid script '{key}' in {path}: {e}") from e

    return registry


def load_script_table(
    config_path: Path | None = None,
    scripts: Sequence[str] | None = None,
) -> ScriptTable:
    """Build a ScriptTable from the registry.

    Args:
        config_path: Path to scripts.toml.
        scripts: Script keys to enable. None enables every registered script.

    Raises:
        ScriptTableError: If a requested key is not registered or ranges overlap.
    """
    registry = load_scripts(config_path)
    if scripts is None:
        return ScriptTable(registry.values())

    unknown = [key for key in scripts if key not in registry]
    if unknown:
        raise ScriptTableError(
            f"Unknown script(s): {', '.join(unknown)} "
            f"(registered: {', '.join(sorted(registry))})"
        )
    return ScriptTable(registry[key] for key in scripts)


def load_decoder_config(config_path: Path | None = None) -> DecoderConfig:
    """Load decoder defaults from a TOML file.

    Args:
        config_path: Path to defaults.toml. Defaults to scriptstream/config/defaults.toml.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the [decoder] section is missing or has invalid values.
    """
    path = config_path or _CONFIG_DIR / "defaults.toml"
    raw = _read_toml(path, "Decoder config")

    decoder_section = raw.get("decoder")
    if not isinstance(decoder_section, dict):
        raise ConfigError(f"No [decoder] section found in {path}")

    try:
        return DecoderConfig(**decoder_section)
    except ValidationError as e:
        raise ConfigError(f"Invalid decoder config in {path}: {e}") from e


@lru_cache(maxsize=1)
def default_script_table() -> ScriptTable:
    """ScriptTable for the scripts enabled in the packaged defaults."""
    config = load_decoder_config()
    table = load_script_table(scripts=config.scripts)
    logger.debug("Loaded default script table: %s", ", ".join(config.scripts))
    return table


def build_decoder(
    config: DecoderConfig | None = None,
    *,
    scripts_path: Path | None = None,
) -> StreamDecoder:
    """Create a StreamDecoder for one generation session.

    Args:
        config: Decoder settings. Defaults to the packaged defaults.toml.
        scripts_path: Alternate scripts.toml to build the table from.
    """
    if config is None and scripts_path is None:
        config = load_decoder_config()
        table = default_script_table()
    else:
        config = config or load_decoder_config()
        table = load_script_table(scripts_path, scripts=config.scripts)

    return StreamDecoder(
        table,
        form=config.normalization,
        log_corruption=config.log_corruption,
    )

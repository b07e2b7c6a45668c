"""
Centralized configuration management for dna-evolve.

Settings come from a Java-style .properties file or a JSON file, then from
DNA_EVOLVE_* environment variables. Bad input never aborts startup: every
missing file or malformed value is logged and the default is kept.
"""

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from evolution.interfaces import (
    DEFAULT_CROSSOVER_RATE,
    DEFAULT_DNA_MUTATION_RATE,
    DEFAULT_INDIVIDUAL_MUTATION_RATE,
    DEFAULT_POPULATION_SIZE,
    DEFAULT_SURVIVAL_CONSTANT,
)

from .logging_config import parse_level

logger = logging.getLogger(__name__)

DEFAULT_PROPERTIES_FILE = Path("config.properties")
DEFAULT_JSON_FILE = Path("dna-evolve.json")

# Property file keys and the settings they feed
PROPERTY_KEYS: Dict[str, str] = {
    "popSize": "population_size",
    "probDistConst": "survival_constant",
    "individualMutationRate": "individual_mutation_rate",
    "dnaMutationRate": "dna_mutation_rate",
    "crossOverRate": "crossover_rate",
    "seed": "seed",
}

# key, optional "=" or ":" separator (whitespace alone also separates), value
PROPERTY_LINE = re.compile(r"([^=:\s]*)\s*[=:]?\s*(.*)")


@dataclass
class EvolutionSettings:
    """Evolution algorithm settings."""

    population_size: int = DEFAULT_POPULATION_SIZE
    survival_constant: float = DEFAULT_SURVIVAL_CONSTANT
    individual_mutation_rate: float = DEFAULT_INDIVIDUAL_MUTATION_RATE
    dna_mutation_rate: float = DEFAULT_DNA_MUTATION_RATE
    crossover_rate: float = DEFAULT_CROSSOVER_RATE
    seed: Optional[int] = None


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = False
    use_colors: bool = True
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    evolution: EvolutionSettings = field(default_factory=EvolutionSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        data = asdict(self)
        data.pop("source")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary, keeping defaults for bad values."""
        config = cls()
        for key, value in _section(data, "evolution").items():
            _set_evolution_value(config.evolution, key, value, "config")
        for key, value in _section(data, "logging").items():
            _set_logging_value(config.logging, key, value, "config")
        return config

    def save(self, path: Path) -> None:
        """Save config to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load config from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        config = cls.from_dict(data)
        config.source = str(path)
        return config

    @classmethod
    def load_properties(cls, path: Path) -> "Config":
        """Load evolution settings from a Java-style properties file.

        Keys and values are separated by '=', ':' or whitespace. Lines
        starting with '#' or '!' are comments and a trailing backslash
        continues the value on the next line. Each entry is applied on its
        own, so one bad line only loses that setting.
        """
        config = cls(source=str(path))
        for key, value in _read_properties(path):
            name = PROPERTY_KEYS.get(key, key)
            _set_evolution_value(config.evolution, name, value, str(path))
        return config


def get_config(config_path: Optional[Path] = None) -> Config:
    """Get configuration, loading from file if available.

    Priority:
    1. Explicit config_path
    2. config.properties in current directory
    3. dna-evolve.json in current directory
    4. Defaults
    Environment variables override whichever source was used.
    """
    explicit = Path(config_path) if config_path else None
    paths_to_try = [explicit] if explicit else []
    paths_to_try.extend([DEFAULT_PROPERTIES_FILE, DEFAULT_JSON_FILE])

    config = None
    for path in paths_to_try:
        if not path.exists():
            if path == explicit:
                logger.warning(f"Config file {path} not found, using defaults")
            continue
        config = _load_file(path)
        if config is not None:
            break

    if config is None:
        config = Config()

    _apply_env_overrides(config)
    return config


def _load_file(path: Path) -> Optional[Config]:
    try:
        if path.suffix == ".json":
            return Config.load(path)
        return Config.load_properties(path)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read config file {path}: {e}. Using defaults")
        return None


def _read_properties(path: Path) -> List[Tuple[str, str]]:
    entries = []
    logical = ""
    with open(path) as f:
        for raw in f:
            line = raw.strip()
            if not logical and (not line or line[0] in "#!"):
                continue
            if line.endswith("\\"):
                logical += line[:-1]
                continue
            entries.append(_split_property(logical + line))
            logical = ""
    if logical:
        entries.append(_split_property(logical))
    return entries


def _split_property(line: str) -> Tuple[str, str]:
    key, value = PROPERTY_LINE.match(line).groups()  # type: ignore[union-attr]
    return key, value.strip()


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring config section '{name}': expected an object")
        return {}
    return section


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return int(str(value).strip()) if isinstance(value, str) else int(value)


def _parse_probability(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    number = float(str(value).strip()) if isinstance(value, str) else float(value)
    if not 0.0 <= number <= 1.0:
        raise ValueError(f"{number} is outside [0, 1]")
    return number


def _parse_population_size(value: Any) -> int:
    size = _parse_int(value)
    if size < 1:
        raise ValueError(f"{size} is below 1")
    return size


def _parse_seed(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _parse_int(value)


EVOLUTION_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "population_size": _parse_population_size,
    "survival_constant": _parse_probability,
    "individual_mutation_rate": _parse_probability,
    "dna_mutation_rate": _parse_probability,
    "crossover_rate": _parse_probability,
    "seed": _parse_seed,
}

LOGGING_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "level": parse_level,
    "json_output": _parse_bool,
    "use_colors": _parse_bool,
    "log_file": lambda v: None if v is None else str(v),
}


def _set_value(
    target: Any,
    parsers: Dict[str, Callable[[Any], Any]],
    key: str,
    value: Any,
    source: str,
) -> bool:
    parser = parsers.get(key)
    if parser is None:
        logger.warning(f"Ignoring unknown setting '{key}' from {source}")
        return False
    try:
        setattr(target, key, parser(value))
        return True
    except (ValueError, TypeError) as e:
        default = getattr(type(target)(), key)
        logger.warning(
            f"Invalid value {value!r} for '{key}' from {source} ({e}). "
            f"Keeping default {default!r}"
        )
        return False


def _set_evolution_value(
    settings: EvolutionSettings, key: str, value: Any, source: str
) -> bool:
    return _set_value(settings, EVOLUTION_PARSERS, key, value, source)


def _set_logging_value(
    settings: LoggingSettings, key: str, value: Any, source: str
) -> bool:
    return _set_value(settings, LOGGING_PARSERS, key, value, source)


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to config."""
    env_mappings: Dict[str, Tuple[str, str]] = {
        "DNA_EVOLVE_POPULATION_SIZE": ("evolution", "population_size"),
        "DNA_EVOLVE_SURVIVAL_CONSTANT": ("evolution", "survival_constant"),
        "DNA_EVOLVE_INDIVIDUAL_MUTATION_RATE": (
            "evolution",
            "individual_mutation_rate",
        ),
        "DNA_EVOLVE_DNA_MUTATION_RATE": ("evolution", "dna_mutation_rate"),
        "DNA_EVOLVE_CROSSOVER_RATE": ("evolution", "crossover_rate"),
        "DNA_EVOLVE_SEED": ("evolution", "seed"),
        "DNA_EVOLVE_LOG_LEVEL": ("logging", "level"),
        "DNA_EVOLVE_LOG_JSON": ("logging", "json_output"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if section == "evolution":
            _set_evolution_value(config.evolution, key, value, env_var)
        else:
            _set_logging_value(config.logging, key, value, env_var)


"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.restack/config.toml.
Every key is optional; a missing file yields the defaults.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, replace
from pathlib import Path

import tomlkit

CONFIG_DIR_NAME = ".restack"
CONFIG_FILE_NAME = "config.toml"


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in RestackContext.
    """

    debounce_seconds: float = 2.0
    eager_hunk_max_files: int = 10
    eager_hunk_max_lines: int = 50
    hunk_workers: int = 8
    jj_binary: str = "jj"
    git_binary: str = "git"
    default_branch: str = "main"


_FIELD_TYPES: dict[str, type] = {f.name: type(f.default) for f in fields(GlobalConfig)}


def config_keys() -> list[str]:
    return list(_FIELD_TYPES)


def parse_config_data(data: dict[str, object], source: Path) -> GlobalConfig:
    """Build a GlobalConfig from parsed TOML.

    Raises:
        ValueError: If a key is unknown or its value has the wrong type
    """
    values: dict[str, object] = {}
    for key, value in data.items():
        if key not in _FIELD_TYPES:
            raise ValueError(f"Unknown key '{key}' in {source}")
        values[key] = _coerce(key, value, source)
    return replace(GlobalConfig(), **values)


def parse_config_value(key: str, raw: str) -> object:
    """Convert a command-line string into the type of config key.

    Raises:
        ValueError: If the key is unknown or raw does not parse
    """
    if key not in _FIELD_TYPES:
        raise ValueError(f"Unknown config key '{key}'. Valid keys: {', '.join(config_keys())}")
    expected = _FIELD_TYPES[key]
    if expected is str:
        return _coerce(key, raw, Path("<command line>"))
    try:
        parsed = expected(raw)
    except ValueError:
        raise ValueError(f"Invalid value for '{key}': {raw!r}") from None
    return _coerce(key, parsed, Path("<command line>"))


def _coerce(key: str, value: object, source: Path) -> object:
    expected = _FIELD_TYPES[key]
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if not isinstance(value, expected) or isinstance(value, bool):
        raise ValueError(
            f"Invalid value for '{key}' in {source}: expected {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    if expected is str and not value:
        raise ValueError(f"Invalid value for '{key}' in {source}: must not be empty")
    if expected in (int, float) and value <= 0:  # type: ignore[operator]
        raise ValueError(f"Invalid value for '{key}' in {source}: must be positive")
    return value


class ConfigStore(ABC):
    """Abstract interface for global config operations.

    Provides dependency injection for global config access, enabling
    in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config, falling back to defaults when it does not exist.

        Raises:
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Save global config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.restack/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        config_path = self.path()
        if not config_path.exists():
            return GlobalConfig()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Malformed TOML in {config_path}: {e}") from e
        return parse_config_data(data, config_path)

    def save(self, config: GlobalConfig) -> None:
        """Save global config, keeping comments and unrelated formatting.

        Only values that differ from the defaults are written.

        Raises:
            PermissionError: If directory or file cannot be written
        """
        config_path = self.path()
        parent = config_path.parent

        if parent.exists() and not os.access(parent, os.W_OK):
            raise PermissionError(
                f"Cannot write to directory: {parent}\nThe directory exists but is not writable."
            )
        parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Global restack configuration"))

        defaults = GlobalConfig()
        for key in config_keys():
            value = getattr(config, key)
            if value == getattr(defaults, key):
                if key in doc:
                    del doc[key]
                continue
            doc[key] = value

        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            return GlobalConfig()
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/restack/config.toml")

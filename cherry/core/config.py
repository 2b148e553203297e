"""Typed configuration loading from cherry.toml.

Every key is optional; missing keys and missing files fall back to the
defaults below. CLI options override whatever is loaded here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE",
    "BuildConfig",
    "ChangelogConfig",
    "Config",
    "ConfigError",
    "ReleaseConfig",
    "TestConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE = "cherry.toml"

DEFAULT_VERSION_FILE = "VERSION"
DEFAULT_MAIN_FILE = "main.go"
DEFAULT_VERSION_PACKAGE = "./cmd/version"
DEFAULT_BUILD_TIMEOUT = 60.0

DEFAULT_COVER_MODE = "atomic"
DEFAULT_REPORT_PATH = "coverage"
DEFAULT_TEST_TIMEOUT = 300.0

DEFAULT_EXCLUDE_LABELS = ("question", "duplicate", "invalid", "wontfix")
DEFAULT_CHANGELOG_TIMEOUT = 300.0

DEFAULT_RELEASE_TIMEOUT = 600.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when cherry.toml cannot be read or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Settings for ``cherry build``.

    ``binary_file`` is None when not configured; the CLI then derives
    ``bin/<repository name>``.
    """

    main_file: str = DEFAULT_MAIN_FILE
    binary_file: str | None = None
    version_package: str = DEFAULT_VERSION_PACKAGE
    cross_compile: bool = False
    timeout: float = DEFAULT_BUILD_TIMEOUT


@dataclass(frozen=True, slots=True)
class TestConfig:
    """Settings for ``cherry test``."""

    __test__ = False

    cover_mode: str = DEFAULT_COVER_MODE
    report_path: str = DEFAULT_REPORT_PATH
    timeout: float = DEFAULT_TEST_TIMEOUT


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    exclude_labels: tuple[str, ...] = DEFAULT_EXCLUDE_LABELS
    timeout: float = DEFAULT_CHANGELOG_TIMEOUT


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for ``cherry release``. The timeout covers every step."""

    timeout: float = DEFAULT_RELEASE_TIMEOUT


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    version_file: str = DEFAULT_VERSION_FILE
    build: BuildConfig = field(default_factory=BuildConfig)
    test: TestConfig = field(default_factory=TestConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        build: StrDict = get_table(data, "build") or {}
        test: StrDict = get_table(data, "test") or {}
        changelog: StrDict = get_table(data, "changelog") or {}
        release: StrDict = get_table(data, "release") or {}

        labels = get_str_list(changelog, "exclude_labels")

        return cls(
            version_file=get_str(data, "version_file") or DEFAULT_VERSION_FILE,
            build=BuildConfig(
                main_file=get_str(build, "main_file") or DEFAULT_MAIN_FILE,
                binary_file=get_str(build, "binary_file"),
                version_package=get_str(build, "version_package") or DEFAULT_VERSION_PACKAGE,
                cross_compile=bool(get_bool(build, "cross_compile")),
                timeout=_positive(get_float(build, "timeout"), DEFAULT_BUILD_TIMEOUT),
            ),
            test=TestConfig(
                cover_mode=get_str(test, "cover_mode") or DEFAULT_COVER_MODE,
                report_path=get_str(test, "report_path") or DEFAULT_REPORT_PATH,
                timeout=_positive(get_float(test, "timeout"), DEFAULT_TEST_TIMEOUT),
            ),
            changelog=ChangelogConfig(
                exclude_labels=tuple(labels) if labels is not None else DEFAULT_EXCLUDE_LABELS,
                timeout=_positive(get_float(changelog, "timeout"), DEFAULT_CHANGELOG_TIMEOUT),
            ),
            release=ReleaseConfig(
                timeout=_positive(get_float(release, "timeout"), DEFAULT_RELEASE_TIMEOUT),
            ),
        )


def _positive(value: float | None, default: float) -> float:
    if value is None or value <= 0:
        return default
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax in {path}: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config {path}: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to cherry.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like load_config, but a missing file yields the default Config.

    A file that exists but does not parse is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)

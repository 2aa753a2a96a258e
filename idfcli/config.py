"""Project configuration: sdkconfig and idfcli.toml defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

from idfcli.errors import ProjectError

SDKCONFIG = "sdkconfig"
SDKCONFIG_DEFAULTS = "sdkconfig.defaults"
PROJECT_CONFIG = "idfcli.toml"
TARGET_KEY = "CONFIG_IDF_TARGET"


# ---------------------------------------------------------------------------
# sdkconfig
# ---------------------------------------------------------------------------

@dataclass
class SdkConfig:
    target: str | None = None
    settings: dict[str, str] = field(default_factory=dict)

    def set_target(self, target: str) -> None:
        self.target = target
        self.settings[TARGET_KEY] = f'"{target}"'

    def to_sdkconfig_format(self) -> str:
        lines = ["# ESP-IDF Configuration", ""]
        for key in sorted(self.settings):
            lines.append(f"{key}={self.settings[key]}")
        return "\n".join(lines)


def parse_sdkconfig(content: str) -> SdkConfig:
    """Parse KEY=VALUE lines, skipping blanks and comments."""
    config = SdkConfig()
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key == TARGET_KEY:
            config.target = value.strip('"')
        config.settings[key] = value
    return config


def get_sdkconfig_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / SDKCONFIG


def get_sdkconfig_defaults_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / SDKCONFIG_DEFAULTS


def load_sdkconfig(project_dir: Path | str) -> SdkConfig:
    """Load the project's sdkconfig. A missing file gives an empty config."""
    path = get_sdkconfig_path(project_dir)
    if not path.exists():
        return SdkConfig()
    return parse_sdkconfig(path.read_text())


def save_sdkconfig(project_dir: Path | str, config: SdkConfig) -> None:
    get_sdkconfig_path(project_dir).write_text(config.to_sdkconfig_format())


# ---------------------------------------------------------------------------
# idfcli.toml
# ---------------------------------------------------------------------------

@dataclass
class SerialConfig:
    port: str | None = None
    baud_rate: int | None = None


@dataclass
class BuildConfig:
    generator: str | None = None
    build_dir: str | None = None


@dataclass
class ProjectConfig:
    serial: SerialConfig = field(default_factory=SerialConfig)
    build: BuildConfig = field(default_factory=BuildConfig)


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ProjectError(f"Invalid {PROJECT_CONFIG}: [{name}] must be a table")
    return section


def load_project_config(project_dir: Path | str) -> ProjectConfig:
    """Parse idfcli.toml. Returns defaults when the file does not exist."""
    toml_path = Path(project_dir) / PROJECT_CONFIG
    if not toml_path.exists():
        return ProjectConfig()

    if tomllib is None:
        raise ImportError("No TOML parser available (need Python 3.11+ or tomli)")

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ProjectError(f"Invalid {PROJECT_CONFIG}: {e}") from e

    serial_data = _section(data, "serial")
    build_data = _section(data, "build")

    return ProjectConfig(
        serial=SerialConfig(
            port=serial_data.get("port"),
            baud_rate=serial_data.get("baud_rate"),
        ),
        build=BuildConfig(
            generator=build_data.get("generator"),
            build_dir=build_data.get("build_dir"),
        ),
    )


def apply_project_defaults(opts, project_dir: Path | str) -> None:
    """Fill unset SharedOptions fields from idfcli.toml.

    Values given on the command line are never overridden.
    """
    config = load_project_config(project_dir)
    if opts.port is None:
        opts.port = config.serial.port
    if opts.baud is None:
        opts.baud = config.serial.baud_rate
    if opts.generator is None:
        opts.generator = config.build.generator
    if opts.build_dir is None and config.build.build_dir:
        build_dir = Path(config.build.build_dir)
        opts.build_dir = build_dir if build_dir.is_absolute() else Path(project_dir) / build_dir

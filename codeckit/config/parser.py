"""YAML configuration for codeckit.

Settings are resolved in layers, lowest precedence first:

1. Built-in defaults
2. ``codeckit.yaml`` in the project root (or an explicit ``--config`` file)
3. Environment (``ANDROID_NDK_HOME``)
4. Command-line flags, applied by the caller with ``dataclasses.replace``

Example ``codeckit.yaml``::

    version: 1
    ndk:
      version: r26b
      install_dir: ~/Android/Sdk/ndk
    ffmpeg:
      version: 6.1.1
      source: ffmpeg-6.1.1
    output_dir: packages/safe-core
    jobs: 8
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from codeckit.core.exceptions import ConfigError
from codeckit.core.process import default_jobs

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "codeckit.yaml"

DEFAULT_NDK_VERSION = "r26b"
DEFAULT_FFMPEG_VERSION = "6.1.1"
NDK_HOME_ENV = "ANDROID_NDK_HOME"

_TOP_LEVEL_KEYS = {"version", "ndk", "ffmpeg", "output_dir", "env_file", "jobs"}
_NDK_KEYS = {"version", "install_dir", "home"}
_FFMPEG_KEYS = {"version", "source"}


def default_ndk_install_dir() -> Path:
    """Default directory NDK releases are installed under."""
    return Path.home() / "Android" / "Sdk" / "ndk"


def default_ndk_home() -> Path:
    """Toolchain root assumed when ANDROID_NDK_HOME is unset."""
    return default_ndk_install_dir() / "26.1.10909125"


@dataclass(frozen=True)
class CodecKitConfig:
    """Resolved codeckit settings. All paths are absolute."""

    project_root: Path
    ndk_version: str
    ndk_install_dir: Path
    ndk_home: Path
    ffmpeg_version: str
    ffmpeg_source: Path
    output_dir: Path
    env_file: Path
    jobs: int
    # True when ndk_home came from ANDROID_NDK_HOME or ndk.home, not the default
    ndk_home_selected: bool = False


def parse_config(config_path: Path) -> Dict[str, Any]:
    """
    Parse and validate a codeckit.yaml file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated configuration mapping

    Raises:
        ConfigError: If the file is missing, malformed or has unknown keys
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    _check_keys(data, _TOP_LEVEL_KEYS, "")

    if data.get("version", 1) != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    for section, allowed in (("ndk", _NDK_KEYS), ("ffmpeg", _FFMPEG_KEYS)):
        value = data.get(section, {})
        if not isinstance(value, dict):
            raise ConfigError(f"'{section}' must be a mapping")
        _check_keys(value, allowed, f"{section}.")

    jobs = data.get("jobs")
    if jobs is not None and (not isinstance(jobs, int) or jobs < 1):
        raise ConfigError(f"jobs must be a positive integer, got {jobs!r}")

    return data


def _check_keys(data: Mapping[str, Any], allowed: set, prefix: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(
            f"Unknown configuration key(s): {', '.join(prefix + k for k in unknown)}"
        )


def _resolve(root: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else (root / path).resolve()


def load_config(
    project_root: Path,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CodecKitConfig:
    """
    Build the effective configuration for a project.

    Args:
        project_root: Directory relative paths are resolved against
        config_path: Explicit config file (must exist if given)
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved CodecKitConfig

    Raises:
        ConfigError: If an explicit or discovered config file is invalid
    """
    root = Path(project_root).resolve()
    env = os.environ if environ is None else environ

    if config_path is not None:
        data = parse_config(Path(config_path))
    elif (root / CONFIG_FILENAME).exists():
        data = parse_config(root / CONFIG_FILENAME)
    else:
        logger.debug(f"No {CONFIG_FILENAME} in {root}, using defaults")
        data = {}

    ndk = data.get("ndk", {})
    ffmpeg = data.get("ffmpeg", {})

    ffmpeg_version = str(ffmpeg.get("version", DEFAULT_FFMPEG_VERSION))

    ndk_home_selected = True
    if env.get(NDK_HOME_ENV):
        ndk_home = _resolve(root, env[NDK_HOME_ENV])
    elif "home" in ndk:
        ndk_home = _resolve(root, ndk["home"])
    else:
        ndk_home = default_ndk_home()
        ndk_home_selected = False

    return CodecKitConfig(
        project_root=root,
        ndk_version=str(ndk.get("version", DEFAULT_NDK_VERSION)),
        ndk_install_dir=_resolve(
            root, ndk.get("install_dir", default_ndk_install_dir())
        ),
        ndk_home=ndk_home,
        ffmpeg_version=ffmpeg_version,
        ffmpeg_source=_resolve(root, ffmpeg.get("source", f"ffmpeg-{ffmpeg_version}")),
        output_dir=_resolve(root, data.get("output_dir", "packages/safe-core")),
        env_file=_resolve(root, data.get("env_file", "ndk_env.sh")),
        jobs=data.get("jobs") or default_jobs(),
        ndk_home_selected=ndk_home_selected,
    )

"""Input configuration for OdinKit.

The acquisition request is assembled once at process start from four layers,
lowest to highest precedence:

1. Built-in defaults
2. An optional YAML file (odinkit.yaml)
3. GitHub Actions style environment variables (INPUT_<NAME>)
4. Explicit overrides (command-line flags)

Input names use the action's kebab-case spelling ('odin-version',
'llvm-version', ...); snake_case keys are accepted in the YAML file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from odinkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY = "https://github.com/odin-lang/Odin"
DEFAULT_CONFIG_FILE = "odinkit.yaml"

DEFAULTS: Dict[str, str] = {
    "repository": DEFAULT_REPOSITORY,
    "odin-version": "master",
    "release": "latest",
    "token": "",
    "build-type": "release",
    "llvm-version": "17",
    "cache": "true",
    "asset-name": "",
    "install-path": "",
    "cache-dir": "",
}

# Alternative spellings accepted for an input
ALIASES = {
    "branch": "odin-version",
    "version": "odin-version",
    "version-spec": "odin-version",
    "caching": "cache",
}

_TRUE_VALUES = ("true", "yes", "1", "on")
_FALSE_VALUES = ("false", "no", "0", "off")


@dataclass(frozen=True)
class AcquisitionRequest:
    """
    Immutable input to every acquisition decision.

    Attributes:
        repository: Source repository location ('owner/repo' or a URL)
        version_spec: Branch, tag or commit-like ref, used for the clone and
            for the cache freshness check
        release_tag: 'latest', an explicit release tag, or '' to skip releases
        build_type: Argument passed verbatim to the build script
        caching_enabled: Whether the content cache may be used
        access_token: Token for release lookups ('' disables them)
        llvm_version: Version of the LLVM build dependency
        install_path: Directory the toolchain is installed into
        asset_name: Release asset name prefix ('' derives it from repository)
    """

    repository: str
    version_spec: str
    release_tag: str
    build_type: str
    caching_enabled: bool
    access_token: str
    llvm_version: str
    install_path: Path
    asset_name: str = ""

    @property
    def repository_name(self) -> str:
        """Last path segment of the repository identifier, without '.git'."""
        name = self.repository.rstrip("/").split("/")[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return name

    def release_asset_name(self) -> str:
        """Name prefix used to find release assets ('odin' for odin-lang/Odin)."""
        return self.asset_name or self.repository_name.lower()


@dataclass(frozen=True)
class OdinKitConfig:
    """Complete OdinKit configuration."""

    request: AcquisitionRequest
    cache_dir: Path


def parse_bool(name: str, value: Any) -> bool:
    """
    Parse a boolean input.

    Raises:
        ConfigurationError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value

    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input '{name}' must be a boolean (true/false), got: {value!r}"
    )


def _normalize_key(key: str) -> str:
    key = key.strip().lower().replace("_", "-")
    return ALIASES.get(key, key)


def _normalize_mapping(values: Mapping[str, Any]) -> Dict[str, str]:
    normalized = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        normalized[_normalize_key(str(key))] = str(value)
    return normalized


def load_yaml_inputs(config_file: Path, required: bool = False) -> Dict[str, str]:
    """
    Load inputs from a YAML configuration file.

    Args:
        config_file: Path to the YAML file
        required: If True, raise error if file doesn't exist

    Returns:
        Normalized input mapping (empty if the file is missing and optional)

    Raises:
        ConfigurationError: If the file is required but missing, or invalid
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping"
        )

    return _normalize_mapping(data)


def load_env_inputs(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Collect INPUT_<NAME> variables, the way the Actions runner exports inputs.

    GITHUB_TOKEN is used as a fallback for the 'token' input.
    """
    environ = environ if environ is not None else os.environ
    inputs = {}

    for variable, value in environ.items():
        if not variable.startswith("INPUT_"):
            continue
        inputs[_normalize_key(variable[len("INPUT_") :])] = value.strip()

    if not inputs.get("token") and environ.get("GITHUB_TOKEN"):
        inputs["token"] = environ["GITHUB_TOKEN"].strip()

    return inputs


def default_install_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Install under the runner tool cache when available, else ~/.odinkit/odin."""
    environ = environ if environ is not None else os.environ
    tool_cache = environ.get("RUNNER_TOOL_CACHE")
    if tool_cache:
        return Path(tool_cache) / "odin"
    return Path.home() / ".odinkit" / "odin"


def default_cache_dir() -> Path:
    return Path.home() / ".odinkit" / "cache"


def load_config(
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> OdinKitConfig:
    """
    Build the configuration from all layers.

    Args:
        config_file: YAML file (default: ./odinkit.yaml if present)
        overrides: Highest-precedence values, e.g. from CLI flags
        environ: Environment mapping (default: os.environ)

    Returns:
        OdinKitConfig holding the AcquisitionRequest

    Raises:
        ConfigurationError: If any input is invalid

    Example:
        >>> config = load_config(overrides={"odin-version": "dev-2024-09"})
        >>> config.request.version_spec
        'dev-2024-09'
    """
    environ = environ if environ is not None else os.environ

    values = dict(DEFAULTS)

    if config_file is not None:
        values.update(load_yaml_inputs(Path(config_file), required=True))
    else:
        values.update(load_yaml_inputs(Path.cwd() / DEFAULT_CONFIG_FILE))

    values.update(load_env_inputs(environ))

    if overrides:
        values.update(_normalize_mapping(overrides))

    repository = values["repository"].strip()
    if not repository:
        raise ConfigurationError("Input 'repository' must not be empty")

    version_spec = values["odin-version"].strip()
    if not version_spec:
        raise ConfigurationError("Input 'odin-version' must not be empty")

    install_path = values["install-path"].strip()
    cache_dir = values["cache-dir"].strip()

    request = AcquisitionRequest(
        repository=repository,
        version_spec=version_spec,
        release_tag=values["release"].strip(),
        build_type=values["build-type"].strip(),
        caching_enabled=parse_bool("cache", values["cache"]),
        access_token=values["token"].strip(),
        llvm_version=values["llvm-version"].strip(),
        install_path=(
            Path(install_path).expanduser()
            if install_path
            else default_install_path(environ)
        ),
        asset_name=values["asset-name"].strip(),
    )

    logger.debug(
        f"Inputs: repository={request.repository} version={request.version_spec} "
        f"release={request.release_tag or '<none>'} build-type={request.build_type} "
        f"llvm={request.llvm_version} cache={request.caching_enabled}"
    )

    return OdinKitConfig(
        request=request,
        cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(),
    )


__all__ = [
    "AcquisitionRequest",
    "OdinKitConfig",
    "DEFAULTS",
    "DEFAULT_REPOSITORY",
    "parse_bool",
    "load_yaml_inputs",
    "load_env_inputs",
    "load_config",
    "default_install_path",
    "default_cache_dir",
]

"""User configuration: experiment mapping, local repositories, search dirs.

Settings come from built-in defaults (``Constants``), deep-merged with an
optional YAML file. The file is looked up, in order, from the ``--config``
option, the LARSCRIPTS_CONFIG environment variable and
``~/.config/larscripts/config.yml``.

Example::

    core_package: larsoft
    experiments:
      icarus:
        bootstrap: /cvmfs/icarus.opensciencegrid.org/products/icarus/setup_icarus.sh
        codenames: [icaruscode, "icarusutil@v09_37_01"]
    local_products_dirs: [/opt/products]
    override_products_dirs: [/home/me/products]
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants
from exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _deep_merge(dest: Dict[str, Any], src: Mapping[str, Any]) -> None:
    """Deep-merge src into dest in-place."""
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dest.get(k), dict):
            _deep_merge(dest[k], v)
        else:
            dest[k] = v


def default_config() -> Dict[str, Any]:
    """Built-in configuration, as a plain mapping."""
    return {
        "core_package": Constants.CORE_PACKAGE,
        "mandatory_prefix": Constants.MANDATORY_PREFIX,
        "experiments": copy.deepcopy(Constants.EXPERIMENTS),
        "local_products_dirs": list(Constants.LOCAL_PRODUCTS_DIRS),
        "override_products_dirs": list(Constants.OVERRIDE_PRODUCTS_DIRS),
        "artenv": {
            "fcl_dirs": list(Constants.ARTENV_FCL_DIRS),
            "data_dirs": list(Constants.ARTENV_DATA_DIRS),
        },
    }


@dataclass
class ExperimentSettings:
    """How to bootstrap one experiment and which codenames it sets up."""
    name: str
    bootstrap: Optional[str] = None
    codenames: List[str] = field(default_factory=list)


@dataclass
class Settings:
    """Resolved configuration."""
    core_package: str = Constants.CORE_PACKAGE
    mandatory_prefix: str = Constants.MANDATORY_PREFIX
    experiments: Dict[str, ExperimentSettings] = field(default_factory=dict)
    local_products_dirs: List[str] = field(default_factory=list)
    override_products_dirs: List[str] = field(default_factory=list)
    fcl_dirs: List[str] = field(default_factory=lambda: list(Constants.ARTENV_FCL_DIRS))
    data_dirs: List[str] = field(default_factory=lambda: list(Constants.ARTENV_DATA_DIRS))
    source: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: Optional[str] = None) -> "Settings":
        experiments = {}
        for name, entry in (data.get("experiments") or {}).items():
            entry = entry or {}
            if isinstance(entry, str):
                entry = {"bootstrap": entry}
            experiments[str(name).lower()] = ExperimentSettings(
                name=str(name).lower(),
                bootstrap=entry.get("bootstrap"),
                codenames=[str(c) for c in entry.get("codenames") or []],
            )
        artenv = data.get("artenv") or {}
        return cls(
            core_package=str(data.get("core_package") or Constants.CORE_PACKAGE),
            mandatory_prefix=str(data.get("mandatory_prefix") or ""),
            experiments=experiments,
            local_products_dirs=[os.path.expanduser(str(d)) for d in data.get("local_products_dirs") or []],
            override_products_dirs=[os.path.expanduser(str(d)) for d in data.get("override_products_dirs") or []],
            fcl_dirs=[str(d) for d in artenv.get("fcl_dirs") or []],
            data_dirs=[str(d) for d in artenv.get("data_dirs") or []],
            source=source,
        )

    def experiment(self, name: Optional[str]) -> Optional[ExperimentSettings]:
        if not name:
            return None
        return self.experiments.get(name.lower())


def find_config_file(explicit: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the configuration file to load, if any."""
    if explicit:
        return explicit
    environ = os.environ if environ is None else environ
    from_env = environ.get(Constants.ENV_CONFIG)
    if from_env:
        return from_env
    default = os.path.expanduser(Constants.DEFAULT_CONFIG_PATH)
    if os.path.isfile(default):
        return default
    return None


def load_settings(config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load the settings, merging the configuration file over the defaults.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    data = default_config()
    path = find_config_file(config_path, environ)
    if not path:
        return Settings.from_mapping(data)

    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return Settings.from_mapping(data)

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load config '{path}': {e}") from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Config file '{path}' must contain a mapping")
    _deep_merge(data, loaded)
    logger.debug("Loaded config from: %s", path)
    return Settings.from_mapping(data, source=path)

import configparser
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Tuple

from smoketesting import paths
from smoketesting.exceptions import ConfigError

ENV_PREFIX = "SMOKETEST_"


@dataclass(frozen=True)
class HarnessConfig:
    """Settings shared by all nodes that a factory creates"""

    # the runnable node artifact, e.g. a capsule jar
    artifact_path: Optional[str] = None
    # the runtime that executes the artifact. Resolved from JAVA_HOME or PATH if not set.
    runtime_path: Optional[str] = None
    runtime_args: Tuple[str, ...] = ("-jar",)
    nodes_root: str = field(default_factory=paths.default_nodes_root)
    cache_dir: str = field(default_factory=paths.default_cache_dir)
    rpc_host: str = "localhost"
    initial_probe_delay: float = 5
    probe_interval: float = 1
    readiness_timeout: float = 120
    shutdown_timeout: float = 60
    preserve_node_dirs: bool = False
    extra_env: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("initial_probe_delay", "probe_interval", "readiness_timeout", "shutdown_timeout"):
            if getattr(self, name) < 0:
                raise ConfigError(f"Setting [{name}] must not be negative but is [{getattr(self, name)}].")
        object.__setattr__(self, "runtime_args", tuple(self.runtime_args))


# option name -> (section, converter)
_OPTIONS = {
    "artifact_path": ("node", str),
    "runtime_path": ("node", str),
    "runtime_args": ("node", lambda v: tuple(v.split())),
    "nodes_root": ("node", str),
    "cache_dir": ("node", str),
    "rpc_host": ("node", str),
    "preserve_node_dirs": ("node", "bool"),
    "initial_probe_delay": ("timeouts", float),
    "probe_interval": ("timeouts", float),
    "readiness_timeout": ("timeouts", float),
    "shutdown_timeout": ("timeouts", float),
}

_BOOLEAN_STATES = configparser.ConfigParser.BOOLEAN_STATES


def _convert(name, converter, raw_value):
    try:
        if converter == "bool":
            return _BOOLEAN_STATES[raw_value.strip().lower()]
        return converter(raw_value)
    except (KeyError, ValueError) as e:
        raise ConfigError(f"Setting [{name}] has an invalid value [{raw_value}].", e)


def _config_loader(file_name):
    config = configparser.ConfigParser(interpolation=configparser.ExtendedInterpolation())
    # Do not modify the case of option keys but read them as is
    config.optionxform = lambda option: option
    if file_name not in config.read(file_name):
        raise ConfigError(f"Cannot read harness configuration file [{file_name}].")
    return config


def load_config(file_name=None, env=None, **overrides):
    """
    Creates the harness configuration. Values are taken, in increasing order of precedence, from the built-in
    defaults, the ini file ``file_name`` (sections ``[node]``, ``[timeouts]`` and ``[env]``), ``SMOKETEST_*``
    environment variables (e.g. ``SMOKETEST_READINESS_TIMEOUT``) and ``overrides``.

    :param file_name: An optional ini file.
    :param env: The environment to consider. Defaults to ``os.environ``.
    :return: A ``HarnessConfig`` instance.
    """
    logger = logging.getLogger(__name__)
    env = os.environ if env is None else env
    values = {}
    extra_env = {}

    if file_name:
        logger.info("Loading harness configuration from [%s].", file_name)
        try:
            cfg = _config_loader(file_name)
            for name, (section, converter) in _OPTIONS.items():
                if cfg.has_option(section, name):
                    values[name] = _convert(name, converter, cfg.get(section, name))
            if cfg.has_section("env"):
                extra_env.update(cfg.items("env"))
        except configparser.Error as e:
            raise ConfigError(f"Invalid harness configuration file [{file_name}]: {e}", e)

    for name, (_, converter) in _OPTIONS.items():
        env_name = ENV_PREFIX + name.upper()
        if env_name in env:
            logger.debug("Overriding [%s] from environment variable [%s].", name, env_name)
            values[name] = _convert(name, converter, env[env_name])

    known = {f.name for f in fields(HarnessConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown harness settings {sorted(unknown)}.")
    extra_env.update(overrides.pop("extra_env", {}))
    values.update(overrides)
    values["extra_env"] = extra_env
    return HarnessConfig(**values)

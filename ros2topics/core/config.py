"""
ros2topics Config - Load tool settings from YAML and the environment.

Example config:
```yaml
node_name: _ros2topics
spin_timeout_sec: 0.1
discovery_timeout_sec: 0.0
log_level: INFO

qos:
  depth: 10
  reliability: best_effort
  durability: volatile
```
"""

import logging
import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ROS2TOPICS_CONFIG"
NODE_NAME_ENV_VAR = "ROS2TOPICS_NODE_NAME"
LOG_LEVEL_ENV_VAR = "ROS2TOPICS_LOG_LEVEL"

DEFAULT_NODE_NAME = "_ros2topics"

RELIABILITY_CHOICES = ("reliable", "best_effort")
DURABILITY_CHOICES = ("volatile", "transient_local")


def _as_int(key: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Config value '{key}' must be an integer, got {value!r}") from None


def _as_float(key: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Config value '{key}' must be a number, got {value!r}") from None


@dataclass
class QoSSettings:
    """Quality-of-service profile used for every publisher and subscription."""
    depth: int = 10
    reliability: str = "reliable"
    durability: str = "volatile"

    def __post_init__(self):
        self.reliability = str(self.reliability).lower()
        self.durability = str(self.durability).lower()
        if self.reliability not in RELIABILITY_CHOICES:
            raise ValueError(
                f"Unknown QoS reliability '{self.reliability}', "
                f"expected one of {', '.join(RELIABILITY_CHOICES)}"
            )
        if self.durability not in DURABILITY_CHOICES:
            raise ValueError(
                f"Unknown QoS durability '{self.durability}', "
                f"expected one of {', '.join(DURABILITY_CHOICES)}"
            )
        self.depth = _as_int("qos.depth", self.depth)
        if self.depth < 1:
            raise ValueError(f"QoS depth must be positive, got {self.depth}")

    @classmethod
    def from_dict(cls, data: Dict) -> "QoSSettings":
        """Create QoSSettings from dictionary."""
        if not isinstance(data, dict):
            raise ValueError(f"Config value 'qos' must be a mapping, got {data!r}")

        return cls(
            depth=data.get("depth", 10),
            reliability=data.get("reliability", "reliable"),
            durability=data.get("durability", "volatile"),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "depth": self.depth,
            "reliability": self.reliability,
            "durability": self.durability,
        }


@dataclass
class ToolConfig:
    """Settings shared by every sub-command."""
    node_name: str = DEFAULT_NODE_NAME
    spin_timeout_sec: float = 0.1
    discovery_timeout_sec: float = 0.0
    log_level: str = "WARNING"
    qos: QoSSettings = field(default_factory=QoSSettings)

    @classmethod
    def from_dict(cls, data: Dict) -> "ToolConfig":
        """Create ToolConfig from dictionary."""
        qos = data.get("qos")

        return cls(
            node_name=str(data.get("node_name", DEFAULT_NODE_NAME)),
            spin_timeout_sec=_as_float("spin_timeout_sec", data.get("spin_timeout_sec", 0.1)),
            discovery_timeout_sec=_as_float("discovery_timeout_sec", data.get("discovery_timeout_sec", 0.0)),
            log_level=str(data.get("log_level", "WARNING")).upper(),
            qos=QoSSettings.from_dict({} if qos is None else qos),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "node_name": self.node_name,
            "spin_timeout_sec": self.spin_timeout_sec,
            "discovery_timeout_sec": self.discovery_timeout_sec,
            "log_level": self.log_level,
            "qos": self.qos.to_dict(),
        }

    def apply_environment(self, environ: Optional[Mapping[str, str]] = None) -> "ToolConfig":
        """Override fields from ROS2TOPICS_* environment variables."""
        environ = os.environ if environ is None else environ

        if environ.get(NODE_NAME_ENV_VAR):
            self.node_name = environ[NODE_NAME_ENV_VAR]
        if environ.get(LOG_LEVEL_ENV_VAR):
            self.log_level = environ[LOG_LEVEL_ENV_VAR].upper()

        return self


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ToolConfig:
    """
    Load the tool configuration.

    Args:
        path: YAML file to read. Falls back to $ROS2TOPICS_CONFIG, then defaults.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ToolConfig with file values and environment overrides applied

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If a QoS setting is invalid
    """
    environ = os.environ if environ is None else environ

    if path is None and environ.get(CONFIG_ENV_VAR):
        path = environ[CONFIG_ENV_VAR]

    data: Dict = {}
    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        logger.info(f"Loading config: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

    config = ToolConfig.from_dict(data).apply_environment(environ)
    logger.debug(f"Effective config: {config.to_dict()}")
    return config

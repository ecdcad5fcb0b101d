"""Configuration models using Pydantic for validation."""
from typing import Dict, List, Optional, Union, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import os
import re
import socket

ScalarValue = Union[int, float, str]

_INT_RE = re.compile(r'^[0-9]+$')
_FLOAT_RE = re.compile(r'^[0-9]*\.[0-9]*$')


def parse_scalar(raw: str) -> ScalarValue:
    """
    Coerce a configured value to its narrowest scalar type.

    Precedence: all digits -> int, digits with a single dot -> float,
    anything else stays a string.
    """
    if _INT_RE.match(raw):
        return int(raw)
    if raw != '.' and _FLOAT_RE.match(raw):
        return float(raw)
    return raw


def _split_pairs(raw: str, what: str) -> List[List[str]]:
    pairs = []
    for item in raw.split(','):
        item = item.strip()
        if not item:
            continue
        if '=' not in item:
            raise ValueError(f"Invalid {what} entry '{item}': expected key=value")
        key, value = item.split('=', 1)
        if not key:
            raise ValueError(f"Invalid {what} entry '{item}': empty key")
        pairs.append([key, value])
    return pairs


def parse_extra_stats(raw: str) -> Dict[str, ScalarValue]:
    """Parse 'key=value,key=value' into a mapping of typed values."""
    return {key: parse_scalar(value) for key, value in _split_pairs(raw, "extra stat")}


def parse_tags(raw: str) -> List[str]:
    """Parse 'key=value,key=value' into an ordered list of tag strings."""
    return [f"{key}={value}" for key, value in _split_pairs(raw, "tag")]


def parse_name_parts(raw: str) -> List[int]:
    """Parse '3,4' into field indices."""
    parts = []
    for item in raw.split(','):
        item = item.strip()
        if not item:
            continue
        if not _INT_RE.match(item):
            raise ValueError(f"Invalid name part index '{item}'")
        parts.append(int(item))
    return parts


def default_scheme() -> str:
    return f"{socket.gethostname()}.docker"


class CollectorConfig(BaseModel):
    """Root configuration model, built once per run and shared read-only."""
    model_config = ConfigDict(frozen=True)

    # Naming
    scheme: str = Field(default_factory=default_scheme)
    container: str = ""
    friendly_names: bool = False
    name_parts: Optional[List[int]] = None
    delimiter: str = "-"

    # Transport
    docker_host: Optional[str] = None
    timeout_s: int = 60

    # Tags
    tags: Optional[List[str]] = None
    names_as_tags: bool = False
    labels_as_tags: bool = False

    # Fields
    extra_stats: Dict[str, ScalarValue] = Field(default_factory=dict)
    io_info: bool = False
    cpu_percent: bool = False

    # Runtime
    interval_s: int = 0
    fail_fast: bool = True
    self_metrics_port: Optional[int] = None
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @field_validator('name_parts', mode='before')
    @classmethod
    def validate_name_parts(cls, v):
        """Accept '3,4' as well as a list of indices."""
        if isinstance(v, str):
            v = parse_name_parts(v)
        if v is not None and not v:
            return None
        return v

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v):
        """Accept 'k=v,k=v' or a list; an empty list means no static tags."""
        if isinstance(v, str):
            v = parse_tags(v)
        elif isinstance(v, dict):
            v = [f"{key}={value}" for key, value in v.items()]
        if v is not None and not v:
            return None
        return v

    @field_validator('extra_stats', mode='before')
    @classmethod
    def validate_extra_stats(cls, v):
        """Accept 'k=v,k=v'; string values in a mapping are coerced the same way."""
        if v is None:
            return {}
        if isinstance(v, str):
            return parse_extra_stats(v)
        if isinstance(v, dict):
            return {
                str(key): parse_scalar(value) if isinstance(value, str) else value
                for key, value in v.items()
            }
        return v

    @field_validator('delimiter')
    @classmethod
    def validate_delimiter(cls, v):
        if not v:
            raise ValueError("Delimiter must not be empty")
        return v

    @field_validator('interval_s', 'timeout_s')
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Must not be negative")
        return v

    @model_validator(mode='after')
    def validate_scheme(self):
        """The scheme is the metric path prefix and cannot be blank."""
        if not self.scheme.strip():
            raise ValueError("Metric scheme must not be empty")
        return self


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> CollectorConfig:
    """Load and validate configuration from an optional YAML file plus overrides."""
    import yaml

    raw_config: Dict[str, Any] = {}
    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        if not isinstance(raw_config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

    # Apply environment variable overrides
    if env_host := os.getenv('DOCKER_HOST'):
        raw_config.setdefault('docker_host', env_host)

    if env_log_level := os.getenv('LOG_LEVEL'):
        raw_config['log_level'] = env_log_level

    # Command line values win over file and environment
    if overrides:
        raw_config.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CollectorConfig(**raw_config)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

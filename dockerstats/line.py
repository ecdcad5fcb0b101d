"""Metric line model and builder."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dockerstats.derived import CPU_PERCENT_KEY, compute_blkio_metrics, compute_cpu_percent
from dockerstats.flatten import flatten, is_field_value

# Snapshot timestamps, not metrics
SKIPPED_KEYS = ("read", "preread")


def format_value(value: Any) -> str:
    """Render a field value: strings quoted, numbers in native form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def strip_name(name: str) -> str:
    """Drop the leading '/' the Docker API puts on container names."""
    return name[1:] if name.startswith("/") else name


@dataclass
class MetricLine:
    """One output record for a container."""
    path: str
    fields: Dict[str, Any]
    tags: Optional[List[str]] = None
    name: Optional[str] = field(default=None, compare=False)

    def field_string(self) -> str:
        """Fields joined as key=value in insertion order."""
        return ",".join(f"{k}={format_value(v)}" for k, v in self.fields.items())

    def format(self) -> str:
        line = f"{self.path} {self.field_string()}"
        if self.tags:
            line += " " + ",".join(self.tags)
        return line


def collect_fields(stats: Mapping[str, Any], extras: Optional[Mapping[str, Any]] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Flatten a snapshot merged with extra stats into field values.

    Returns:
        Tuple of (fields, display name); the display name is the stripped
        'name' field, if the snapshot carries one
    """
    merged = dict(stats)
    if extras:
        merged.update(extras)

    fields: Dict[str, Any] = {}
    name = None
    for key, value in flatten(merged).items():
        if key in SKIPPED_KEYS:
            continue
        if not is_field_value(value):
            continue
        if key == "name" and isinstance(value, str):
            value = strip_name(value)
            name = value
        fields[key] = value
    return fields, name


def build_line(
    scheme: str,
    container_label: str,
    stats: Mapping[str, Any],
    extras: Optional[Mapping[str, Any]] = None,
    tags: Optional[List[str]] = None,
    names_as_tags: bool = False,
    io_info: bool = False,
    cpu_percent: bool = False
) -> MetricLine:
    """
    Compose the line for one container.

    The path is scheme.container_label, or just the scheme when names are
    carried as tags. Block I/O entries and the CPU percentage are appended
    after the flattened fields when enabled.
    """
    path = scheme if names_as_tags else f"{scheme}.{container_label}"

    fields, name = collect_fields(stats, extras)

    if io_info:
        fields.update(compute_blkio_metrics(stats.get("blkio_stats")))

    if cpu_percent:
        # Decimal keeps the two-decimal text and renders unquoted
        fields[CPU_PERCENT_KEY] = Decimal(compute_cpu_percent(stats))

    return MetricLine(path, fields, tags or None, name)

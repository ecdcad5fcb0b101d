"""Metrics computed from a stats snapshot rather than read off it."""
from typing import Any, Dict, Mapping, Optional
import logging

logger = logging.getLogger(__name__)

CPU_PERCENT_KEY = "cpu_stats.usage_percent"


def _number(value: Any) -> float:
    """Absent or null counters count as zero."""
    if value is None or isinstance(value, bool):
        return 0
    return value


def _section(stats: Mapping[str, Any], *path: str) -> Mapping[str, Any]:
    node: Any = stats
    for key in path:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key)
    return node if isinstance(node, Mapping) else {}


def core_count(cpu_stats: Mapping[str, Any]) -> int:
    """
    Number of cores the usage counters are spread over.

    Uses the length of percpu_usage; cgroup v2 hosts omit that array, in
    which case online_cpus is reported instead.
    """
    percpu = _section(cpu_stats, "cpu_usage").get("percpu_usage")
    if isinstance(percpu, (list, tuple)) and percpu:
        return len(percpu)
    return int(_number(cpu_stats.get("online_cpus")))


def compute_cpu_percent(stats: Mapping[str, Any]) -> str:
    """
    CPU usage over the window between precpu_stats and cpu_stats.

    percent = cpu_delta / system_delta * cores * 100, or 0.0 unless both
    deltas are positive. Always formatted with two decimals.
    """
    cpu_stats = _section(stats, "cpu_stats")
    precpu_stats = _section(stats, "precpu_stats")

    cpu_delta = (
        _number(_section(cpu_stats, "cpu_usage").get("total_usage"))
        - _number(_section(precpu_stats, "cpu_usage").get("total_usage"))
    )

    system_delta = 0
    if cpu_stats.get("system_cpu_usage") is not None:
        system_delta = cpu_stats["system_cpu_usage"] - _number(precpu_stats.get("system_cpu_usage"))

    cpu_percent = 0.0
    if system_delta > 0 and cpu_delta > 0:
        cpu_percent = (float(cpu_delta) / float(system_delta)) * core_count(cpu_stats) * 100

    return f"{cpu_percent:.2f}"


def compute_blkio_metrics(blkio_stats: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    One entry per category/op/device, keyed "category.op.major.minor".

    Categories that are missing or null (cgroup v2 reports most of them as
    null) contribute nothing. Order follows the source document.
    """
    stats_out: Dict[str, Any] = {}
    if not blkio_stats:
        return stats_out

    for stats_type, records in blkio_stats.items():
        if not records:
            continue
        for record in records:
            key = f"{stats_type}.{record.get('op')}.{record.get('major')}.{record.get('minor')}"
            stats_out[key] = record.get("value")

    logger.debug(f"Derived {len(stats_out)} block I/O entries")
    return stats_out

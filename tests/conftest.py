"""Shared fixtures: a canned stats document and a fake Docker API."""
import copy

import pytest
from docker.errors import NotFound

STATS = {
    "read": "2024-01-01T00:00:01.000000000Z",
    "preread": "2024-01-01T00:00:00.000000000Z",
    "name": "/web1",
    "id": "5bf1b82382eb",
    "num_procs": 0,
    "pids_stats": {"current": 4},
    "cpu_stats": {
        "cpu_usage": {
            "total_usage": 1400,
            "percpu_usage": [350, 350, 350, 350],
            "usage_in_kernelmode": 100,
        },
        "system_cpu_usage": 12000,
        "throttling_data": {"periods": 0},
    },
    "precpu_stats": {
        "cpu_usage": {
            "total_usage": 1000,
            "percpu_usage": [250, 250, 250, 250],
            "usage_in_kernelmode": 80,
        },
        "system_cpu_usage": 10000,
        "throttling_data": {"periods": 0},
    },
    "memory_stats": {"usage": 2048, "limit": 8192.5},
    "blkio_stats": {
        "io_service_bytes_recursive": [
            {"major": 8, "minor": 0, "op": "Read", "value": 1024},
            {"major": 8, "minor": 0, "op": "Write", "value": 512},
        ],
        "io_serviced_recursive": [
            {"major": 8, "minor": 0, "op": "Read", "value": 3},
        ],
        "io_queue_recursive": [],
        "sectors_recursive": None,
    },
}


class FakeAPI:
    """Stands in for docker.APIClient with canned responses."""

    base_url = "http+docker://localhost"

    def __init__(self, containers=None, stats=None, labels=None):
        self._containers = containers or []
        self._stats = stats or {}
        self._labels = labels or {}
        self.calls = []

    def containers(self):
        self.calls.append(("containers",))
        return self._containers

    def stats(self, container, stream=True):
        self.calls.append(("stats", container))
        if container not in self._stats:
            raise NotFound(f"No such container: {container}")
        result = self._stats[container]
        if isinstance(result, Exception):
            raise result
        return result

    def inspect_container(self, container):
        self.calls.append(("inspect", container))
        if container not in self._labels:
            raise NotFound(f"No such container: {container}")
        return {"Id": container, "Config": {"Labels": self._labels[container]}}


@pytest.fixture
def stats():
    return copy.deepcopy(STATS)


@pytest.fixture
def fake_api(stats):
    other = copy.deepcopy(STATS)
    other["name"] = "/db1"
    other["id"] = "a1b2c3d4e5f6"
    return FakeAPI(
        containers=[
            {"Id": "5bf1b82382eb", "Names": ["/web1"]},
            {"Id": "a1b2c3d4e5f6", "Names": ["/db1"]},
        ],
        stats={"web1": stats, "5bf1b82382eb": stats, "db1": other, "a1b2c3d4e5f6": other},
        labels={
            "web1": {"com.example.team": "frontend"},
            "db1": {"com.example.team": "data"},
            "5bf1b82382eb": {"com.example.team": "frontend"},
            "a1b2c3d4e5f6": {"com.example.team": "data"},
        },
    )

"""Tests for the Docker API wrapper."""
import pytest
import requests

from dockerstats.client import (
    CollectorError,
    DockerClient,
    MalformedResponse,
    TargetNotFound,
    normalize_host,
)


def test_normalize_host():
    assert normalize_host(None) is None
    assert normalize_host("/var/run/docker.sock") == "unix:///var/run/docker.sock"
    assert normalize_host("unix:///var/run/docker.sock") == "unix:///var/run/docker.sock"
    assert normalize_host("localhost:2375") == "tcp://localhost:2375"
    assert normalize_host("http://localhost:2375") == "http://localhost:2375"
    assert normalize_host("https://docker.example.com") == "https://docker.example.com"


def test_reads_through_to_api(fake_api, stats):
    client = DockerClient(api=fake_api)
    assert client.stats("web1") == stats
    assert client.inspect("web1")["Config"]["Labels"] == {"com.example.team": "frontend"}
    assert [c["Id"] for c in client.list_containers()] == ["5bf1b82382eb", "a1b2c3d4e5f6"]


def test_not_found_names_container_and_endpoint(fake_api):
    client = DockerClient("/var/run/docker.sock", api=fake_api)
    with pytest.raises(TargetNotFound) as excinfo:
        client.stats("ghost")
    assert excinfo.value.container == "ghost"
    assert str(excinfo.value) == "ghost is not running on unix:///var/run/docker.sock"


def test_invalid_json_is_malformed(fake_api):
    fake_api._stats["broken"] = ValueError("Expecting value: line 1 column 1")
    client = DockerClient(api=fake_api)
    with pytest.raises(MalformedResponse):
        client.stats("broken")


def test_non_object_stats_are_malformed(fake_api):
    fake_api._stats["odd"] = ["not", "a", "document"]
    client = DockerClient(api=fake_api)
    with pytest.raises(MalformedResponse):
        client.stats("odd")


def test_transport_failure_is_collector_error(fake_api):
    fake_api._stats["down"] = requests.exceptions.ConnectionError("refused")
    client = DockerClient(api=fake_api)
    with pytest.raises(CollectorError) as excinfo:
        client.stats("down")
    assert not isinstance(excinfo.value, (TargetNotFound, MalformedResponse))

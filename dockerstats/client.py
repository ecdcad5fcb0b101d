"""Docker Engine API access over a Unix socket or TCP."""
from typing import Any, Dict, List, Optional
import logging

import docker
import requests
from docker.errors import DockerException, NotFound

logger = logging.getLogger(__name__)


class CollectorError(Exception):
    """Base class for failures that end a collection run."""


class TargetNotFound(CollectorError):
    """The daemon does not know the container (404)."""

    def __init__(self, container: str, uri: str):
        self.container = container
        self.uri = uri
        super().__init__(f"{container} is not running on {uri}")


class MalformedResponse(CollectorError):
    """The daemon answered with a body that is not valid JSON."""


def normalize_host(docker_host: Optional[str]) -> Optional[str]:
    """
    Turn the accepted host spellings into a base URL the docker SDK takes.

    /var/run/docker.sock     -> unix:///var/run/docker.sock
    localhost:2375           -> tcp://localhost:2375
    unix://, tcp://, http(s):// URLs are passed through.
    """
    if not docker_host:
        return None

    host = docker_host.strip()
    if host.startswith(("unix://", "tcp://", "http://", "https://", "npipe://", "ssh://")):
        return host
    if host.startswith("/"):
        return f"unix://{host}"
    return f"tcp://{host}"


class DockerClient:
    """Thin wrapper exposing the three endpoints the collector reads."""

    def __init__(self, docker_host: Optional[str] = None, timeout: int = 60, api: Any = None):
        """
        Args:
            docker_host: Any form accepted by normalize_host; None uses the
                SDK default (DOCKER_HOST or the local socket)
            timeout: Per-request timeout in seconds
            api: Pre-built docker.APIClient, mainly for tests
        """
        base_url = normalize_host(docker_host)
        if api is None:
            try:
                if base_url:
                    api = docker.APIClient(base_url=base_url, timeout=timeout, version="auto")
                else:
                    api = docker.APIClient(timeout=timeout, version="auto")
            except DockerException as e:
                raise CollectorError(f"Cannot connect to Docker API at {base_url or 'default socket'}: {e}")
        self.api = api
        self.uri = base_url or getattr(api, "base_url", "default socket")
        logger.debug(f"Docker API client targeting {self.uri}")

    def _call(self, container: Optional[str], func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except NotFound:
            raise TargetNotFound(container or "", self.uri)
        except ValueError as e:
            raise MalformedResponse(f"Invalid JSON from {self.uri}: {e}")
        except (DockerException, requests.exceptions.RequestException) as e:
            raise CollectorError(f"Docker API request to {self.uri} failed: {e}")

    def list_containers(self) -> List[Dict[str, Any]]:
        """GET /containers/json"""
        return self._call(None, self.api.containers)

    def stats(self, container: str) -> Dict[str, Any]:
        """GET /containers/{id}/stats?stream=0"""
        result = self._call(container, self.api.stats, container, stream=False)
        if not isinstance(result, dict):
            raise MalformedResponse(f"Unexpected stats payload for {container} from {self.uri}")
        return result

    def inspect(self, container: str) -> Dict[str, Any]:
        """GET /containers/{id}/json"""
        return self._call(container, self.api.inspect_container, container)

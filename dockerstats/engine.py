"""Collection pipeline: resolve containers, fetch stats, emit lines."""
import time
import logging
from typing import Callable, List, Optional

from dockerstats.config import CollectorConfig
from dockerstats.client import CollectorError, DockerClient
from dockerstats.line import MetricLine, build_line, strip_name
from dockerstats.self_metrics import SelfMetrics
from dockerstats.tags import build_tags

logger = logging.getLogger(__name__)


def container_label(target: str, name_parts: Optional[List[int]], delimiter: str) -> str:
    """
    Label used in the metric path.

    With name_parts, the target is split on the delimiter and the selected
    fields re-joined with '.', e.g. indices [3, 4] turn
    my-docker-container-web-b2ffdab8 into web.b2ffdab8.
    """
    if not name_parts:
        return target

    pieces = target.split(delimiter)
    selected = []
    for index in name_parts:
        if index >= len(pieces):
            raise CollectorError(
                f"Name part {index} out of range for '{target}' split on '{delimiter}'"
            )
        selected.append(pieces[index])
    return ".".join(selected)


class StatsPipeline:
    """Runs one or more collection passes over the configured containers."""

    def __init__(
        self,
        config: CollectorConfig,
        client: DockerClient,
        sink: Callable[[str], None] = print,
        self_metrics: Optional[SelfMetrics] = None
    ):
        self.config = config
        self.client = client
        self.sink = sink
        self.self_metrics = self_metrics
        self.running = False
        self.pass_count = 0

    def resolve_targets(self) -> List[str]:
        """The named container, or every running container from the daemon."""
        if self.config.container:
            return [self.config.container]

        targets = []
        for container in self.client.list_containers():
            names = container.get("Names") or []
            if (self.config.friendly_names or self.config.name_parts) and names:
                targets.append(strip_name(names[0]))
            else:
                targets.append(container["Id"])

        logger.debug(f"Resolved {len(targets)} containers")
        return targets

    def process_container(self, target: str) -> MetricLine:
        """Fetch and transform the stats of one container."""
        # Resolved first so a bad name part costs no API call
        label = container_label(target, self.config.name_parts, self.config.delimiter)

        stats = self.client.stats(target)
        if self.self_metrics:
            self.self_metrics.record_poll()

        line = build_line(
            self.config.scheme,
            label,
            stats,
            extras=self.config.extra_stats,
            names_as_tags=self.config.names_as_tags,
            io_info=self.config.io_info,
            cpu_percent=self.config.cpu_percent
        )
        line.tags = build_tags(target, line.name, self.config, self.client.inspect)
        return line

    def run_once(self) -> int:
        """
        Execute one collection pass.

        Returns:
            Number of lines emitted

        Raises:
            CollectorError: on the first failure when fail_fast is set, and
                always for an explicitly named container
        """
        pass_start = time.time()
        emitted = 0

        try:
            targets = self.resolve_targets()
        except CollectorError as e:
            self._record_error(e)
            raise

        for target in targets:
            try:
                line = self.process_container(target)
            except CollectorError as e:
                self._record_error(e)
                if self.config.fail_fast or self.config.container:
                    raise
                logger.error(f"Skipping container {target}: {e}")
                continue

            self.sink(line.format())
            emitted += 1
            if self.self_metrics:
                self.self_metrics.record_line()

        duration = time.time() - pass_start
        if self.self_metrics:
            self.self_metrics.record_pass_duration(duration)

        self.pass_count += 1
        logger.info(f"Pass {self.pass_count}: emitted {emitted} lines in {duration:.3f}s")
        return emitted

    def run(self):
        """Run once, or repeat every interval_s seconds until stopped."""
        interval = self.config.interval_s
        if not interval:
            self.run_once()
            return

        self.running = True
        logger.info(f"Polling every {interval}s")

        while self.running:
            pass_start = time.time()

            self.run_once()

            # Sleep for remaining time in the interval
            pass_duration = time.time() - pass_start
            sleep_time = max(0, interval - pass_duration)

            if sleep_time > 0:
                time.sleep(sleep_time)
            else:
                logger.warning(
                    f"Pass took {pass_duration:.3f}s, longer than interval {interval}s"
                )

    def stop(self):
        """Stop polling after the current pass."""
        logger.info("Stopping collector")
        self.running = False

    def _record_error(self, error: CollectorError):
        if self.self_metrics:
            self.self_metrics.record_error(type(error).__name__)

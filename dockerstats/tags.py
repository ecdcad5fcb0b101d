"""Tag assembly for metric lines."""
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

from dockerstats.config import CollectorConfig

logger = logging.getLogger(__name__)


def label_tags(inspect_doc: Mapping[str, Any]) -> List[str]:
    """Container labels as tags with quoted values."""
    labels = (inspect_doc.get("Config") or {}).get("Labels") or {}
    return [f'{key}="{value}"' for key, value in labels.items()]


def build_tags(
    container: str,
    friendly_name: Optional[str],
    config: CollectorConfig,
    inspect: Optional[Callable[[str], Dict[str, Any]]] = None
) -> Optional[List[str]]:
    """
    Build the ordered tag list for one container.

    Precedence:
      1. name=<friendly_name> when names_as_tags is on
      2. configured static tags replace everything collected so far
      3. container labels are appended when labels_as_tags is on

    Args:
        container: Identifier used for the inspect call
        friendly_name: Display name with the leading '/' removed, if known
        config: Collector configuration
        inspect: Callable returning the inspect document for a container

    Returns:
        List of tag strings, or None when there are no tags
    """
    tag_list: List[str] = []

    if friendly_name and config.names_as_tags:
        tag_list.append(f"name={friendly_name}")

    if config.tags is not None:
        tag_list = list(config.tags)

    if config.labels_as_tags:
        if inspect is None:
            raise ValueError("labels_as_tags requires an inspect callable")
        tag_list.extend(label_tags(inspect(container)))

    if not tag_list:
        return None

    logger.debug(f"Tags for {container}: {tag_list}")
    return tag_list

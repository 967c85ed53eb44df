"""Host inventory loading from a local JSON file or an HTTP(S) endpoint."""

import json
import logging
import re
from pathlib import Path
from typing import Any

import httpx

from boomerang.models import HostDescriptor

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"^(http|https)://")
FETCH_TIMEOUT = 10.0


class InventoryError(Exception):
    """Inventory could not be fetched or decoded."""

    pass


def load_inventory(location: str) -> list[HostDescriptor]:
    """Load the host inventory from a file path or URL.

    Locations starting with ``http://`` or ``https://`` are fetched; anything
    else is read as a local file.

    Returns:
        Host descriptors in inventory order

    Raises:
        InventoryError: If the inventory cannot be read or decoded
    """
    if URL_PATTERN.match(location):
        records = _fetch_url(location)
    else:
        records = _read_file(Path(location))

    hosts = _decode(records, location)
    logger.info("Loaded %d host(s) from %s", len(hosts), location)
    return hosts


def _fetch_url(url: str) -> Any:
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
    except httpx.HTTPError as e:
        raise InventoryError(f"could not get inventory from url {url}: {e}") from e

    if response.status_code != 200:
        raise InventoryError(
            f"server returned a [{response.status_code} {response.reason_phrase}], "
            "expecting status code 200"
        )

    try:
        return response.json()
    except ValueError as e:
        raise InventoryError(f"could not decode inventory from [{url}]: {e}") from e


def _read_file(path: Path) -> Any:
    if not path.is_file():
        raise InventoryError(f"stat on file failed or file does not exist: check {path}")

    try:
        return json.loads(path.read_text())
    except OSError as e:
        raise InventoryError(f"could not read inventory file {path}: {e}") from e
    except ValueError as e:
        raise InventoryError(f"could not decode inventory from [{path}]: {e}") from e


def _decode(records: Any, location: str) -> list[HostDescriptor]:
    if not isinstance(records, list):
        raise InventoryError(f"inventory from [{location}] must be a JSON array")

    hosts: list[HostDescriptor] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise InventoryError(
                f"inventory entry {index} from [{location}] is not an object"
            )
        if record.get("extras") is not None and not isinstance(record["extras"], dict):
            raise InventoryError(
                f"inventory entry {index} from [{location}]: extras must be an object"
            )
        hosts.append(HostDescriptor.from_dict(record))
    return hosts

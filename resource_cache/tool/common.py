"""Helpers shared by the resource-cache commands."""

import logging
from pathlib import Path

from resource_cache.exceptions import InputException
from resource_cache.resource import read_resources
from resource_cache.store import Store

_LOGGER = logging.getLogger(__name__)


async def load_files(store: Store, files: list[str]) -> int:
    """Add the resources from each file to the store, returning the count."""
    count = 0
    for file in files:
        try:
            resources = await read_resources(Path(file))
        except OSError as err:
            raise InputException(f"Unable to read resource file {file}: {err}") from err
        _LOGGER.info("Loaded %d resource(s) from %s", len(resources), file)
        store.add(*resources)
        count += len(resources)
    return count

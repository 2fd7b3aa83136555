"""Reference-data loading for the GDELT Event Globe.

Loads the CAMEO label table, the country coordinate table and the country
boundary GeoJSON. Each source is either a local path or an http(s) URL; the
three loads run concurrently and all three must succeed.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict

from config.settings import ViewerConfig
from eventglobe.clients.gdelt_client import GDELTFeedClient
from eventglobe.errors import FeedRequestError, ReferenceLoadError
from eventglobe.io.persistence import read_reference_file
from eventglobe.models.reference import ReferenceData

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_source(source: str, client: GDELTFeedClient, label: str) -> Dict[str, Any]:
    """Load one JSON reference document.

    Args:
        source: Local file path or http(s) URL.
        client: Feed client used for URL sources.
        label: Human-readable name of the resource, used in error messages.

    Returns:
        The parsed JSON object.

    Raises:
        ReferenceLoadError: If the source is missing, unreachable, or not a JSON object.
    """
    if _is_url(source):
        try:
            data = client.fetch_json(source)
        except FeedRequestError as exc:
            raise ReferenceLoadError(f"failed to fetch {label}: {exc}") from exc
    else:
        data = read_reference_file(source)

    if not isinstance(data, dict):
        raise ReferenceLoadError(f"failed to load {label} from {source}")
    logger.debug("Loaded %s from %s (%d top-level keys)", label, source, len(data))
    return data


def load_reference_data(config: ViewerConfig, client: GDELTFeedClient) -> ReferenceData:
    """Load all reference tables concurrently.

    Args:
        config: Viewer configuration holding the three source locations.
        client: Feed client used for URL sources.

    Returns:
        Typed ReferenceData.

    Raises:
        ReferenceLoadError: If any of the three loads fails.
    """
    sources = {
        "cameo": (config.cameo_source, "CAMEO event code definitions"),
        "countries": (config.country_source, "country coordinate definitions"),
        "geojson": (config.geojson_source, "country boundary GeoJSON"),
    }

    with ThreadPoolExecutor(max_workers=config.reference_load_workers) as executor:
        futures = {
            key: executor.submit(load_source, source, client, label)
            for key, (source, label) in sources.items()
        }
        # result() re-raises the first ReferenceLoadError in declaration order
        loaded = {key: future.result() for key, future in futures.items()}

    reference = ReferenceData.from_raw(loaded["cameo"], loaded["countries"], loaded["geojson"])
    logger.info(
        "Reference data: %d CAMEO codes, %d countries, %d boundary features",
        len(reference.cameo),
        len(reference.countries),
        len(reference.country_features),
    )
    return reference

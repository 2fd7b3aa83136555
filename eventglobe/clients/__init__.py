"""GDELT Event Globe clients package.

HTTP clients only — no business logic in this layer.
Each client handles connection management, retries, and response decoding.
"""

from eventglobe.clients.gdelt_client import (
    GDELTFeedClient,
    extract_archive_url,
    extract_first_member,
)

__all__ = [
    "GDELTFeedClient",
    "extract_archive_url",
    "extract_first_member",
]

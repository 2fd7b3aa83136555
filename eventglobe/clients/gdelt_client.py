"""GDELT 2.0 raw-file client for the GDELT Event Globe.

Handles all HTTP communication with data.gdeltproject.org and reference-data
hosts: session management, transient-failure retry with exponential backoff,
archive URL extraction and archive decompression.

No business logic lives here — this client returns raw text, bytes and JSON.
Parsing and aggregation happen in the analysis layer.

Known GDELT raw-file gotchas:
- The pointer file lists three archives (export, mentions, gkg); only the
  export archive is wanted, so it is located by regex rather than by line.
- Each archive holds exactly one CSV member; its name is not guaranteed, so the
  first entry is taken unconditionally.
"""

from __future__ import annotations

import io
import json
import logging
import re
import time
import zipfile
from typing import Any, Optional, Tuple

import requests
from requests import Session
from requests.adapters import HTTPAdapter

from config.defaults import ARCHIVE_URL_PATTERNS
from eventglobe.errors import ArchiveError, FeedRequestError

logger = logging.getLogger(__name__)


def extract_archive_url(
    pointer_text: str,
    pattern: str = ARCHIVE_URL_PATTERNS["translation"],
) -> Optional[Tuple[str, str]]:
    """Find the event archive URL inside a last-update pointer file.

    Args:
        pointer_text: Body of lastupdate(-translation).txt.
        pattern: Regex whose first group captures the 14-digit file timestamp.

    Returns:
        (archive URL, timestamp digits), or None if no URL matches.
    """
    match = re.search(pattern, pointer_text or "")
    if not match:
        return None
    return match.group(0), match.group(1)


def extract_first_member(archive_bytes: bytes, encoding: str = "utf-8") -> str:
    """Decompress the first member of a ZIP archive as text.

    Raises:
        ArchiveError: If the bytes are not a ZIP archive or the archive is empty.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
            names = archive.namelist()
            if not names:
                raise ArchiveError("archive contains no CSV member")
            with archive.open(names[0]) as member:
                raw = member.read()
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"archive could not be decompressed: {exc}") from exc

    logger.debug("Decompressed archive member %s (%d bytes)", names[0], len(raw))
    return raw.decode(encoding, errors="replace")


class GDELTFeedClient:
    """Client for GDELT 2.0 raw files and JSON reference resources.

    Retries transient failures (429, 5xx, timeouts, connection errors) with
    exponential backoff; any other non-200 status fails immediately.

    Args:
        max_retries: Maximum retry attempts on transient HTTP errors.
        backoff_base: Base seconds for exponential backoff (doubles per attempt).
        request_timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        max_retries: int = 2,
        backoff_base: float = 2.0,
        request_timeout: int = 60,
    ) -> None:
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.request_timeout = request_timeout

        self._session = Session()
        adapter = HTTPAdapter(max_retries=0)   # We handle retries manually
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def _get_with_retry(self, url: str) -> requests.Response:
        """Execute an HTTP GET with exponential backoff retry.

        Args:
            url: URL to fetch.

        Returns:
            The 200 response.

        Raises:
            FeedRequestError: On a non-retryable status or exhausted retries.
        """
        last_status: Optional[int] = None
        last_reason = ""
        for attempt in range(self.max_retries + 1):
            try:
                resp = self._session.get(url, timeout=self.request_timeout)
            except requests.exceptions.Timeout:
                last_reason = "timeout"
                wait = self.backoff_base * (2 ** attempt)
                logger.warning(
                    "GDELT request timeout — retrying in %.1fs (attempt %d/%d)",
                    wait,
                    attempt + 1,
                    self.max_retries,
                )
                time.sleep(wait)
                continue
            except requests.exceptions.ConnectionError as exc:
                last_reason = "connection error"
                wait = self.backoff_base * (2 ** attempt)
                logger.warning(
                    "GDELT connection error: %s — retrying in %.1fs (attempt %d/%d)",
                    exc,
                    wait,
                    attempt + 1,
                    self.max_retries,
                )
                time.sleep(wait)
                continue
            except requests.exceptions.RequestException as exc:
                logger.error("GDELT request failed permanently: %s", exc)
                raise FeedRequestError(url, reason=str(exc)) from exc

            last_status = resp.status_code
            if resp.status_code == 429 or resp.status_code in (500, 502, 503, 504):
                wait = self.backoff_base * (2 ** attempt)
                logger.warning(
                    "GDELT returned HTTP %d — retrying in %.1fs (attempt %d/%d)",
                    resp.status_code,
                    wait,
                    attempt + 1,
                    self.max_retries,
                )
                time.sleep(wait)
                continue

            if resp.status_code != 200:
                logger.warning("GDELT returned HTTP %d for URL: %s", resp.status_code, url)
                raise FeedRequestError(url, status_code=resp.status_code)

            return resp

        logger.error("GDELT: exhausted %d retries for URL: %s", self.max_retries, url)
        raise FeedRequestError(url, status_code=last_status, reason=last_reason)

    def fetch_text(self, url: str) -> str:
        """GET a URL and return its body as text."""
        logger.debug("GET text %s", url)
        return self._get_with_retry(url).text

    def fetch_bytes(self, url: str) -> bytes:
        """GET a URL and return its raw body."""
        logger.debug("GET bytes %s", url)
        return self._get_with_retry(url).content

    def fetch_json(self, url: str) -> Optional[Any]:
        """GET a URL and parse its body as JSON; None if the body is not JSON."""
        logger.debug("GET json %s", url)
        text = self._get_with_retry(url).text
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Unparseable JSON body from %s (length=%d)", url, len(text))
            return None

    def fetch_archive_text(self, url: str) -> str:
        """Download a ZIP archive and return its first member as text."""
        return extract_first_member(self.fetch_bytes(url))

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "GDELTFeedClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

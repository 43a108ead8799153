"""RSS/Atom feed fetching using feedparser."""

import http.client
import logging
from urllib.parse import urlparse

import feedparser

from feedburst.errors import FeedFetchError

logger = logging.getLogger(__name__)


def fetch_links(url: str) -> list[str]:
    """Fetch a feed and return its entry links, oldest first.

    Feeds list their newest entries first, so the wire order is reversed.

    Args:
        url: The feed URL to fetch and parse.

    Returns:
        Entry links in oldest-first order.

    Raises:
        FeedFetchError: If the URL is invalid, unreachable, or not a valid feed.
    """
    _validate_url(url)

    logger.debug("Fetching <%s>", url)
    try:
        parsed = feedparser.parse(url)
    except (ValueError, http.client.HTTPException) as e:
        # feedparser only converts URLError into a bozo result.
        raise FeedFetchError(f"Could not fetch feed: {e}") from e
    return links_from_parsed(parsed)


def links_from_parsed(parsed) -> list[str]:
    """Extract oldest-first links from a feedparser result."""
    status = parsed.get("status", 200)
    if status in (401, 403):
        raise FeedFetchError(
            "Feed requires authentication. Ensure the URL is publicly accessible."
        )

    if status >= 400:
        raise FeedFetchError(f"Could not reach URL: HTTP {status}")

    if not parsed.get("version") and not parsed.entries:
        if parsed.get("bozo") and parsed.get("bozo_exception"):
            raise FeedFetchError(
                f"URL does not point to a valid RSS or Atom feed: {parsed.bozo_exception}"
            )
        raise FeedFetchError("URL does not point to a valid RSS or Atom feed")

    if parsed.get("bozo"):
        logger.warning("Feed has formatting issues: %s", parsed.get("bozo_exception"))

    links = []
    for entry in parsed.entries:
        link = _entry_link(entry)
        if not link:
            logger.warning(
                "Skipping entry with no link: %s", entry.get("title", "unknown")
            )
            continue
        links.append(link)

    links.reverse()
    return links


def _validate_url(url: str) -> None:
    """Validate that the URL has a valid format."""
    try:
        result = urlparse(url)
        if not result.scheme or not result.netloc:
            raise FeedFetchError("Invalid URL format")
        if result.scheme not in ("http", "https"):
            raise FeedFetchError("Invalid URL format: only http and https are supported")
        # Raises ValueError for a non-numeric or out-of-range port.
        result.port
    except ValueError:
        raise FeedFetchError("Invalid URL format")


def _entry_link(entry) -> str | None:
    """Pick the link for an entry, falling back to its first <link href>."""
    link = entry.get("link")
    if not link:
        for candidate in entry.get("links") or []:
            if candidate.get("href"):
                link = candidate["href"]
                break
    if not link:
        return None
    link = link.strip()
    # Records store one link per line.
    if not link or "\n" in link or "\r" in link:
        return None
    return link

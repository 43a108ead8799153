"""Shared test fixtures for feedburst tests."""

from datetime import datetime, timezone

import pytest

from feedburst.store import FeedStore


SAMPLE_CONFIG = """# My comics
"Questionable Content" <https://questionablecontent.net/QCRSS.xml> @ immediately

"Dumbing of Age"
<https://www.dumbingofage.com/feed/>
@ wait 5 comics

  # indented comment
"Gunnerkrigg Court" <https://www.gunnerkrigg.com/rss.xml> @ every 2 weeks
"xkcd" <https://xkcd.com/atom.xml> @ WAIT 3 Days
"""

SAMPLE_RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <item>
      <title>Second Comic</title>
      <link>https://example.com/comic-2</link>
      <guid>comic-2</guid>
      <pubDate>Thu, 13 Feb 2026 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Untitled Announcement</title>
    </item>
    <item>
      <title>First Comic</title>
      <link>https://example.com/comic-1</link>
      <guid>comic-1</guid>
      <pubDate>Thu, 13 Feb 2026 09:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

SAMPLE_ATOM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <id>urn:uuid:feed</id>
  <updated>2026-02-13T10:00:00Z</updated>
  <entry>
    <title>Atom Entry 2</title>
    <link href="https://example.com/entry-2"/>
    <id>urn:uuid:entry-2</id>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <updated>2026-02-12T10:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_NOT_A_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<html>
  <body>This is not a feed</body>
</html>"""

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_config():
    """A valid config with four feeds."""
    return SAMPLE_CONFIG


@pytest.fixture
def sample_rss_xml():
    """Sample RSS 2.0 XML, newest item first, with one linkless item."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample Atom XML, newest entry first."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_not_a_feed_xml():
    """Sample XML that is not a feed."""
    return SAMPLE_NOT_A_FEED_XML


@pytest.fixture
def now():
    """A fixed, timezone-aware current time."""
    return NOW


@pytest.fixture
def data_dir(tmp_path):
    """A not-yet-created directory for feed records."""
    return tmp_path / "feeds"


@pytest.fixture
def store(data_dir):
    """A FeedStore writing into a temporary directory."""
    return FeedStore(data_dir)

"""Example: build a small sitemap and print it.

Run after `pip install -e .`:
    python examples/gen_sitemap.py [output.xml]
"""

import logging
import sys
from datetime import datetime, timedelta, timezone

from sitemap_entry import ChangeFreq, UrlEntry, UrlEntryBuilder
from sitemap_errors import SitemapError
from sitemap_generator import Sitemap

log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
logging.basicConfig(level=logging.DEBUG, format=log_format)
logger = logging.getLogger(__name__)


def build_sitemap() -> Sitemap:
    now = datetime.now(timezone.utc)
    cet = timezone(timedelta(hours=1))

    sitemap = Sitemap()
    sitemap.add(UrlEntry('https://edgarluque.com/projects'))
    sitemap.add(UrlEntry(
        'https://edgarluque.com/',
        lastmod=now,
        changefreq=ChangeFreq.DAILY,
        priority=1.0,
    ))
    sitemap.add(
        UrlEntryBuilder()
        .loc('https://edgarluque.com/blog')
        .changefreq(ChangeFreq.WEEKLY)
        .priority(0.8)
        .lastmod(now)
        .build()
    )
    sitemap.add(UrlEntry(
        'https://edgarluque.com/blog/sitewriter',
        lastmod=datetime(2020, 11, 22, 15, 10, 15, tzinfo=timezone.utc),
        changefreq=ChangeFreq.NEVER,
        priority=0.5,
    ))
    # Local time, written out as UTC
    sitemap.add(UrlEntry(
        'https://edgarluque.com/blog/some-future-post',
        lastmod=datetime(2020, 12, 5, 12, 30, 0, tzinfo=cet),
        changefreq=ChangeFreq.NEVER,
        priority=0.5,
    ))
    # Entity escaping
    sitemap.add(UrlEntry(
        "https://edgarluque.com/blog/test&id='<test>'",
        changefreq=ChangeFreq.NEVER,
        priority=0.5,
    ))
    return sitemap


def main() -> int:
    try:
        sitemap = build_sitemap()
        if len(sys.argv) > 1:
            with open(sys.argv[1], 'wb') as f:
                sitemap.generate(f)
            logger.info(f"Sitemap with {len(sitemap)} URLs saved to {sys.argv[1]}")
        else:
            print(sitemap.to_str())
    except (SitemapError, OSError) as e:
        logger.error(f"Failed to generate sitemap: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

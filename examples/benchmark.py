"""Time sitemap generation for a large site.

Run after `pip install -e .`:
    python examples/benchmark.py [url_count] [repeat]
"""

import io
import logging
import sys
import timeit
from datetime import datetime, timezone

from sitemap_entry import ChangeFreq, UrlEntry, UrlEntryBuilder
from sitemap_generator import generate, generate_bytes, generate_str

DEFAULT_URL_COUNT: int = 50000
DEFAULT_REPEAT: int = 5

log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
logging.basicConfig(level=logging.INFO, format=log_format)
logger = logging.getLogger(__name__)


def build_entries(count: int):
    """Build entries mixing every combination of optional fields."""
    now = datetime.now(timezone.utc)
    freqs = list(ChangeFreq)
    entries = []
    for i in range(count):
        kind = i % 4
        if kind == 0:
            entries.append(UrlEntry(f'https://domain.com/page/{i}'))
        elif kind == 1:
            entries.append(
                UrlEntryBuilder().loc(f'https://domain.com/post/{i}').priority(0.2).build()
            )
        elif kind == 2:
            entries.append(UrlEntry(
                f'https://domain.com/url/{i}',
                lastmod=now,
                changefreq=freqs[i % len(freqs)],
                priority=0.8,
            ))
        else:
            entries.append(UrlEntry(f"https://domain.com/bb&id='<test{i}>'", priority=0.4))
    return entries


def main() -> int:
    count = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_URL_COUNT
    repeat = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_REPEAT

    entries = build_entries(count)
    logger.info(f"Built {len(entries)} entries")

    cases = {
        'generate_str': lambda: generate_str(entries),
        'generate_bytes': lambda: generate_bytes(entries),
        'generate (stream)': lambda: generate(entries, io.BytesIO()),
    }
    for name, func in cases.items():
        best = min(timeit.repeat(func, number=1, repeat=repeat))
        logger.info(f"{name}: {best * 1000:.1f} ms best of {repeat} ({count / best:,.0f} URLs/s)")
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""Module for generating XML sitemaps.

This module converts a sequence of UrlEntry values into a sitemap document
following the sitemaps.org protocol. The document is written to a binary
sink one <url> block at a time, so large sitemaps never have to be held in
memory unless the caller asks for bytes or a string.
"""

import io
import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import BinaryIO, Iterable, Iterator, List, Optional, TypeVar
from xml.sax.saxutils import escape

from sitemap_entry import UrlEntry
from sitemap_errors import EncodingFailure, IoFailure

SITEMAP_NAMESPACE: str = 'http://www.sitemaps.org/schemas/sitemap/0.9'
XML_DECLARATION: str = '<?xml version="1.0" encoding="UTF-8"?>'
DEFAULT_INDENT: int = 4  # Spaces per nesting level

# saxutils.escape already handles &, < and >
_EXTRA_ENTITIES = {"'": '&apos;', '"': '&quot;'}

_PRIORITY_QUANTUM = Decimal('0.1')
# Wide enough to quantize any finite float without InvalidOperation
_PRIORITY_CONTEXT = Context(prec=400)

SinkT = TypeVar('SinkT', bound=BinaryIO)

logger = logging.getLogger(__name__)


def escape_text(text: str) -> str:
    """Escape text for use as XML element content."""
    return escape(text, _EXTRA_ENTITIES)


def format_lastmod(lastmod: datetime) -> str:
    """Format a timestamp as RFC 3339 with second precision in UTC.

    Naive datetimes are taken to be UTC already. Fractional seconds are
    truncated.

    Args:
        lastmod: Timestamp to format.

    Returns:
        String such as '2020-12-05T12:30:00Z'.

    Raises:
        OverflowError: If converting an aware timestamp to UTC leaves the
            datetime range, e.g. 9999-12-31T23:00-05:00. UrlEntry rejects
            such values on construction.
    """
    if lastmod.tzinfo is None:
        lastmod = lastmod.replace(tzinfo=timezone.utc)
    utc = lastmod.astimezone(timezone.utc).replace(microsecond=0, tzinfo=None)
    return f'{utc.isoformat()}Z'


def format_priority(priority: float) -> str:
    """Format a priority with exactly one fractional digit.

    Rounds half up on the shortest decimal representation of the value,
    so 0.45 gives '0.5' and 0.25 gives '0.3'. Values outside 0.0-1.0 are
    formatted as given.

    Args:
        priority: Priority to format.

    Returns:
        String such as '0.8'.
    """
    priority = float(priority)
    if not math.isfinite(priority):
        return str(priority)
    value = Decimal(repr(priority)).quantize(
        _PRIORITY_QUANTUM, rounding=ROUND_HALF_UP, context=_PRIORITY_CONTEXT
    )
    return str(value)


def _render_url(entry: UrlEntry, indent: int) -> str:
    """Render one <url> block, including its leading newline."""
    outer = '\n' + ' ' * indent
    inner = '\n' + ' ' * (indent * 2)

    parts = [outer, '<url>']
    parts += [inner, '<loc>', escape_text(entry.loc), '</loc>']
    if entry.lastmod is not None:
        parts += [inner, '<lastmod>', format_lastmod(entry.lastmod), '</lastmod>']
    if entry.priority is not None:
        parts += [inner, '<priority>', format_priority(entry.priority), '</priority>']
    if entry.changefreq is not None:
        # Tokens are plain lowercase ASCII, nothing to escape
        parts += [inner, '<changefreq>', entry.changefreq.value, '</changefreq>']
    parts += [outer, '</url>']
    return ''.join(parts)


def _write(sink: BinaryIO, text: str, written: int) -> None:
    try:
        data = text.encode('utf-8')
    except UnicodeError as e:
        logger.error(f"Could not encode sitemap output as UTF-8 after {written} URLs: {e}")
        raise EncodingFailure(f"sitemap output is not valid UTF-8: {e}") from e

    # Raw streams may accept only part of the buffer per call
    view = memoryview(data)
    while view:
        try:
            count = sink.write(view)
        except (OSError, ValueError) as e:
            # ValueError is what closed file objects raise on write
            logger.warning(f"Sitemap write aborted after {written} URLs: {e}")
            raise IoFailure(f"could not write sitemap: {e}") from e
        if not count:
            logger.warning(f"Sitemap write aborted after {written} URLs: sink accepted no data")
            raise IoFailure(
                f"could not write sitemap: sink accepted no data ({len(view)} bytes pending)"
            )
        view = view[count:]


def generate(entries: Iterable[UrlEntry], sink: SinkT, indent: int = DEFAULT_INDENT) -> SinkT:
    """Write a sitemap document for the given entries to a binary sink.

    Entries are written in input order, one <url> block at a time. If the
    sink fails, generation stops immediately and whatever was already
    written stays in the sink.

    Args:
        entries: Entries to include in the sitemap.
        sink: Writable binary stream such as an open file or io.BytesIO.
        indent: Number of spaces per nesting level.

    Returns:
        The sink, so callers can keep using it.

    Raises:
        IoFailure: If the sink rejects a write.
        EncodingFailure: If an entry cannot be encoded as UTF-8.
    """
    written = 0
    _write(sink, f'{XML_DECLARATION}\n<urlset xmlns="{SITEMAP_NAMESPACE}">', written)
    for entry in entries:
        _write(sink, _render_url(entry, indent), written)
        written += 1
    _write(sink, '\n</urlset>', written)

    logger.debug(f"Generated sitemap with {written} URLs")
    return sink


def generate_bytes(entries: Iterable[UrlEntry], indent: int = DEFAULT_INDENT) -> bytes:
    """Generate a sitemap document as UTF-8 bytes.

    Args:
        entries: Entries to include in the sitemap.
        indent: Number of spaces per nesting level.

    Returns:
        The complete document.
    """
    return generate(entries, io.BytesIO(), indent).getvalue()


def generate_str(entries: Iterable[UrlEntry], indent: int = DEFAULT_INDENT) -> str:
    """Generate a sitemap document as a string.

    Args:
        entries: Entries to include in the sitemap.
        indent: Number of spaces per nesting level.

    Returns:
        The complete document, the UTF-8 decoding of generate_bytes().

    Raises:
        EncodingFailure: If the generated bytes are not valid UTF-8.
    """
    data = generate_bytes(entries, indent)
    try:
        return data.decode('utf-8')
    except UnicodeError as e:
        logger.error(f"Generated sitemap is not valid UTF-8: {e}")
        raise EncodingFailure(f"generated sitemap is not valid UTF-8: {e}") from e


class Sitemap:
    """A list of sitemap entries that can render itself.

    Attributes:
        urls: Entries in output order.
    """

    def __init__(self, urls: Optional[Iterable[UrlEntry]] = None) -> None:
        self.urls: List[UrlEntry] = list(urls) if urls is not None else []

    def add(self, entry: UrlEntry) -> 'Sitemap':
        """Append an entry and return the sitemap for chaining."""
        self.urls.append(entry)
        return self

    def __len__(self) -> int:
        return len(self.urls)

    def __iter__(self) -> Iterator[UrlEntry]:
        return iter(self.urls)

    def generate(self, sink: SinkT, indent: int = DEFAULT_INDENT) -> SinkT:
        return generate(self.urls, sink, indent)

    def to_bytes(self, indent: int = DEFAULT_INDENT) -> bytes:
        return generate_bytes(self.urls, indent)

    def to_str(self, indent: int = DEFAULT_INDENT) -> str:
        return generate_str(self.urls, indent)

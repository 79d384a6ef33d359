"""Module for validating and canonicalizing sitemap locations.

A sitemap <loc> must be an absolute URL: a scheme followed by a host.
This module turns caller-supplied URL strings into the canonical form
embedded in the sitemap:
- Lowercase scheme and host
- Default port (80 for http, 443 for https) removed
- Empty path replaced by "/"
- Userinfo, path, query and fragment kept verbatim
"""

import ipaddress
import logging
import re
from urllib.parse import urlsplit, urlunsplit

from sitemap_errors import InvalidLocation

# The sitemap protocol recommends locations shorter than this
MAX_LOCATION_LENGTH: int = 2048

DEFAULT_PORTS = {
    'http': 80,
    'https': 443,
}

# Whitespace, C0 controls, DEL, lone surrogates and XML non-characters
_FORBIDDEN_CHARS = re.compile(r'[\x00-\x20\x7f\ud800-\udfff\ufffe\uffff]')
_SCHEME = re.compile(r'[A-Za-z][A-Za-z0-9+.\-]*')

logger = logging.getLogger(__name__)


def parse_location(url: str) -> str:
    """Validate an absolute URL and return its canonical form.

    Args:
        url: URL to validate.

    Returns:
        Canonical absolute URL string.

    Raises:
        TypeError: If url is not a string.
        InvalidLocation: If url is empty, contains whitespace or control
            characters, or lacks a scheme or host.
    """
    if not isinstance(url, str):
        raise TypeError(f"location must be a str, not {type(url).__name__}")
    if not url:
        raise InvalidLocation("location must not be empty")

    bad_char = _FORBIDDEN_CHARS.search(url)
    if bad_char:
        raise InvalidLocation(
            f"location contains forbidden character {bad_char.group()!r} "
            f"at offset {bad_char.start()}: {url!r}"
        )

    # urlsplit raises ValueError for malformed bracketed (IPv6) hosts
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidLocation(f"location has a malformed host: {url!r}") from e

    if not parsed.scheme or not _SCHEME.fullmatch(parsed.scheme):
        raise InvalidLocation(f"location has no scheme: {url!r}")
    if not hostname:
        raise InvalidLocation(f"location has no host: {url!r}")

    # Older urlsplit releases do not check what is inside the brackets
    if '[' in parsed.netloc.rpartition('@')[2]:
        try:
            ipaddress.IPv6Address(hostname.partition('%')[0])
        except ValueError as e:
            raise InvalidLocation(f"location has a malformed IPv6 host: {url!r}") from e

    try:
        port = parsed.port
    except ValueError as e:
        raise InvalidLocation(f"location has an invalid port: {url!r}") from e

    scheme = parsed.scheme.lower()

    # hostname is already lowercased and stripped of IPv6 brackets
    host = hostname
    if ':' in host:
        host = f'[{host}]'
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        host = f'{host}:{port}'

    # Userinfo is case-sensitive, keep it as given
    netloc = parsed.netloc
    if '@' in netloc:
        host = netloc.rpartition('@')[0] + '@' + host

    path = parsed.path or '/'

    canonical = urlunsplit((scheme, host, path, parsed.query, parsed.fragment))

    if len(canonical) >= MAX_LOCATION_LENGTH:
        logger.warning(
            f"Location is {len(canonical)} characters long, sitemap consumers "
            f"may reject URLs of {MAX_LOCATION_LENGTH} characters or more: {canonical[:80]}..."
        )

    return canonical


def is_absolute_url(url: str) -> bool:
    """Check whether a string is accepted as a sitemap location.

    Args:
        url: URL to check.

    Returns:
        True if parse_location accepts the URL, False otherwise.
    """
    try:
        parse_location(url)
    except (TypeError, InvalidLocation):
        return False
    return True

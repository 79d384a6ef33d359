"""Module defining sitemap entries.

A sitemap is a list of UrlEntry values, one per page. Each entry holds the
page location and, optionally, its last modification time, how often it is
expected to change, and its priority relative to other pages of the site.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from sitemap_errors import InvalidChangeFreq, MissingFieldError
from url_normalizer import parse_location


class ChangeFreq(Enum):
    """How frequently a page is likely to change.

    This is a hint for search engines and may not correlate with how often
    they actually crawl the page.
    """

    ALWAYS = 'always'
    HOURLY = 'hourly'
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'
    NEVER = 'never'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: Union[str, 'ChangeFreq']) -> 'ChangeFreq':
        """Look up a change frequency by its token.

        Args:
            token: Token such as 'daily' (case-insensitive), or a ChangeFreq.

        Returns:
            The matching ChangeFreq member.

        Raises:
            InvalidChangeFreq: If the token is not a known change frequency.
        """
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            try:
                return cls(token.strip().lower())
            except ValueError:
                pass
        raise InvalidChangeFreq(
            f"unknown change frequency {token!r}, expected one of: "
            + ', '.join(freq.value for freq in cls)
        )


@dataclass(frozen=True)
class UrlEntry:
    """A single <url> record of a sitemap.

    Attributes:
        loc: Absolute URL of the page, canonicalized on construction.
        lastmod: Last modification time. Naive values are taken as UTC.
        changefreq: How frequently the page is likely to change.
        priority: Priority relative to other pages of the site. The protocol
            range is 0.0 to 1.0 but the value is not clamped.
    """

    loc: str
    lastmod: Optional[datetime] = None
    changefreq: Optional[ChangeFreq] = None
    priority: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'loc', parse_location(self.loc))

        if self.lastmod is not None:
            if not isinstance(self.lastmod, datetime):
                raise TypeError(
                    f"lastmod must be a datetime, not {type(self.lastmod).__name__}"
                )
            if self.lastmod.tzinfo is not None:
                try:
                    self.lastmod.astimezone(timezone.utc)
                except OverflowError as e:
                    raise ValueError(
                        f"lastmod {self.lastmod.isoformat()} is out of range in UTC"
                    ) from e

        if self.changefreq is not None:
            object.__setattr__(self, 'changefreq', ChangeFreq.parse(self.changefreq))

        if self.priority is not None:
            if isinstance(self.priority, bool) or not isinstance(self.priority, (int, float)):
                raise TypeError(
                    f"priority must be a number, not {type(self.priority).__name__}"
                )
            object.__setattr__(self, 'priority', float(self.priority))


class UrlEntryBuilder:
    """Chainable builder for UrlEntry.

    Example:
        entry = UrlEntryBuilder().loc('https://example.com/').priority(0.8).build()
    """

    def __init__(self) -> None:
        self._loc: Optional[str] = None
        self._lastmod: Optional[datetime] = None
        self._changefreq: Optional[ChangeFreq] = None
        self._priority: Optional[float] = None

    def loc(self, loc: str) -> 'UrlEntryBuilder':
        self._loc = loc
        return self

    def lastmod(self, lastmod: Optional[datetime]) -> 'UrlEntryBuilder':
        self._lastmod = lastmod
        return self

    def changefreq(self, changefreq: Optional[Union[ChangeFreq, str]]) -> 'UrlEntryBuilder':
        self._changefreq = changefreq
        return self

    def priority(self, priority: Optional[float]) -> 'UrlEntryBuilder':
        self._priority = priority
        return self

    def build(self) -> UrlEntry:
        """Create the entry from the fields set so far.

        Raises:
            MissingFieldError: If no location was set.
        """
        if self._loc is None:
            raise MissingFieldError("`loc` must be set before building a UrlEntry")
        return UrlEntry(
            loc=self._loc,
            lastmod=self._lastmod,
            changefreq=self._changefreq,
            priority=self._priority,
        )

"""Exceptions raised while building sitemap entries and writing sitemaps."""


class SitemapError(Exception):
    """Base class for all sitemap errors."""


class IoFailure(SitemapError):
    """The output sink rejected a write; generation was abandoned mid-stream."""


class EncodingFailure(SitemapError):
    """Generated output could not be converted to or from UTF-8."""


class InvalidLocation(SitemapError, ValueError):
    """A location is not a usable absolute URL."""


class InvalidChangeFreq(SitemapError, ValueError):
    """A change frequency token is not one of the seven protocol values."""


class MissingFieldError(SitemapError):
    """A builder was asked to build without a required field."""

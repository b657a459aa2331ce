# src/idx_wrapper/utils/url_utils.py
import logging
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)


class UrlUtils:
    """A collection of static methods for URL parsing and manipulation."""

    @staticmethod
    def get_base_url(url: str) -> str:
        """
        Returns the resolution base for a requested site: the URL itself with
        a single trailing slash removed ('http://example.com/' -> 'http://example.com').
        """
        if url.endswith('/'):
            return url[:-1]
        return url

    @staticmethod
    def get_origin(url: str) -> str:
        """
        Extracts the origin (scheme + netloc) of a URL, the base for relative
        url() references in stylesheets.
        (e.g., 'http://example.com/homes/search.html' -> 'http://example.com')
        Falls back to the trailing-slash-stripped URL when it has no host.
        """
        try:
            parsed = urlparse(url)
        except ValueError:
            logger.debug("Could not parse '%s' for its origin.", url)
            return UrlUtils.get_base_url(url)
        if not parsed.scheme or not parsed.netloc:
            return UrlUtils.get_base_url(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    @staticmethod
    def get_absolute_url(path: str, base: str) -> str:
        """
        Returns `path` in absolute terms, using `base` when it is relative.
        An already absolute path ignores the base. Values that cannot be
        parsed as a URL are returned as they are.
        """
        try:
            return urljoin(base, path)
        except ValueError:
            logger.debug("Could not resolve '%s' against '%s'; leaving it unchanged.", path, base)
            return path

    @staticmethod
    def split_host_and_path(url: str) -> tuple[str, str]:
        """Returns the (netloc, path) pair of an absolute URL, or ('', '') if it won't parse."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return '', ''
        return parsed.netloc, parsed.path

# src/idx_wrapper/dom/conflicts.py
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from idx_wrapper.managers.config_manager import config_manager
from idx_wrapper.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

DEFAULT_HOST_PATTERN = r"idxhome\.com$"
DEFAULT_FILE_PATTERN = r"bundle\.js"

# <script type="..."> values that mark the body as JavaScript
JAVASCRIPT_TYPES = {
    "",
    "module",
    "text/javascript",
    "application/javascript",
    "application/x-javascript",
    "text/ecmascript",
    "application/ecmascript",
}


class ConflictMitigator:
    """
    Removes client-site scripts that are known to collide with the IDX embed.

    The vendor host and bundle filename patterns default to the settings.json
    values under 'conflicts'.
    """

    def __init__(self, host_pattern: Optional[str] = None, file_pattern: Optional[str] = None):
        self.host_regex = re.compile(
            host_pattern or config_manager.get_nested("conflicts.host_pattern", DEFAULT_HOST_PATTERN)
        )
        self.file_regex = re.compile(
            file_pattern or config_manager.get_nested("conflicts.file_pattern", DEFAULT_FILE_PATTERN)
        )

    def is_known_conflict(self, script: Tag, base: str) -> bool:
        """True when the script's source lives on the vendor host and is a bundle file."""
        src = script.get('src')
        if src is None:
            return False
        host, path = UrlUtils.split_host_and_path(UrlUtils.get_absolute_url(src, base))
        return bool(self.host_regex.search(host) and self.file_regex.search(path))

    def remove_known_conflicts(self, soup: BeautifulSoup, base: str) -> int:
        removed = 0
        for script in soup.find_all('script', src=True):
            if self.is_known_conflict(script, base):
                logger.debug("Removing conflicting script %s", script.get('src'))
                script.decompose()
                removed += 1
        return removed

    @staticmethod
    def remove_all_scripts(soup: BeautifulSoup) -> int:
        scripts = soup.find_all('script')
        for script in scripts:
            script.decompose()
        return len(scripts)

    @staticmethod
    def replace_dollar_signs(soup: BeautifulSoup) -> int:
        """
        Replaces '$' with 'jQuery' in the body of inline JavaScript, so the
        page's code keeps working next to the IDX copy of jQuery.
        Data blocks (e.g. application/ld+json) are left alone.
        """
        rewritten = 0
        for script in soup.find_all('script'):
            if script.get('src') is not None:
                continue
            if script.get('type', '').strip().lower() not in JAVASCRIPT_TYPES:
                continue
            body = script.string
            if not body or '$' not in body:
                continue
            script.string = type(body)(str(body).replace('$', 'jQuery'))
            rewritten += 1
        return rewritten

    def mitigate(
            self,
            soup: BeautifulSoup,
            base: str,
            remove_conflicts: bool = False,
            remove_scripts: bool = False
    ) -> int:
        """
        Applies the requested script removals. Both flags may be set; removing
        all scripts covers the known conflicts too.

        Returns:
            int: The number of removed <script> elements.
        """
        removed = 0
        if remove_conflicts:
            removed += self.remove_known_conflicts(soup, base)
        if remove_scripts:
            removed += self.remove_all_scripts(soup)
        if removed:
            logger.info("Removed %d script(s) from the wrapper", removed)
        return removed

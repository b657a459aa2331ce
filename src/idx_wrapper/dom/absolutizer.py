# src/idx_wrapper/dom/absolutizer.py
import logging
import re
from typing import List, Tuple

from bs4 import BeautifulSoup

from idx_wrapper.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

# (tag, attribute) pairs that carry a URL the host page must be able to load
URL_ATTRIBUTES: Tuple[Tuple[str, str], ...] = (
    ('a', 'href'),
    ('img', 'src'),
    ('link', 'href'),
    ('script', 'src'),
)

# url(...) references whose target is not already absolute.
# Group 1 is the (optional) quote, group 2 the relative path.
CSS_RELATIVE_URL = re.compile(
    r"""url\(\s*(['"]?)(?!\s*(?://|https?:|data:))([^'")]+?)\1\s*\)""",
    re.IGNORECASE,
)


def absolutize_attribute(soup: BeautifulSoup, tag_name: str, attribute: str, base: str) -> int:
    """
    Goes through each element with the given tag name and makes the indicated
    attribute an absolute URL.

    Args:
        soup (BeautifulSoup): The document being wrapped.
        tag_name (str): e.g. 'a'.
        attribute (str): e.g. 'href'.
        base (str): The base URL used when the value on the element is relative.

    Returns:
        int: The number of attribute values that changed.
    """
    changed = 0
    for element in soup.find_all(tag_name):
        value = element.get(attribute)

        # Tags might not have the attribute set; nothing to change then.
        if value is None:
            continue

        # Anchor links stay on the page they are embedded in.
        if value.startswith('#'):
            continue

        absolute = UrlUtils.get_absolute_url(value, base)
        if absolute != value:
            element[attribute] = absolute
            changed += 1
    return changed


def absolutize_urls(soup: BeautifulSoup, base: str) -> int:
    """Runs `absolutize_attribute` for every configured (tag, attribute) pair."""
    changed = 0
    for tag_name, attribute in URL_ATTRIBUTES:
        changed += absolutize_attribute(soup, tag_name, attribute, base)
    logger.debug("Absolutized %d URL attributes against %s", changed, base)
    return changed


def find_relative_css_urls(css_text: str) -> List[re.Match]:
    """Returns every url(...) reference in `css_text` that still needs a base."""
    return list(CSS_RELATIVE_URL.finditer(css_text))


def rewrite_css_urls(css_text: str, origin: str) -> str:
    """
    Rewrites relative url(...) references to url('{origin}/{path}').
    Quotes around the original path are dropped; absolute references are untouched.
    """
    def _replace(match: re.Match) -> str:
        relative_path = match.group(2).strip().lstrip('/')
        return f"url('{origin}/{relative_path}')"

    return CSS_RELATIVE_URL.sub(_replace, css_text)


def absolutize_style_urls(soup: BeautifulSoup, origin: str) -> int:
    """
    Replaces relative @imports and other url()s inside <style> tags.
    They are rooted at `origin` (scheme + host), not at the page URL.

    Returns:
        int: The number of <style> blocks that were rewritten.
    """
    rewritten = 0
    for style in soup.find_all('style'):
        css_text = style.string
        if not css_text or not find_relative_css_urls(css_text):
            continue
        # Keep the string class (Stylesheet) so the CSS is not entity-escaped
        style.string = type(css_text)(rewrite_css_urls(str(css_text), origin))
        rewritten += 1
    return rewritten

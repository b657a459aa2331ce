# src/idx_wrapper/dom/loader.py
import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def load_document(html: str) -> BeautifulSoup:
    """
    Parses raw HTML into a mutable BeautifulSoup tree.

    Args:
        html (str): The raw HTML string as fetched.

    Returns:
        BeautifulSoup: The document tree owned by the current wrap.
    """
    # Basic cleanup of potentially dirty HTML (e.g., BOM)
    clean_html = (html or "").replace('\ufeff', '')
    return BeautifulSoup(clean_html, 'html.parser')


def replace_title(soup: BeautifulSoup, title: str) -> None:
    """Sets the text of every <title> to the requested title."""
    for tag in soup.find_all('title'):
        tag.string = title or ""


def remove_base_tags(soup: BeautifulSoup) -> int:
    """Removes every <base> tag; relative URLs are resolved by us, not the browser."""
    tags = soup.find_all('base')
    for tag in tags:
        tag.decompose()
    return len(tags)


def remove_headings(soup: BeautifulSoup) -> int:
    """Removes every <h1>; the embedded listing page brings its own."""
    tags = soup.find_all('h1')
    for tag in tags:
        # A nested <h1> goes away with its parent
        if not tag.decomposed:
            tag.decompose()
    return len(tags)


def replace_document_with_text(soup: BeautifulSoup, message: str) -> None:
    """Drops the whole tree and leaves a single plain-text notice in its place."""
    soup.clear()
    soup.append(message)


def serialize_document(soup: BeautifulSoup) -> str:
    """Renders the (mutated) tree back into an HTML string."""
    return str(soup)

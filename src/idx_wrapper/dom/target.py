# src/idx_wrapper/dom/target.py
import logging
from typing import Callable, Dict, Optional
from urllib.parse import unquote

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from idx_wrapper.dom.loader import replace_document_with_text
from idx_wrapper.model import TargetKind, TargetSpec

logger = logging.getLogger(__name__)

START_MARKER_ID = "idxStart"
STOP_MARKER_ID = "idxStop"

NO_TARGET_MESSAGE = "ERROR: no target was provided"
TARGET_NOT_FOUND_MESSAGE = (
    "Error: Unable to add IDX start and stop tags. Target not found. "
    "Please check the target is valid"
)


def _by_id(soup: BeautifulSoup, value: str) -> Optional[Tag]:
    return soup.find(id=value)


def _by_element(soup: BeautifulSoup, value: str) -> Optional[Tag]:
    # html.parser lowercases tag names
    return soup.find(value.lower())


def _by_class(soup: BeautifulSoup, value: str) -> Optional[Tag]:
    return soup.find(class_=value)


def _by_selector(soup: BeautifulSoup, value: str) -> Optional[Tag]:
    selector = unquote(value)
    try:
        return soup.select_one(selector)
    except SelectorSyntaxError as e:
        logger.warning("Invalid target selector '%s': %s", selector, e)
        return None


RESOLVERS: Dict[TargetKind, Callable[[BeautifulSoup, str], Optional[Tag]]] = {
    TargetKind.ID: _by_id,
    TargetKind.ELEMENT: _by_element,
    TargetKind.CLASS: _by_class,
    TargetKind.SELECTOR: _by_selector,
}


def find_target(soup: BeautifulSoup, spec: Optional[TargetSpec]) -> Optional[Tag]:
    """
    Resolves the first element addressed by `spec`. Only the first match is
    used, even when a class or selector matches several elements.
    """
    if spec is None or not spec.value:
        return None
    return RESOLVERS[spec.kind](soup, spec.value)


def locate_target(soup: BeautifulSoup, spec: Optional[TargetSpec]) -> Optional[Tag]:
    """
    Finds the target element. When there is none, the whole document is
    replaced by a plain-text error notice and None is returned.
    """
    if spec is None:
        logger.warning("No (valid) target kind was provided.")
        replace_document_with_text(soup, NO_TARGET_MESSAGE)
        return None

    target = find_target(soup, spec)
    if target is None:
        logger.warning("Target %s=%r not found in document.", spec.kind.value, spec.value)
        replace_document_with_text(soup, TARGET_NOT_FOUND_MESSAGE)
    return target


def inject_markers(soup: BeautifulSoup, target: Optional[Tag]) -> bool:
    """
    Replaces the target's contents with the IDX start and stop markers.

    Returns:
        bool: False when there was no target to inject into.
    """
    if target is None:
        return False
    target.clear()
    target.append(soup.new_tag('div', id=START_MARKER_ID))
    target.append(soup.new_tag('div', id=STOP_MARKER_ID))
    return True

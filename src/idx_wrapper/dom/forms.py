# src/idx_wrapper/dom/forms.py
import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

FORM_REPLACEMENT_ID = "idxFormReplacementDiv"
FORM_REPLACEMENT_CLASS = "form"


def unwrap_enclosing_form(soup: BeautifulSoup, target: Optional[Tag]) -> bool:
    """
    Form tags that surround our content break functionality such as the
    Advanced Search. When the target sits inside a <form>, a new container
    div is prepended to the form's parent and all of the form's children are
    moved into it, in order. The <form> itself stays behind, empty.

    Args:
        soup (BeautifulSoup): The document being wrapped (used to create the container).
        target (Optional[Tag]): The element that received the IDX markers.

    Returns:
        bool: True if an enclosing form was unwrapped.
    """
    if target is None:
        return False

    form = target.find_parent('form')
    if form is None or form.parent is None:
        return False

    container = soup.new_tag(
        'div', attrs={'id': FORM_REPLACEMENT_ID, 'class': FORM_REPLACEMENT_CLASS}
    )
    form.parent.insert(0, container)

    for child in list(form.contents):
        container.append(child.extract())

    logger.info("Enclosing form tag detected. Moved its children into #%s.", FORM_REPLACEMENT_ID)
    return True

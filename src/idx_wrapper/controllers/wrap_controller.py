# src/idx_wrapper/controllers/wrap_controller.py
import logging
from typing import Callable, Dict, Optional

from idx_wrapper.dom.absolutizer import absolutize_style_urls, absolutize_urls
from idx_wrapper.dom.conflicts import ConflictMitigator
from idx_wrapper.dom.forms import unwrap_enclosing_form
from idx_wrapper.dom.loader import (
    load_document,
    remove_base_tags,
    remove_headings,
    replace_title,
    serialize_document,
)
from idx_wrapper.dom.target import inject_markers, locate_target
from idx_wrapper.managers.config_manager import config_manager
from idx_wrapper.model import FetchResult, WrapFailure, WrapOutcome, WrapRequest
from idx_wrapper.services.page_fetch_service import PageFetchService
from idx_wrapper.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


class WrapController:
    """
    Turns a client web page into an IDX wrapper.

    Fetches the requested site and runs the rewrite pipeline over it:
    title/base/h1 cleanup, URL absolutization, script conflict mitigation,
    IDX marker injection and form unwrapping.
    """

    def __init__(
            self,
            config: Optional[Dict] = None,
            fetcher_factory: Optional[Callable[[Dict], PageFetchService]] = None,
            mitigator: Optional[ConflictMitigator] = None
    ):
        self.config = config if config is not None else config_manager.get_all()
        self.fetcher_factory = fetcher_factory or PageFetchService
        self.mitigator = mitigator or ConflictMitigator()

    async def wrap(self, request: WrapRequest) -> WrapOutcome:
        """
        Entry point: returns the wrapper HTML, or a WrapFailure when the site
        did not answer with a 2xx status.
        """
        async with self.fetcher_factory(self.config) as fetcher:
            result: FetchResult = await fetcher.fetch(request.site)

        if not result.success:
            if result.error:
                logger.warning("Fetching %s failed: %s", request.site, result.error)
            else:
                logger.warning("Fetching %s returned HTTP %s", request.site, result.status_code)
            return WrapFailure(site_requested=request.site)

        logger.info(
            "Fetched %s (HTTP %s, %.2fs, final URL %s)",
            request.site, result.status_code, result.elapsed_time, result.final_url or request.site
        )
        return self.rewrite(result.body or "", request)

    def rewrite(self, html: str, request: WrapRequest) -> str:
        """Runs the synchronous rewrite pipeline over already fetched HTML."""
        # Handle a possible trailing slash in the source url
        base = UrlUtils.get_base_url(request.site)
        # Stylesheet url()s are rooted at the site origin
        origin = UrlUtils.get_origin(request.site)

        soup = load_document(html)

        # 1. Title, <base> and <h1> cleanup
        replace_title(soup, request.title)
        remove_base_tags(soup)
        if not request.h1_ignore:
            remove_headings(soup)

        # 2. Relative to absolute links, including url()s in <style>
        absolutize_urls(soup, base)
        absolutize_style_urls(soup, origin)

        # 3. Known script conflicts / all scripts
        self.mitigator.mitigate(
            soup, base,
            remove_conflicts=request.remove_conflicts,
            remove_scripts=request.remove_scripts
        )

        # 4. IDX start and stop markers
        target = locate_target(soup, request.target_spec())
        inject_markers(soup, target)

        # 5. '$' -> 'jQuery' in what is left of the inline scripts
        if target is not None and self.config.get('conflicts', {}).get('replace_dollar_sign', True):
            self.mitigator.replace_dollar_signs(soup)

        # 6. A form around the target breaks the IDX search widgets
        unwrap_enclosing_form(soup, target)

        return serialize_document(soup)

# src/idx_wrapper/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package paths.
    """

    @staticmethod
    def get_package_root() -> Path:
        """
        Returns the absolute path of the installed 'idx_wrapper' package.
        (e.g., /path/to/src/idx_wrapper)
        """
        return Path(__file__).resolve().parent.parent

    @staticmethod
    def get_settings_file() -> Path:
        """Returns the path to the bundled settings.json file."""
        return PathUtils.get_package_root() / "settings.json"

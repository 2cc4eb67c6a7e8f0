from .file_utils import collect_profile_csvs, list_filenames, parse_rpm
from .logging import LogManager
from .validation import GroupValidator, ImageValidator

__all__ = [
    "GroupValidator",
    "ImageValidator",
    "LogManager",
    "collect_profile_csvs",
    "list_filenames",
    "parse_rpm",
]

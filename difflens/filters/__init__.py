"""Path filters: extension globs plus size and binary checks."""

from .binary import exceeds_size, file_category, format_file_size, is_binary
from .extensions import matches_extension_filter, parse_extension_filter
from .models import BinaryDetection, ExclusionRule

__all__ = [
    "BinaryDetection",
    "ExclusionRule",
    "parse_extension_filter",
    "matches_extension_filter",
    "is_binary",
    "exceeds_size",
    "file_category",
    "format_file_size",
]

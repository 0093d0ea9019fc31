import logging
from pathlib import PurePosixPath

from difflens.filters.models import BinaryDetection, ExclusionRule

logger = logging.getLogger(__name__)

SAMPLE_BYTES = 512

_CATEGORIES: dict[str, frozenset[str]] = {
    "Images": frozenset(
        {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif", ".webp", ".ico", ".raw"}
    ),
    "Videos": frozenset(
        {".mp4", ".avi", ".mov", ".wmv", ".flv", ".webm", ".mkv", ".m4v", ".3gp"}
    ),
    "Audio": frozenset({".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a"}),
    "Archives": frozenset({".zip", ".rar", ".7z", ".tar", ".gz", ".bz2", ".xz"}),
    "Executables": frozenset({".exe", ".dll", ".so", ".dylib", ".app", ".deb", ".rpm"}),
    "Fonts": frozenset({".ttf", ".otf", ".woff", ".woff2", ".eot"}),
    "Documents": frozenset({".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx"}),
}

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def parse_extension_list(text: str) -> set[str]:
    """``"png, .JPG"`` -> ``{".png", ".jpg"}``"""
    extensions = set()
    for token in text.split(","):
        token = token.strip().lower()
        if token:
            extensions.add(token if token.startswith(".") else f".{token}")
    return extensions


def _suffix(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).suffix.lower()


def content_binary_ratio(content: str) -> float:
    sample = content.encode("utf-8", errors="surrogateescape")[:SAMPLE_BYTES]
    if not sample:
        return 0.0
    flagged = sum(1 for byte in sample if byte > 127 or byte == 0)
    return flagged / len(sample)


def is_binary(path: str, content: str | None, rule: ExclusionRule) -> bool:
    """
    Decide whether a file should be treated as binary.

    The text extension allow list always wins. Otherwise the rule's detection
    method applies: the binary extension list, the share of NUL and non-ASCII
    bytes in the first 512 bytes of content, or the extension list first and
    the content check after it.
    """
    if not rule.exclude_binary_files:
        return False

    suffix = _suffix(path)
    if suffix in parse_extension_list(rule.text_extensions):
        return False

    by_extension = suffix in parse_extension_list(rule.binary_extensions)
    if rule.binary_detection is BinaryDetection.EXTENSION:
        return by_extension
    if rule.binary_detection is BinaryDetection.BOTH and by_extension:
        return True

    if content is None:
        return False
    ratio = content_binary_ratio(content)
    if ratio > rule.binary_content_threshold:
        logger.debug("%s looks binary (%.1f%% non-ASCII)", path, ratio * 100)
        return True
    return False


def content_size(content: str | None) -> int:
    if content is None:
        return 0
    return len(content.encode("utf-8", errors="surrogateescape"))


def exceeds_size(content: str | None, max_file_size: int) -> bool:
    if max_file_size <= 0:
        return False
    return content_size(content) > max_file_size


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_UNITS) - 1:
        value /= 1024
        index += 1
    if index == 0:
        return f"{size} B"
    return f"{value:.1f} {_UNITS[index]}"


def file_category(path: str) -> str:
    suffix = _suffix(path)
    for category, extensions in _CATEGORIES.items():
        if suffix in extensions:
            return category
    return "Other"

import re
import unicodedata

_NON_WORD = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify(text: str) -> str:
    """
    Derive a URL slug from free text.

    "Hello, World!" -> "hello-world". Accents are folded to ASCII; anything
    else that is not a word character, space or hyphen is dropped.
    """
    normalized = unicodedata.normalize("NFKD", text.lower())
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")
    cleaned = _NON_WORD.sub("", ascii_only).replace("_", "-").strip()
    return _DASHES.sub("-", _WHITESPACE.sub("-", cleaned)).strip("-")


def safe_filename(name: str) -> str:
    """Replace anything outside [A-Za-z0-9_.-] with underscores."""
    return re.sub(r"[^\w.\-]+", "_", name) or "file"

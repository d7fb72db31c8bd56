import re
from urllib.parse import unquote

# ASCII word characters only, so slugs stay URL-safe without escaping
_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def encode(question: str) -> str:
    """
    Converts a free-text question into its slug.

    Example: "Hello, World!" -> "hello-world"

    Lossy and not injective: questions that differ only in case or
    punctuation share a slug, and the registry keeps the first one.
    """
    text = _DISALLOWED.sub("", question.lower()).strip()
    return _WHITESPACE.sub("-", text)


def decode(slug: str) -> str:
    """
    Rebuilds a display question from a slug.
    Case and punctuation are gone for good, so this is only for titles
    and for prompting on a lookup miss, never for deriving cache keys.
    """
    return unquote(slug).replace("-", " ")

import html
import re

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_BULLET = re.compile(r"^\s*\*\s+")


def _format_line(line: str) -> tuple[str, bool]:
    """Returns (html, is_list_item) for a single line of generated text."""
    line = _BOLD.sub(r"<strong>\1</strong>", html.escape(line, quote=False))

    if _BULLET.match(line):
        return f"<li>{_BULLET.sub('', line, count=1)}</li>", True
    return line, False


def format_answer(raw: str | None) -> str:
    """
    Converts generated markdown-ish text into an HTML fragment.

    - **bold** -> <strong>bold</strong>
    - lines starting with "* " -> <li>
    - any list item present: everything goes inside one <ul>, other
      lines as <p> between the items
    - otherwise every line becomes its own <p>

    Text is HTML-escaped first, so the output is safe to inline in a page.
    """
    if not raw:
        return ""

    lines = [_format_line(line) for line in raw.split("\n")]
    has_list_items = any(is_item for _, is_item in lines)

    if has_list_items:
        body = "".join(text if is_item else f"<p>{text}</p>" for text, is_item in lines)
        return f"<ul>{body}</ul>"

    return "".join(f"<p>{text}</p>" for text, _ in lines)

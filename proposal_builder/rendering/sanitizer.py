"""Allow-list sanitizer for section rich-text content.

Section content is authored in a rich-text editor and stored verbatim. Before
it reaches a rendered page it passes through :func:`sanitize_html`, which
keeps only the formatting markup such an editor produces:

* elements that can execute or embed foreign content (``script``, ``style``,
  ``iframe``, forms ...) are removed together with everything inside them;
* any other element outside :data:`ALLOWED_TAGS` is unwrapped, keeping its
  text and allowed children;
* attributes are filtered per tag, link and image URLs must use an allowed
  scheme, and inline ``style`` keeps typographic properties only.

Example
-------
>>> from proposal_builder.rendering.sanitizer import sanitize_html
>>> sanitize_html('<p onclick="x()">Hi<script>alert(1)</script></p>')
'<p>Hi</p>'
"""

from __future__ import annotations

import re
import typing as typ
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

ALLOWED_TAGS = frozenset(
    {
        "a",
        "b",
        "blockquote",
        "br",
        "code",
        "div",
        "em",
        "font",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "i",
        "img",
        "li",
        "ol",
        "p",
        "pre",
        "s",
        "span",
        "strike",
        "strong",
        "sub",
        "sup",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "u",
        "ul",
    }
)
DROPPED_TAGS = (
    "base",
    "button",
    "embed",
    "form",
    "iframe",
    "input",
    "link",
    "math",
    "meta",
    "noscript",
    "object",
    "script",
    "select",
    "style",
    "svg",
    "template",
    "textarea",
)
GLOBAL_ATTRIBUTES = frozenset({"class", "style", "title"})
TAG_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "target"}),
    "font": frozenset({"color", "face", "size"}),
    "img": frozenset({"alt", "height", "src", "width"}),
    "ol": frozenset({"start"}),
    "td": frozenset({"colspan", "rowspan"}),
    "th": frozenset({"colspan", "rowspan"}),
}
URL_ATTRIBUTES: dict[str, frozenset[str]] = {
    "href": frozenset({"http", "https", "mailto"}),
    "src": frozenset({"http", "https"}),
}
STYLE_PROPERTIES = frozenset(
    {
        "background-color",
        "color",
        "font-family",
        "font-size",
        "font-style",
        "font-weight",
        "text-align",
        "text-decoration",
    }
)
_FORBIDDEN_STYLE_TOKENS = ("url(", "expression(", "javascript:", "@import", "\\")
# Colours, lengths, keywords and font stacks; no declaration or rule breaks.
_CSS_VALUE = re.compile(r"[\w #.,%'\"()+-]+")
# Characters that could close a quoted CSS url() or start a new declaration.
_CSS_URL_BREAKERS = re.compile(r"[\x00-\x20\x7f'\"()\\;<>]")
_URL_NOISE = re.compile(r"[\x00-\x20\x7f]+")
_UNSAFE_NODES = (CData, Comment, Declaration, Doctype, ProcessingInstruction)


def _safe_url(value: str, schemes: frozenset[str]) -> str | None:
    """Return ``value`` when its scheme is allowed (or it is relative)."""
    compact = _URL_NOISE.sub("", value)
    scheme = urlsplit(compact).scheme.lower()
    if scheme and scheme not in schemes:
        return None
    return value.strip()


def safe_css_value(value: object) -> str | None:
    """Return ``value`` as a CSS value, or ``None`` when it could escape it.

    Values may hold colours, lengths, keywords, font stacks and simple
    functions such as ``rgb(...)``. Anything carrying ``;``, ``:``, braces,
    backslashes, angle brackets, line breaks or a ``url(``/``expression(``
    call is rejected.

    Examples
    --------
    >>> safe_css_value("'Times New Roman', serif")
    "'Times New Roman', serif"
    >>> safe_css_value("red; background: url(x)") is None
    True
    """
    text = str(value).strip()
    if not text or _CSS_VALUE.fullmatch(text) is None:
        return None
    lowered = text.lower()
    if any(token in lowered for token in _FORBIDDEN_STYLE_TOKENS):
        return None
    return text


def safe_css_url(value: str, schemes: frozenset[str]) -> str | None:
    """Return an image URL that is safe inside a quoted CSS ``url('...')``."""
    url = _safe_url(value, schemes)
    if url is None or _CSS_URL_BREAKERS.search(url):
        return None
    return url


def safe_declarations(declarations: typ.Mapping[str, object]) -> str:
    """Join ``declarations`` into a ``style`` value, dropping unsafe values."""
    kept: list[str] = []
    for prop, raw in declarations.items():
        value = safe_css_value(raw)
        if value is not None:
            kept.append(f"{prop}: {value}")
    return "; ".join(kept)


def _safe_style(value: str) -> str | None:
    """Keep only allow-listed declarations from an inline style."""
    kept: dict[str, str] = {}
    for declaration in value.split(";"):
        prop, sep, raw = declaration.partition(":")
        prop = prop.strip().lower()
        raw = raw.strip()
        if not sep or prop not in STYLE_PROPERTIES or not raw:
            continue
        kept[prop] = raw
    return safe_declarations(kept) or None


def _filter_attributes(tag_name: str, attrs: dict[str, object]) -> dict[str, str]:
    allowed = GLOBAL_ATTRIBUTES | TAG_ATTRIBUTES.get(tag_name, frozenset())
    cleaned: dict[str, str] = {}
    for name, raw in attrs.items():
        key = name.lower()
        if key not in allowed:
            continue
        value = " ".join(raw) if isinstance(raw, list) else str(raw)
        if key in URL_ATTRIBUTES:
            value = _safe_url(value, URL_ATTRIBUTES[key])
        elif key == "style":
            value = _safe_style(value)
        if value is not None:
            cleaned[key] = value
    if tag_name == "a" and cleaned.get("target"):
        cleaned["rel"] = "noopener noreferrer"
    return cleaned


def sanitize_html(markup: str) -> str:
    """Return ``markup`` reduced to the allow-listed subset of HTML.

    Parameters
    ----------
    markup : str
        Untrusted HTML fragment, typically a section's stored content.

    Returns
    -------
    str
        Sanitized HTML fragment; an empty string for empty input.
    """
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    while (dropped := soup.find(list(DROPPED_TAGS))) is not None:
        dropped.decompose()
    for node in soup.find_all(string=lambda text: isinstance(text, _UNSAFE_NODES)):
        node.extract()
    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        tag.attrs = _filter_attributes(tag.name, dict(tag.attrs))
    return str(soup)


__all__ = [
    "ALLOWED_TAGS",
    "DROPPED_TAGS",
    "STYLE_PROPERTIES",
    "safe_css_url",
    "safe_css_value",
    "safe_declarations",
    "sanitize_html",
]

"""HTML sanitisation for feed content."""

from urllib.parse import urlsplit

import nh3

ALLOWED_TAGS = frozenset(
    {
        "h3", "h4", "figure", "a", "p", "b", "i", "em", "strong",
        "blockquote", "ul", "ol", "li", "dl", "dt", "dd", "sup", "sub",
    }
)
# "*" replaces nh3's default generic attributes (lang, title) on every tag.
ALLOWED_ATTRIBUTES: dict[str, set[str]] = {"a": {"href"}, "*": set()}
ALLOWED_URL_SCHEMES = frozenset({"http", "https", "mailto"})
LINK_REL = "nofollow noopener noreferrer"
UNSAFE_URL = "#"

# Browsers ignore leading C0 controls and spaces before a URL scheme.
_LEADING_IGNORED = "".join(chr(c) for c in range(0x21))


def safe_url(url: str | None) -> str:
    """Return a link target safe to place in an href.

    Relative URLs and the allowed schemes pass through; anything else,
    such as javascript: or data: URLs, becomes "#".
    """
    if not url:
        return ""
    try:
        scheme = urlsplit(url.lstrip(_LEADING_IGNORED)).scheme.lower()
    except ValueError:
        return UNSAFE_URL
    if scheme and scheme not in ALLOWED_URL_SCHEMES:
        return UNSAFE_URL
    return url


class Sanitizer:
    """Restricts feed markup to a small allow-list of elements.

    Links keep only their href, are marked nofollow and open in a new tab.
    """

    def __init__(
        self,
        tags: frozenset[str] = ALLOWED_TAGS,
        attributes: dict[str, set[str]] | None = None,
        url_schemes: frozenset[str] = ALLOWED_URL_SCHEMES,
    ) -> None:
        self._tags = set(tags)
        self._attributes = attributes if attributes is not None else ALLOWED_ATTRIBUTES
        self._url_schemes = set(url_schemes)

    def sanitize(self, html: str | None) -> str:
        if not html:
            return ""
        return nh3.clean(
            html,
            tags=self._tags,
            attributes=self._attributes,
            url_schemes=self._url_schemes,
            link_rel=LINK_REL,
            set_tag_attribute_values={"a": {"target": "_blank"}},
        ).strip()

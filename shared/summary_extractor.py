"""
Page summary extraction.

Walks the token sequence of a page once, front to back, and reconciles the
metadata sources found in its head into a single PageSummary:

- the <title> element
- Open Graph <meta property="og:..."> tags
- generic <meta name="author|keywords|description"> tags
- <link rel="icon"> elements

The walk stops at </head> or at the first ERROR token. Nothing in the page
can make extraction fail: bad numbers, bad URLs and tokenizer errors just
leave the affected fields empty.
"""

import logging
import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

from .page_tokens import END_OF_INPUT, Token, TokenType
from .summary_models import PageSummary, PreviewImage

logger = logging.getLogger(__name__)

_UNSIGNED_INT = re.compile(r'\+?[0-9]+')


class SummaryField(Enum):
    """Summary field a <meta> tag writes its content to."""

    TYPE = 'type'
    URL = 'url'
    SITE_NAME = 'site_name'
    TITLE = 'title'
    DESCRIPTION = 'description'
    IMAGE_URL = 'image_url'
    IMAGE_SECURE_URL = 'image_secure_url'
    IMAGE_TYPE = 'image_type'
    IMAGE_WIDTH = 'image_width'
    IMAGE_HEIGHT = 'image_height'
    IMAGE_ALT = 'image_alt'
    AUTHOR = 'author'
    KEYWORDS = 'keywords'


# Open Graph properties, in precedence order
OPEN_GRAPH_FIELDS = {
    'og:type': SummaryField.TYPE,
    'og:url': SummaryField.URL,
    'og:site_name': SummaryField.SITE_NAME,
    'og:title': SummaryField.TITLE,
    'og:description': SummaryField.DESCRIPTION,
    'og:image': SummaryField.IMAGE_URL,
    'og:image:secure_url': SummaryField.IMAGE_SECURE_URL,
    'og:image:type': SummaryField.IMAGE_TYPE,
    'og:image:width': SummaryField.IMAGE_WIDTH,
    'og:image:height': SummaryField.IMAGE_HEIGHT,
    'og:image:alt': SummaryField.IMAGE_ALT,
}

IMAGE_FIELDS = {
    SummaryField.IMAGE_URL,
    SummaryField.IMAGE_SECURE_URL,
    SummaryField.IMAGE_TYPE,
    SummaryField.IMAGE_WIDTH,
    SummaryField.IMAGE_HEIGHT,
    SummaryField.IMAGE_ALT,
}


def resolve_url(page_url: str, reference: str) -> Optional[str]:
    """
    Resolve a possibly relative URL against the page URL.

    Returns None when either URL is too malformed to join.

    Examples:
        >>> resolve_url("https://a.com/p/x", "/i.png")
        'https://a.com/i.png'
    """
    try:
        return urljoin(page_url, reference.strip())
    except ValueError:
        return None


def parse_dimension(value: str) -> Optional[int]:
    """Parse a non-negative base-10 integer, or return None."""
    if not _UNSIGNED_INT.fullmatch(value):
        return None
    return int(value)


def split_keywords(content: str) -> List[str]:
    """Split a comma-delimited keywords field into trimmed keywords."""
    return [keyword.strip() for keyword in content.split(',')]


def resolve_meta_field(prop: str, name: str, description_set: bool) -> Optional[SummaryField]:
    """
    Decide which summary field a <meta> tag writes to.

    Open Graph properties are looked up first. A generic `name` attribute
    is checked afterwards and replaces the property's field when it
    matches: author, then keywords, then description (the latter only
    while the summary has no description yet).

    Args:
        prop: Value of the `property` attribute ('' if absent)
        name: Value of the `name` attribute ('' if absent)
        description_set: Whether the summary already has a description

    Returns:
        The target field, or None if the tag carries nothing we use
    """
    key = OPEN_GRAPH_FIELDS.get(prop)

    if name == 'author':
        key = SummaryField.AUTHOR
    elif name == 'keywords':
        key = SummaryField.KEYWORDS
    elif name == 'description' and not description_set:
        key = SummaryField.DESCRIPTION

    return key


def _apply_image_field(image: PreviewImage, key: SummaryField, content: str, page_url: str):
    if key is SummaryField.IMAGE_URL:
        url = resolve_url(page_url, content)
        if url is not None:
            image.url = url
    elif key is SummaryField.IMAGE_SECURE_URL:
        url = resolve_url(page_url, content)
        if url is not None:
            image.secure_url = url
    elif key is SummaryField.IMAGE_TYPE:
        image.type = content
    elif key is SummaryField.IMAGE_WIDTH:
        width = parse_dimension(content)
        if width is not None:
            image.width = width
    elif key is SummaryField.IMAGE_HEIGHT:
        height = parse_dimension(content)
        if height is not None:
            image.height = height
    elif key is SummaryField.IMAGE_ALT:
        image.alt = content


def apply_meta(summary: PageSummary, page_url: str, token: Token):
    """Apply one <meta> tag to the summary."""
    prop = token.attr('property')
    name = token.attr('name')
    content = token.attr('content')

    # A new image starts at og:image, before any of its sibling properties
    if OPEN_GRAPH_FIELDS.get(prop) is SummaryField.IMAGE_URL:
        summary.images.append(PreviewImage())

    key = resolve_meta_field(prop, name, bool(summary.description))
    if key is None:
        return

    if key in IMAGE_FIELDS:
        if not summary.images:
            logger.debug("Ignoring %s before any og:image on %s", prop, page_url)
            return
        _apply_image_field(summary.images[-1], key, content, page_url)
    elif key is SummaryField.TYPE:
        summary.type = content
    elif key is SummaryField.URL:
        summary.url = content
    elif key is SummaryField.SITE_NAME:
        summary.site_name = content
    elif key is SummaryField.TITLE:
        if content:
            summary.title = content
    elif key is SummaryField.DESCRIPTION:
        summary.description = content
    elif key is SummaryField.AUTHOR:
        summary.author = content
    elif key is SummaryField.KEYWORDS:
        summary.keywords = split_keywords(content)


def parse_icon_sizes(sizes: str) -> Tuple[Optional[int], Optional[int]]:
    """
    Parse a `sizes` attribute such as "32x48".

    The first number is returned as the height and the second as the
    width. Either is None when it does not parse.

    Returns:
        Tuple of (height, width)
    """
    if 'x' not in sizes:
        return (None, None)
    parts = sizes.split('x')
    return (parse_dimension(parts[0]), parse_dimension(parts[1]))


def apply_link(summary: PageSummary, page_url: str, token: Token):
    """
    Apply one <link> tag to the summary.

    Every <link> replaces the icon. Attributes only count once a
    rel="icon" attribute has been seen earlier in the same tag.
    """
    icon = PreviewImage()
    summary.icon = icon
    qualified = False

    for key, value in token.attrs:
        if key == 'rel' and value == 'icon':
            qualified = True
        if not qualified:
            continue

        if key == 'href':
            url = resolve_url(page_url, value)
            if url is not None:
                icon.url = url
        elif key == 'type':
            icon.type = value
        elif key == 'sizes':
            height, width = parse_icon_sizes(value)
            if height is not None:
                icon.height = height
            if width is not None:
                icon.width = width
        elif key == 'alt':
            icon.alt = value


def extract_summary(page_url: str, tokens: Iterable[Token]) -> PageSummary:
    """
    Build a PageSummary from the token sequence of a page.

    Args:
        page_url: URL the page was fetched from, used to resolve
            relative image and icon URLs
        tokens: Token events in document order, e.g. from iter_tokens()

    Returns:
        The best-effort summary of everything seen before </head>
    """
    summary = PageSummary()
    stream: Iterator[Token] = iter(tokens)
    lookahead: Optional[Token] = None

    while True:
        if lookahead is not None:
            token, lookahead = lookahead, None
        else:
            token = next(stream, END_OF_INPUT)

        if token.type is TokenType.ERROR:
            if token.error is not None:
                logger.debug("Stopped scanning %s on tokenizer error: %r", page_url, token.error)
            break

        if token.type is TokenType.END_TAG:
            if token.data == 'head':
                break
            continue

        if token.type not in (TokenType.START_TAG, TokenType.SELF_CLOSING_TAG):
            continue

        if token.data == 'title':
            following = next(stream, END_OF_INPUT)
            if following.type is TokenType.TEXT:
                if not summary.title:
                    summary.title = following.data
            else:
                lookahead = following
        elif token.data == 'meta':
            apply_meta(summary, page_url, token)
        elif token.data == 'link':
            apply_link(summary, page_url, token)

    return summary

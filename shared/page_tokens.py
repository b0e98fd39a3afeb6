"""
Streaming HTML tokenizer for page summaries.

Turns an iterable of byte chunks (usually a streamed HTTP response body)
into a lazy sequence of Token events. Chunks are only read as tokens are
consumed, so a caller that stops at </head> never downloads the body.

The sequence always ends with a single ERROR token. Its `error` is None
when the input was simply exhausted, or the exception that stopped reading
or parsing otherwise.
"""

import codecs
import logging
from dataclasses import dataclass
from enum import Enum
from html import unescape
from html.parser import HTMLParser
from typing import Iterable, Iterator, List, Optional, Tuple

from bs4.dammit import EncodingDetector

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'utf-8'


class TokenType(Enum):
    START_TAG = 'start_tag'
    END_TAG = 'end_tag'
    SELF_CLOSING_TAG = 'self_closing_tag'
    TEXT = 'text'
    ERROR = 'error'


@dataclass(frozen=True)
class Token:
    """One structural unit of an HTML stream."""

    type: TokenType
    data: str = ''
    attrs: Tuple[Tuple[str, str], ...] = ()
    error: Optional[BaseException] = None

    def attr(self, key: str, default: str = '') -> str:
        """Value of the attribute named `key`; a later duplicate overrides an earlier one."""
        for name, value in reversed(self.attrs):
            if name == key:
                return value
        return default


END_OF_INPUT = Token(TokenType.ERROR)


class _TokenCollector(HTMLParser):
    """HTMLParser that queues tokens instead of building a tree."""

    # <title> holds raw text up to </title>; its entities are decoded in handle_data
    CDATA_CONTENT_ELEMENTS = HTMLParser.CDATA_CONTENT_ELEMENTS + ('title',)

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self._pending: List[Token] = []
        self._in_title = False

    @staticmethod
    def _attrs(attrs) -> Tuple[Tuple[str, str], ...]:
        return tuple((name, value if value is not None else '') for name, value in attrs)

    def handle_starttag(self, tag, attrs):
        if tag == 'title':
            self._in_title = True
        self._pending.append(Token(TokenType.START_TAG, tag, self._attrs(attrs)))

    def handle_startendtag(self, tag, attrs):
        self._pending.append(Token(TokenType.SELF_CLOSING_TAG, tag, self._attrs(attrs)))

    def handle_endtag(self, tag):
        if tag == 'title':
            self._in_title = False
        self._pending.append(Token(TokenType.END_TAG, tag))

    def handle_data(self, data):
        if not data:
            return
        if self._in_title:
            data = unescape(data)
        # Text may arrive in pieces across feeds; keep one token per run
        if self._pending and self._pending[-1].type is TokenType.TEXT:
            self._pending[-1] = Token(TokenType.TEXT, self._pending[-1].data + data)
        else:
            self._pending.append(Token(TokenType.TEXT, data))

    def drain(self, final: bool = False) -> List[Token]:
        """Hand over queued tokens, holding back a text run that may continue."""
        if not final and self._pending and self._pending[-1].type is TokenType.TEXT:
            tokens, self._pending = self._pending[:-1], self._pending[-1:]
        else:
            tokens, self._pending = self._pending, []
        return tokens


def normalize_encoding(name: Optional[str]) -> Optional[str]:
    """Return the codec name if Python knows it, else None."""
    if not name:
        return None
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


def sniff_encoding(prefix: bytes) -> Tuple[bytes, str]:
    """
    Pick an encoding for a document from its first bytes.

    Checks for a byte order mark first, then a <meta charset> or
    http-equiv declaration, and falls back to UTF-8.

    Returns:
        Tuple of (prefix without BOM, codec name)
    """
    data, bom_encoding = EncodingDetector.strip_byte_order_mark(prefix)
    encoding = (
        normalize_encoding(bom_encoding) or
        normalize_encoding(EncodingDetector.find_declared_encoding(data, is_html=True)) or
        DEFAULT_ENCODING
    )
    return data, encoding


def iter_tokens(chunks: Iterable[bytes], encoding: Optional[str] = None) -> Iterator[Token]:
    """
    Lazily tokenize HTML arriving as byte chunks.

    Args:
        chunks: Byte chunks in document order
        encoding: Encoding declared by the server; sniffed from the
            first chunk when missing or unknown

    Yields:
        Token events, terminated by exactly one ERROR token
    """
    parser = _TokenCollector()
    decoder = None
    encoding = normalize_encoding(encoding)

    try:
        for chunk in chunks:
            if not chunk:
                continue
            if decoder is None:
                if encoding is None:
                    chunk, encoding = sniff_encoding(chunk)
                decoder = codecs.getincrementaldecoder(encoding)(errors='replace')
            parser.feed(decoder.decode(chunk))
            yield from parser.drain()

        if decoder is not None:
            parser.feed(decoder.decode(b'', final=True))
        parser.close()
        yield from parser.drain(final=True)
    except Exception as e:
        # Reading or parsing failed; whatever was tokenized so far still counts
        logger.debug("Tokenizer stopped early: %r", e)
        yield from parser.drain(final=True)
        yield Token(TokenType.ERROR, error=e)
        return

    yield END_OF_INPUT


def tokenize_html(html: str) -> Iterator[Token]:
    """Tokenize already-decoded markup."""
    return iter_tokens([html.encode(DEFAULT_ENCODING)], encoding=DEFAULT_ENCODING)

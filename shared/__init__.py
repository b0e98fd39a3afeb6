"""Shared utilities for the page summary service."""

from .summary_models import (
    PreviewImage,
    PageSummary,
)

from .page_tokens import (
    TokenType,
    Token,
    END_OF_INPUT,
    iter_tokens,
    tokenize_html,
    sniff_encoding,
)

from .summary_extractor import (
    SummaryField,
    OPEN_GRAPH_FIELDS,
    resolve_meta_field,
    resolve_url,
    parse_dimension,
    parse_icon_sizes,
    split_keywords,
    extract_summary,
)

__all__ = [
    # Models
    'PreviewImage',
    'PageSummary',
    # Tokenizer
    'TokenType',
    'Token',
    'END_OF_INPUT',
    'iter_tokens',
    'tokenize_html',
    'sniff_encoding',
    # Extraction
    'SummaryField',
    'OPEN_GRAPH_FIELDS',
    'resolve_meta_field',
    'resolve_url',
    'parse_dimension',
    'parse_icon_sizes',
    'split_keywords',
    'extract_summary',
]

"""
Page Summary Cloud Function

Fetches a web page and returns the metadata needed to render a link preview.

Responsibilities:
- Validate the `url` query parameter
- Fetch the page (single attempt, HTML only)
- Scan the document head for title, Open Graph, meta and icon tags
- Return the summary as JSON

Does NOT:
- Cache pages
- Retry failed fetches
- Parse the document body or run JavaScript
"""

import functions_framework
import requests
import json
import logging
import os
import sys

# Add shared module to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from shared.page_tokens import iter_tokens
from shared.summary_extractor import extract_summary

# Configuration
FETCH_TIMEOUT = float(os.environ.get('SUMMARY_FETCH_TIMEOUT', '10'))
USER_AGENT = os.environ.get(
    'SUMMARY_USER_AGENT',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
CHUNK_SIZE = int(os.environ.get('SUMMARY_CHUNK_SIZE', '8192'))
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

HTML_CONTENT_TYPE = 'text/html'

# Error messages returned to clients (causes are only logged)
INVALID_INPUT_MESSAGE = 'Invalid input params!'
BAD_REQUEST_MESSAGE = 'Error! Bad Request.'
METHOD_NOT_ALLOWED_MESSAGE = 'that method is not allowed'
INVALID_JSON_MESSAGE = 'Invalid JSON'
UNEXPECTED_ERROR_MESSAGE = 'Server-generated an unexpected error, please try again!'

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def fetch_html(url: str) -> tuple:
    """
    Fetch a web page for summarizing. Returns (response, error).

    The response is opened in streaming mode and positioned at the start
    of the body; the caller owns it and must close it. On any failure the
    response is closed here and an error message is returned instead.

    Fails when:
    - the request itself fails (timeout, connection error, bad URL)
    - the status code is >= 400
    - the Content-Type is not an HTML page
    """
    headers = {
        'User-Agent': USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.5',
    }

    try:
        response = requests.get(url, headers=headers, timeout=FETCH_TIMEOUT, allow_redirects=True, stream=True)
    except requests.exceptions.Timeout:
        return None, 'Request timed out'
    except requests.exceptions.RequestException as e:
        return None, f'Request failed: {str(e)}'

    if response.status_code >= 400:
        response.close()
        return None, f'HTTP error: {response.status_code}'

    content_type = response.headers.get('Content-Type', '')
    if not content_type.lower().startswith(HTML_CONTENT_TYPE):
        response.close()
        return None, f'Not a web page: {content_type or "missing content type"}'

    return response, None


def declared_encoding(response) -> str:
    """Charset from the Content-Type header, or None if the server sent none."""
    content_type = response.headers.get('Content-Type', '')
    if 'charset' not in content_type.lower():
        return None
    return requests.utils.get_encoding_from_headers(response.headers)


def summarize_page(url: str) -> tuple:
    """Fetch a page and extract its summary. Returns (summary, error)."""
    response, fetch_error = fetch_html(url)
    if fetch_error:
        return None, fetch_error

    with response:
        tokens = iter_tokens(response.iter_content(chunk_size=CHUNK_SIZE), encoding=declared_encoding(response))
        summary = extract_summary(url, tokens)

    return summary, None


@functions_framework.http
def page_summary(request):
    """
    Main Cloud Function entry point.

    Expects one query string parameter:
        GET /?url=https://example.com/article

    Responds with the JSON-encoded page summary, e.g.
    {
        "title": "Example Article",
        "description": "What the article is about",
        "images": [{"url": "https://example.com/cover.png", "width": 1200}]
    }
    """
    # Handle CORS
    if request.method == 'OPTIONS':
        headers = {
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Methods': 'GET',
            'Access-Control-Allow-Headers': 'Content-Type',
            'Access-Control-Max-Age': '3600'
        }
        return ('', 204, headers)

    headers = {'Access-Control-Allow-Origin': '*'}
    error_headers = {**headers, 'Content-Type': 'text/plain; charset=utf-8'}

    if request.method != 'GET':
        return (METHOD_NOT_ALLOWED_MESSAGE, 405, error_headers)

    try:
        url = (request.args.get('url') or '').strip()
        if not url:
            return (INVALID_INPUT_MESSAGE, 400, error_headers)

        summary, fetch_error = summarize_page(url)
        if fetch_error:
            logger.warning("Fetch failed for %s: %s", url, fetch_error)
            return (BAD_REQUEST_MESSAGE, 400, error_headers)

        try:
            body = json.dumps(summary.to_dict())
        except (TypeError, ValueError):
            logger.exception("Could not encode summary for %s", url)
            return (INVALID_JSON_MESSAGE, 500, error_headers)

        return (body, 200, {**headers, 'Content-Type': 'application/json'})

    except Exception:
        logger.exception("Unexpected error while summarizing")
        return (UNEXPECTED_ERROR_MESSAGE, 500, error_headers)

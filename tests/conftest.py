"""
Shared pytest fixtures for page summary tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load the Cloud Function module with a unique name at module load time
_page_summary_module = _load_module_from_path(
    'page_summary_main',
    PROJECT_ROOT / 'page-summary' / 'main.py'
)


# ============================================================================
# Page Summary Function Fixtures
# ============================================================================

@pytest.fixture
def page_summary_module():
    """Returns the loaded page-summary Cloud Function module."""
    return _page_summary_module


@pytest.fixture
def fetch_html():
    """Returns fetch_html function from page-summary."""
    return _page_summary_module.fetch_html


@pytest.fixture
def declared_encoding():
    """Returns declared_encoding function from page-summary."""
    return _page_summary_module.declared_encoding


@pytest.fixture
def summarize_page():
    """Returns summarize_page function from page-summary."""
    return _page_summary_module.summarize_page


@pytest.fixture
def page_summary():
    """Returns main entry point from page-summary."""
    return _page_summary_module.page_summary


# ============================================================================
# Sample Pages
# ============================================================================

@pytest.fixture
def sample_article_html():
    """Returns the markup of a typical article page."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <title>10 Python Tips | Example Blog</title>
        <meta property="og:type" content="article">
        <meta property="og:url" content="https://example.com/python-tips">
        <meta property="og:site_name" content="Example Blog">
        <meta property="og:title" content="10 Python Tips You Should Know">
        <meta name="author" content="Jane Developer">
        <meta name="keywords" content="python, tips , productivity">
        <meta name="description" content="Learn essential Python tips">
        <meta property="og:image" content="/images/cover.jpg">
        <meta property="og:image:width" content="1200">
        <meta property="og:image:height" content="630">
        <meta property="og:image:alt" content="A snake on a laptop">
        <link rel="icon" href="/favicon.png" type="image/png" sizes="32x32">
    </head>
    <body>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <meta property="og:title" content="Body title">
            <p>Here are some tips for Python development.</p>
        </article>
    </body>
    </html>
    """


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, args=None, method='GET'):
            self.args = args or {}
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return None

    return MockRequest

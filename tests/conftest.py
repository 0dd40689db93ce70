"""
Pytest configuration for html2odf
"""

import logging
import sys

import pytest

from html2odf import HtmlToOdt, HtmlToOds
from html2odf.HtmlToOdt import TextTransformer


@pytest.fixture(autouse=True)
def configure_logging():
    """Only show warnings and errors of the package logger during tests."""
    logger = logging.getLogger('html2odf')
    handlers = list(logger.handlers)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    logger.addHandler(console_handler)

    yield

    logger.handlers = handlers


@pytest.fixture
def odt():
    """A text document built on the built-in template."""
    return HtmlToOdt()


@pytest.fixture
def ods():
    """A spreadsheet built on the built-in template."""
    return HtmlToOds()


@pytest.fixture
def convert(odt):
    """Convert an HTML fragment with a fresh page transformer; returns the output nodes."""
    def _convert(html, line_numbered=False, trust_html=False):
        odt.trust_html = trust_html
        transformer = TextTransformer(odt.styles, odt.current_page, config=odt.config,
                                      check_depth=odt.check_depth)
        return transformer.convert_body(odt.html_to_dom(html), line_numbered)
    return _convert

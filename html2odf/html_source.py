"""
HTML input side: allow-list sanitizing and DOM parsing.

Sanitizing is done with bleach, parsing with BeautifulSoup's ``html.parser``
backend. The converters only ever see the ``<body>`` tag returned by
parse_html_fragment() and ask node_kind() how to treat each node.
"""

import logging

import bleach
from bs4 import BeautifulSoup
from bs4.element import Doctype, NavigableString, PreformattedString, Tag

from .formats import RECOGNIZED_TAGS, split_classes

logger = logging.getLogger('html2odf')

NODE_ELEMENT = 'element'
NODE_TEXT = 'text'
NODE_DOCTYPE = 'doctype'

ALLOWED_TAGS = frozenset(RECOGNIZED_TAGS)
ALLOWED_ATTRIBUTES = {
    '*': ['class'],
    'a': ['href'],
}
ALLOWED_PROTOCOLS = frozenset(['http', 'https', 'mailto', 'ftp', 'tel'])


def sanitize_html(html):
    """Strip everything outside the recognized tag/attribute vocabulary."""
    cleaned = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    if cleaned != html:
        logger.debug("Sanitizer modified HTML input (%d -> %d chars)", len(html), len(cleaned))
    return cleaned


def parse_html_fragment(html):
    """Parse an HTML fragment and return its <body> tag."""
    soup = BeautifulSoup('<html><body>' + html + '</body></html>', 'html.parser')
    return soup.body


def html_to_dom(html, trust_html=False):
    """Sanitize (unless trusted) and parse an HTML fragment."""
    if not trust_html:
        html = sanitize_html(html)
    return parse_html_fragment(html)


def node_kind(node):
    """Classify a source node as element, text, doctype, or None for anything else."""
    if isinstance(node, Tag):
        return NODE_ELEMENT
    if isinstance(node, Doctype):
        return NODE_DOCTYPE
    if isinstance(node, PreformattedString):
        # comments, CDATA, processing instructions, declarations
        return None
    if isinstance(node, NavigableString):
        return NODE_TEXT
    return None


def css_classes(tag):
    return split_classes(tag.get('class'))


def strip_tags(html):
    """Return the text content of an HTML fragment."""
    return BeautifulSoup(html, 'html.parser').get_text()

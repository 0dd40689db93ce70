"""
html2odf - Convert HTML to OpenDocument text (.odt) and spreadsheet (.ods) files

HTML fragments are sanitized, parsed and transformed into ODF markup that is
spliced into a template document.
"""

__version__ = "0.1.0"

from .HtmlToOdt import HtmlToOdt, TextTransformer, PageContext
from .HtmlToOds import HtmlToOds, TokenFlattener, Token
from .formats import FormatFlag, classify, linebreak_after, text_properties
from .style_registry import StyleRegistry
from .package import OdfPackage
from .markdown_input import markdown_to_html
from .frontmatter_parser import (
    parse_markdown_with_frontmatter,
    parse_markdown_string_with_frontmatter,
    metadata_to_replaces,
)
from .config import ConversionConfig, DEFAULT_CONFIG
from .exceptions import OdfError, TemplateError, StyleError, ConversionError, SecurityError
from .converter_api import convert_html_string, convert_markdown_string

__all__ = [
    "HtmlToOdt",
    "TextTransformer",
    "PageContext",
    "HtmlToOds",
    "TokenFlattener",
    "Token",
    "FormatFlag",
    "classify",
    "linebreak_after",
    "text_properties",
    "StyleRegistry",
    "OdfPackage",
    "markdown_to_html",
    "parse_markdown_with_frontmatter",
    "parse_markdown_string_with_frontmatter",
    "metadata_to_replaces",
    "ConversionConfig",
    "DEFAULT_CONFIG",
    "OdfError",
    "TemplateError",
    "StyleError",
    "ConversionError",
    "SecurityError",
    "convert_html_string",
    "convert_markdown_string",
]

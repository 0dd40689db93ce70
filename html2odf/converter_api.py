"""
High-level convenience API for html2odf.

Provides simple functions to convert HTML or Markdown strings and files to
ODT without needing to drive HtmlToOdt page by page.
"""

import logging
import os

from .HtmlToOdt import HtmlToOdt
from .config import DEFAULT_CONFIG
from .exceptions import ConversionError, SecurityError
from .frontmatter_parser import (
    metadata_to_replaces,
    parse_markdown_string_with_frontmatter,
    parse_markdown_with_frontmatter,
)
from .markdown_input import markdown_to_html

logger = logging.getLogger('html2odf')

HTML_EXTENSIONS = ('.html', '.htm')
MARKDOWN_EXTENSIONS = ('.md', '.markdown')


def markdown_to_page(markdown_string):
    """Render Markdown (with optional front matter) to (html, replaces)."""
    metadata, md_content = parse_markdown_string_with_frontmatter(markdown_string)
    return markdown_to_html(md_content), metadata_to_replaces(metadata)


def read_input_file(path, config=None):
    """Read an .html/.htm/.md input file and return (html, replaces).

    Raises:
        ConversionError: If the file is missing or has an unsupported extension
        SecurityError: If the file exceeds MAX_INPUT_SIZE
    """
    config = config or DEFAULT_CONFIG
    ext = os.path.splitext(path)[1].lower()
    if ext not in HTML_EXTENSIONS + MARKDOWN_EXTENSIONS:
        raise ConversionError(f"Unsupported input format: {ext or path}")
    if not os.path.exists(path):
        raise ConversionError(f"Input file not found: {path}")

    size = os.path.getsize(path)
    if size > config.MAX_INPUT_SIZE:
        raise SecurityError(f"Input file too large: {size} bytes (max {config.MAX_INPUT_SIZE} bytes)")

    if ext in MARKDOWN_EXTENSIONS:
        metadata, md_content = parse_markdown_with_frontmatter(path)
        return markdown_to_html(md_content), metadata_to_replaces(metadata)

    with open(path, 'r', encoding='utf-8') as f:
        return f.read(), {}


def build_document(pages, template_file=None, line_numbered=False, replaces=None,
                   trust_html=False, config=None):
    """Create an HtmlToOdt with one page per (html, page_replaces) pair.

    Args:
        pages: Iterable of (html, page_replaces) tuples
        template_file: Path to an .odt template. If None, uses the built-in one.
        line_numbered: Number the lines of all text blocks
        replaces: Mapping of pattern -> text applied to every page
        trust_html: Skip sanitizing of the HTML input
        config: Optional ConversionConfig instance. Uses DEFAULT_CONFIG if None.

    Returns:
        HtmlToOdt ready for finish_and_get_document() or save()
    """
    document = HtmlToOdt(template_file, trust_html=trust_html, config=config)
    for index, (html, page_replaces) in enumerate(pages):
        if index > 0:
            document.next_page()
        merged = dict(replaces or {})
        merged.update(page_replaces or {})
        for search, value in merged.items():
            document.add_replace(search, value)
        document.add_html_text_block(html, line_numbered)
    return document


def convert_html_string(html, output_path, template_file=None, line_numbered=False,
                        replaces=None, trust_html=False, config=None):
    """Convert an HTML fragment to an ODT file.

    Raises:
        TemplateError: If the template is missing, invalid or has no text anchor.
        ConversionError: If conversion fails.
    """
    document = build_document([(html, None)], template_file, line_numbered, replaces,
                              trust_html=trust_html, config=config)
    document.save(output_path)


def convert_markdown_string(markdown_string, output_path, template_file=None,
                            line_numbered=False, replaces=None, config=None):
    """Convert a Markdown string (may include YAML front matter) to an ODT file.

    Front matter keys fill ``{{KEY}}`` placeholders of the template; explicit
    ``replaces`` win over front matter values.
    """
    html, page_replaces = markdown_to_page(markdown_string)
    page_replaces.update(replaces or {})
    convert_html_string(html, output_path, template_file, line_numbered,
                        replaces=page_replaces, config=config)

"""
Configuration constants for the html2odf converter.

This module centralizes all magic numbers and default values used throughout
the conversion process. Values can be overridden by:
1. Subclassing ConversionConfig and passing an instance as ``config=``
2. Constructor options (trust_html, color_ins, color_del)
3. CLI arguments
"""


class ConversionConfig:
    """Default configuration values for ODF conversion."""

    # === XML Namespaces ===
    NAMESPACES = {
        'office': 'urn:oasis:names:tc:opendocument:xmlns:office:1.0',
        'style': 'urn:oasis:names:tc:opendocument:xmlns:style:1.0',
        'text': 'urn:oasis:names:tc:opendocument:xmlns:text:1.0',
        'table': 'urn:oasis:names:tc:opendocument:xmlns:table:1.0',
        'draw': 'urn:oasis:names:tc:opendocument:xmlns:drawing:1.0',
        'fo': 'urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0',
        'xlink': 'http://www.w3.org/1999/xlink',
        'dc': 'http://purl.org/dc/elements/1.1/',
        'meta': 'urn:oasis:names:tc:opendocument:xmlns:meta:1.0',
        'number': 'urn:oasis:names:tc:opendocument:xmlns:datastyle:1.0',
        'svg': 'urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0',
        'of': 'urn:oasis:names:tc:opendocument:xmlns:of:1.2',
        'loext': 'urn:org:documentfoundation:names:experimental:office:xmlns:loext:1.0',
        'calcext': 'urn:org:documentfoundation:names:experimental:calc:xmlns:calcext:1.0',
        'manifest': 'urn:oasis:names:tc:opendocument:xmlns:manifest:1.0',
    }

    # === Package Parts ===
    CONTENT_PART = 'content.xml'
    STYLES_PART = 'styles.xml'
    MIMETYPE_PART = 'mimetype'

    # === Template Markers (regular expressions, matched case-insensitively) ===
    DUMMY_MARKER = r'\{\{HTML2ODF:DUMMY\}\}'
    TEXT_ANCHOR_MARKER = r'\{\{HTML2ODF:TEXT\}\}'

    # Top-level body children that are declarations, not content.
    # They stay in place once and are never replicated per page.
    STRUCTURAL_BODY_ELEMENTS = (
        ('text', 'sequence-decls'),
        ('text', 'variable-decls'),
        ('text', 'user-field-decls'),
        ('text', 'dde-connection-decls'),
        ('text', 'alphabetical-index-auto-mark-file'),
        ('office', 'forms'),
        ('table', 'calculation-settings'),
        ('table', 'content-validations'),
        ('table', 'label-ranges'),
    )

    # === Paragraph Styles expected in the text template ===
    STYLE_STANDARD = 'Html2Odf_20_Standard'
    STYLE_LINE_NUMBERED_FIRST = 'Html2Odf_20_LineNumbered_20_First'
    STYLE_LINE_NUMBERED_STANDARD = 'Html2Odf_20_LineNumbered_20_Standard'
    STYLE_BLOCKQUOTE = 'Html2Odf_20_Blockquote'
    STYLE_BLOCKQUOTE_LINE_NUMBERED = 'Html2Odf_20_Blockquote_20_LineNumbered'
    # Empty paragraph put between pages; None disables it
    STYLE_PAGE_BREAK = 'Html2Odf_20_PageBreak'
    STYLE_HEADINGS = {
        'H1': 'Html2Odf_20_H1',
        'H2': 'Html2Odf_20_H2',
        'H3': 'Html2Odf_20_H3',
        'H4': 'Html2Odf_20_H4',
    }

    # === Generated (automatic) Styles ===
    STYLE_PREFIX = 'Html2Odf'

    # === Insert / Delete Markers ===
    COLOR_INS = '#008800'
    COLOR_DEL = '#880000'

    # === Super-/Subscript ===
    SUPERSCRIPT_POSITION = 'super 58%'
    SUBSCRIPT_POSITION = 'sub 58%'

    # === Spreadsheet Layout ===
    DEFAULT_COLUMN_WIDTH_CM = 2  # Assumed width for columns without explicit width
    CHARS_PER_CM = 6  # Average characters fitting into one centimeter of cell width
    ROW_HEIGHT_CM_PER_LINE = 0.45  # Height of one text line
    DEFAULT_MIN_ROW_HEIGHT = 1  # Row height hint (in lines) for rows that have any hint
    CELL_PARENT_STYLE = 'Default'
    CELL_DEFAULT_PROPERTIES = {
        'style:vertical-align': 'top',
    }

    # === Security Limits ===
    MAX_INPUT_SIZE = 10 * 1024 * 1024  # 10 MB max HTML/Markdown input
    MAX_TEMPLATE_FILE_SIZE = 50 * 1024 * 1024  # 50 MB max template file
    MAX_NESTING_DEPTH = 200  # Max HTML element nesting during recursion


# Global default config instance
DEFAULT_CONFIG = ConversionConfig()

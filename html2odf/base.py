"""
Shared base of the text (.odt) and spreadsheet (.ods) converters.
"""

import logging
import os
import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG
from .exceptions import ConversionError, SecurityError
from .html_source import html_to_dom
from .package import OdfPackage
from .style_registry import StyleRegistry
from .xml_helpers import make_elem, qname, register_namespaces

logger = logging.getLogger('html2odf')

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


def default_template_path(kind):
    """Return the directory of a built-in template ('text' or 'spreadsheet')."""
    return os.path.join(TEMPLATES_DIR, kind)


class OdfDocument:
    """Template document plus the conversion state that belongs to it.

    Subclasses implement create(), which builds the new content tree; this
    class loads the template, owns the automatic-style registry, patches the
    page layout and writes the resulting container.
    """

    # Name of the built-in template directory below templates/
    TEMPLATE_KIND = None
    MEDIA_TYPE = 'application/octet-stream'

    def __init__(self, template_file=None, trust_html=False, color_ins=None, color_del=None, config=None):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.trust_html = trust_html
        self.color_ins = color_ins or self.config.COLOR_INS
        self.color_del = color_del or self.config.COLOR_DEL

        register_namespaces(self.config.NAMESPACES)

        if template_file:
            self.package = OdfPackage.from_file(template_file, config=self.config)
        else:
            self.package = OdfPackage.from_directory(default_template_path(self.TEMPLATE_KIND), config=self.config)

        self.content_root = self.package.parse_part(self.config.CONTENT_PART)
        self.automatic_styles = self._get_automatic_styles()
        self.styles = StyleRegistry(self.automatic_styles, self.config, self.color_ins, self.color_del)

        # Page layout overrides applied to styles.xml
        self.page_width = None
        self.page_height = None
        self.print_orientation = None
        self.margin_top = None
        self.margin_left = None
        self.margin_right = None
        self.margin_bottom = None

        self._finished = False

    def _get_automatic_styles(self):
        automatic_styles = self.content_root.find(qname('office:automatic-styles'))
        if automatic_styles is None:
            # office:automatic-styles must precede office:body
            automatic_styles = make_elem('office:automatic-styles')
            body_index = len(self.content_root)
            for index, child in enumerate(self.content_root):
                if child.tag == qname('office:body'):
                    body_index = index
                    break
            self.content_root.insert(body_index, automatic_styles)
            logger.debug("Template has no office:automatic-styles, created one")
        return automatic_styles

    def html_to_dom(self, html):
        """Sanitize (unless trust_html is set) and parse an HTML fragment; returns <body>."""
        if not isinstance(html, str):
            raise ConversionError(f"HTML input must be a string, got {type(html).__name__}")
        if len(html) > self.config.MAX_INPUT_SIZE:
            raise SecurityError(
                f"HTML input too large: {len(html)} chars (max {self.config.MAX_INPUT_SIZE})"
            )
        return html_to_dom(html, trust_html=self.trust_html)

    def check_depth(self, depth):
        if depth > self.config.MAX_NESTING_DEPTH:
            raise SecurityError(
                f"HTML nesting deeper than {self.config.MAX_NESTING_DEPTH} levels"
            )

    def set_margins(self, top, left, right, bottom):
        """Set page margins, e.g. set_margins('20mm', '25mm', '25mm', '20mm')."""
        self.margin_top = top
        self.margin_left = left
        self.margin_right = right
        self.margin_bottom = bottom

    def set_page_orientation(self, width, height, orientation):
        """Set page size and orientation, e.g. ('297mm', '210mm', 'landscape')."""
        self.page_width = width
        self.page_height = height
        self.print_orientation = orientation

    def create(self):
        """Build the new content tree in self.content_root."""
        raise NotImplementedError

    def finish_and_get_document(self):
        """Run the conversion and return the finished container as bytes."""
        if self._finished:
            raise ConversionError("Document has already been finished")

        self.create()
        self.package.replace_part(self.config.CONTENT_PART, self.serialize_content())
        self.write_page_styles()
        self._finished = True
        return self.package.to_bytes()

    def save(self, path):
        data = self.finish_and_get_document()
        with open(path, 'wb') as f:
            f.write(data)
        logger.info("Successfully created %s", path)

    def serialize_content(self):
        return self._serialize(self.content_root)

    @staticmethod
    def _serialize(root):
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding='unicode')

    def _page_layout_overrides(self):
        overrides = {
            'fo:page-width': self.page_width,
            'fo:page-height': self.page_height,
            'style:print-orientation': self.print_orientation,
            'fo:margin-top': self.margin_top,
            'fo:margin-left': self.margin_left,
            'fo:margin-right': self.margin_right,
            'fo:margin-bottom': self.margin_bottom,
        }
        return {key: value for key, value in overrides.items() if value}

    def write_page_styles(self):
        """Patch every style:page-layout-properties in styles.xml."""
        overrides = self._page_layout_overrides()
        if not overrides:
            return

        styles_part = self.config.STYLES_PART
        if not self.package.has_part(styles_part):
            logger.warning("Template has no %s, page layout settings ignored", styles_part)
            return

        styles_root = self.package.parse_part(styles_part)
        layouts = OdfPackage.elements(styles_root, 'style', 'page-layout-properties')
        for element in layouts:
            for key, value in overrides.items():
                element.set(qname(key), value)
        logger.debug("Applied page layout %s to %d page layouts", overrides, len(layouts))

        self.package.replace_part(styles_part, self._serialize(styles_root))

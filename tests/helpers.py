"""
Shared helpers for inspecting generated ODF markup in tests.
"""

import io
import zipfile
import xml.etree.ElementTree as ET

from html2odf.base import default_template_path
from html2odf.package import OdfPackage
from html2odf.xml_helpers import qname

DOCUMENT_CONTENT_OPEN = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<office:document-content'
    ' xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0"'
    ' xmlns:style="urn:oasis:names:tc:opendocument:xmlns:style:1.0"'
    ' xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0"'
    ' xmlns:table="urn:oasis:names:tc:opendocument:xmlns:table:1.0"'
    ' xmlns:fo="urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0"'
    ' xmlns:xlink="http://www.w3.org/1999/xlink"'
    ' office:version="1.2">'
)


def text_content_xml(body_xml):
    """content.xml of a text document whose office:text holds body_xml."""
    return (DOCUMENT_CONTENT_OPEN
            + '<office:automatic-styles/><office:body><office:text>'
            + body_xml
            + '</office:text></office:body></office:document-content>')


def spreadsheet_content_xml(spreadsheet_xml):
    return (DOCUMENT_CONTENT_OPEN
            + '<office:automatic-styles/><office:body><office:spreadsheet>'
            + spreadsheet_xml
            + '</office:spreadsheet></office:body></office:document-content>')


def make_template(tmp_path, kind, content_xml=None, filename=None):
    """Write a template container based on a built-in template, optionally with new content.xml."""
    package = OdfPackage.from_directory(default_template_path(kind))
    if content_xml is not None:
        package.replace_part('content.xml', content_xml)
    extension = 'odt' if kind == 'text' else 'ods'
    path = tmp_path / (filename or f'template.{extension}')
    package.save(str(path))
    return str(path)


def read_part(data, name='content.xml'):
    with zipfile.ZipFile(io.BytesIO(data)) as z:
        return ET.fromstring(z.read(name))


def text_body(root):
    return root.find(f"{qname('office:body')}/{qname('office:text')}")


def find_style(root, name):
    """The style:style element with the given name, searched below root."""
    for style in root.iter(qname('style:style')):
        if style.get(qname('style:name')) == name:
            return style
    return None


def style_name(elem):
    return elem.get(qname('text:style-name'))


def all_text(elem):
    return ''.join(elem.itertext())


def parent_map(root):
    return {child: parent for parent in root.iter() for child in parent}


def assert_no_nested_paragraphs(elem, inside_paragraph=False):
    """Fail if a text:p contains another text:p other than through a list item."""
    if elem.tag == qname('text:p'):
        assert not inside_paragraph, "text:p nested inside text:p"
        inside_paragraph = True
    if elem.tag == qname('text:list-item'):
        inside_paragraph = False
    for child in elem:
        assert_no_nested_paragraphs(child, inside_paragraph)

"""
Tests for the ODF container accessor.
"""

import io
import zipfile

import pytest

from html2odf.base import default_template_path
from html2odf.config import ConversionConfig
from html2odf.exceptions import SecurityError, TemplateError
from html2odf.package import OdfPackage
from html2odf.xml_helpers import qname


@pytest.fixture
def package():
    return OdfPackage.from_directory(default_template_path('text'))


class TestLoad:

    def test_from_directory(self, package):
        assert package.part_names()[0] == 'mimetype'
        assert package.read_part('mimetype') == 'application/vnd.oasis.opendocument.text'
        assert package.has_part('content.xml')
        assert package.has_part('META-INF/manifest.xml')

    def test_missing_file(self, tmp_path):
        with pytest.raises(TemplateError):
            OdfPackage.from_file(str(tmp_path / 'missing.odt'))

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / 'broken.odt'
        path.write_bytes(b'this is not a zip file')
        with pytest.raises(TemplateError):
            OdfPackage.from_file(str(path))

    def test_zip_without_content(self):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w') as z:
            z.writestr('mimetype', 'application/vnd.oasis.opendocument.text')
        with pytest.raises(TemplateError):
            OdfPackage.from_bytes(buffer.getvalue())

    def test_template_size_limit(self, tmp_path, package):
        class TinyConfig(ConversionConfig):
            MAX_TEMPLATE_FILE_SIZE = 10

        path = tmp_path / 'template.odt'
        package.save(str(path))
        with pytest.raises(SecurityError):
            OdfPackage.from_file(str(path), config=TinyConfig())


class TestParts:

    def test_missing_part(self, package):
        with pytest.raises(TemplateError):
            package.read_part('settings.xml')

    def test_malformed_xml(self, package):
        package.replace_part('content.xml', '<office:document-content')
        with pytest.raises(TemplateError):
            package.parse_part('content.xml')

    def test_elements(self, package):
        root = package.parse_part('content.xml')
        paragraphs = OdfPackage.elements(root, 'text', 'p')
        assert len(paragraphs) == 1
        assert all(p.tag == qname('text:p') for p in paragraphs)


class TestWrite:

    def test_mimetype_first_and_stored(self, package):
        with zipfile.ZipFile(io.BytesIO(package.to_bytes())) as z:
            first = z.infolist()[0]
            assert first.filename == 'mimetype'
            assert first.compress_type == zipfile.ZIP_STORED

    def test_untouched_parts_survive(self, package, tmp_path):
        package.replace_part('Pictures/logo.png', b'\x89PNG')
        path = tmp_path / 'out.odt'
        package.save(str(path))

        reloaded = OdfPackage.from_file(str(path))
        assert reloaded.parts['Pictures/logo.png'] == b'\x89PNG'
        assert reloaded.read_part('styles.xml') == package.read_part('styles.xml')

    def test_replace_part_encodes_text(self, package):
        package.replace_part('content.xml', '<a>ü</a>')
        assert package.parts['content.xml'] == '<a>ü</a>'.encode('utf-8')

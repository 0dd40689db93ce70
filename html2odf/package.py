"""
Read/replace/write access to the parts of an OpenDocument (ZIP) container.
"""

import io
import logging
import os
import zipfile
import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG
from .exceptions import TemplateError, SecurityError
from .xml_helpers import qname

logger = logging.getLogger('html2odf')


class OdfPackage:
    """In-memory copy of an ODF container.

    Parts are kept as bytes in their original order; replacing a part never
    touches the others, so everything the converter does not know about
    (pictures, settings, manifest) is written back unchanged.
    """

    def __init__(self, parts, compress_types=None, config=None):
        self.config = config if config is not None else DEFAULT_CONFIG
        # name -> bytes, in archive order
        self.parts = dict(parts)
        self.compress_types = dict(compress_types or {})

    @classmethod
    def from_file(cls, path, config=None):
        """Load a template container from disk.

        Raises:
            TemplateError: If the file is missing or not a valid ZIP container
            SecurityError: If the file exceeds MAX_TEMPLATE_FILE_SIZE
        """
        config = config if config is not None else DEFAULT_CONFIG
        if not os.path.exists(path):
            raise TemplateError(f"Template not found: {path}")

        size = os.path.getsize(path)
        if size > config.MAX_TEMPLATE_FILE_SIZE:
            raise SecurityError(
                f"Template file too large: {size} bytes "
                f"(max {config.MAX_TEMPLATE_FILE_SIZE} bytes)"
            )

        with open(path, 'rb') as f:
            return cls.from_bytes(f.read(), config=config, source=path)

    @classmethod
    def from_bytes(cls, data, config=None, source='<bytes>'):
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile:
            raise TemplateError(f"Template is not a valid ODF (ZIP) container: {source}")

        parts = {}
        compress_types = {}
        with archive as z:
            for item in z.infolist():
                if item.is_dir():
                    continue
                parts[item.filename] = z.read(item.filename)
                compress_types[item.filename] = item.compress_type

        package = cls(parts, compress_types, config=config)
        package._require_part(package.config.CONTENT_PART, source)
        logger.debug("Loaded template %s with %d parts", source, len(parts))
        return package

    @classmethod
    def from_directory(cls, path, config=None):
        """Build a container from an unpacked directory (used for the built-in templates)."""
        if not os.path.isdir(path):
            raise TemplateError(f"Template directory not found: {path}")

        config = config if config is not None else DEFAULT_CONFIG
        parts = {}
        mimetype_path = os.path.join(path, config.MIMETYPE_PART)
        if os.path.exists(mimetype_path):
            with open(mimetype_path, 'rb') as f:
                parts[config.MIMETYPE_PART] = f.read().strip()

        for dirpath, dirnames, filenames in os.walk(path):
            dirnames.sort()
            for filename in sorted(filenames):
                full_path = os.path.join(dirpath, filename)
                name = os.path.relpath(full_path, path).replace(os.sep, '/')
                if name == config.MIMETYPE_PART or name.startswith('__'):
                    continue
                with open(full_path, 'rb') as f:
                    parts[name] = f.read()

        package = cls(parts, config=config)
        package._require_part(config.CONTENT_PART, path)
        return package

    def _require_part(self, name, source):
        if name not in self.parts:
            raise TemplateError(f"Invalid ODF template: missing {name} in {source}")

    def has_part(self, name):
        return name in self.parts

    def part_names(self):
        return list(self.parts)

    def read_part(self, name):
        """Return a part decoded as UTF-8 text."""
        if name not in self.parts:
            raise TemplateError(f"Part not found in template: {name}")
        return self.parts[name].decode('utf-8')

    def replace_part(self, name, data):
        """Replace (or add) a part; str data is encoded as UTF-8."""
        if isinstance(data, str):
            data = data.encode('utf-8')
        self.parts[name] = data

    def parse_part(self, name):
        """Parse an XML part and return its root element."""
        if name not in self.parts:
            raise TemplateError(f"Part not found in template: {name}")
        try:
            return ET.fromstring(self.parts[name])
        except ET.ParseError as e:
            raise TemplateError(f"Malformed XML in template part {name}: {e}")

    @staticmethod
    def elements(root, prefix, local):
        """All elements named prefix:local below (and including) root."""
        return list(root.iter(qname(f'{prefix}:{local}')))

    def to_bytes(self):
        """Serialize the container; mimetype is written first and uncompressed."""
        buffer = io.BytesIO()
        mimetype = self.config.MIMETYPE_PART
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as out_zip:
            if mimetype in self.parts:
                out_zip.writestr(zipfile.ZipInfo(mimetype), self.parts[mimetype],
                                 compress_type=zipfile.ZIP_STORED)
            for name, data in self.parts.items():
                if name == mimetype:
                    continue
                compress_type = self.compress_types.get(name, zipfile.ZIP_DEFLATED)
                out_zip.writestr(name, data, compress_type=compress_type)
        return buffer.getvalue()

    def save(self, path):
        try:
            with open(path, 'wb') as f:
                f.write(self.to_bytes())
        except OSError as e:
            logger.error("Writing %s failed: %s", path, e)
            raise

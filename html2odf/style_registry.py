"""
Deduplicating registry of generated (automatic) ODF styles.
"""

import hashlib
import logging

from .config import DEFAULT_CONFIG
from .exceptions import StyleError
from .formats import FORMAT_NAMES, style_key, text_properties
from .xml_helpers import add_elem, qname

logger = logging.getLogger('html2odf')

# style:family -> properties element
FAMILY_PROPERTIES = {
    'text': 'style:text-properties',
    'paragraph': 'style:paragraph-properties',
    'table-cell': 'style:table-cell-properties',
    'table-column': 'style:table-column-properties',
    'table-row': 'style:table-row-properties',
}

# Short family tags used in generated names
FAMILY_TAGS = {
    'text': 'text',
    'paragraph': 'para',
    'table-cell': 'cell',
    'table-column': 'col',
    'table-row': 'row',
}


class StyleRegistry:
    """Interns style definitions into a document's office:automatic-styles.

    Every definition is keyed by a canonical serialization of what it
    renders, and the generated name is derived from that key only, so
    registering the same flags or attributes again returns the existing
    name without touching the document.
    """

    def __init__(self, automatic_styles, config=None, color_ins=None, color_del=None):
        self.automatic_styles = automatic_styles
        self.config = config if config is not None else DEFAULT_CONFIG
        self.prefix = self.config.STYLE_PREFIX
        self.color_ins = color_ins or self.config.COLOR_INS
        self.color_del = color_del or self.config.COLOR_DEL
        # cache key -> generated style name
        self.style_cache = {}

    def __len__(self):
        return len(self.style_cache)

    def __contains__(self, key):
        return key in self.style_cache

    def name_for_flags(self, flags):
        names = [FORMAT_NAMES[flag] for flag in sorted(flags)]
        return '_'.join([self.prefix] + names)

    def resolve(self, flags):
        """Return the text style name rendering a flag set, registering it on first use.

        Returns None for an empty set: plain text needs no style.
        """
        if not flags:
            return None

        key = 'text:' + style_key(flags)
        if key in self.style_cache:
            return self.style_cache[key]

        attributes = {}
        for flag in sorted(flags):
            attributes.update(text_properties(flag, self.config, self.color_ins, self.color_del))

        name = self.name_for_flags(flags)
        self.append_style_node(name, 'text', attributes)
        self.style_cache[key] = name
        logger.debug("Registered text style %s for key %s", name, key)
        return name

    def register(self, family, properties, text_attributes=None, parent_style=None):
        """Return the name of a style with explicit attributes, registering it on first use.

        Args:
            family: style:family value ('table-cell', 'table-row', ...)
            properties: prefixed attributes of the family's properties element
            text_attributes: prefixed attributes of an extra style:text-properties
                element (table-cell styles only)
            parent_style: optional style:parent-style-name
        """
        if family not in FAMILY_PROPERTIES:
            raise StyleError(f"Unsupported style family: {family}")

        properties = dict(properties or {})
        text_attributes = dict(text_attributes or {})
        key = self._attribute_key(family, properties, text_attributes, parent_style)
        if key in self.style_cache:
            return self.style_cache[key]

        digest = hashlib.sha1(key.encode('utf-8')).hexdigest()[:8]
        name = f'{self.prefix}_{FAMILY_TAGS[family]}_{digest}'

        extra = None
        if text_attributes and family != 'text':
            extra = ('style:text-properties', text_attributes)
        self.append_style_node(name, family, properties, parent_style=parent_style, extra=extra)
        self.style_cache[key] = name
        logger.debug("Registered %s style %s", family, name)
        return name

    @staticmethod
    def _attribute_key(family, properties, text_attributes, parent_style):
        parts = [family, parent_style or '']
        parts.append(';'.join(f'{k}={v}' for k, v in sorted(properties.items())))
        parts.append(';'.join(f'{k}={v}' for k, v in sorted(text_attributes.items())))
        return '|'.join(parts)

    def append_style_node(self, name, family, attributes, parent_style=None, extra=None):
        """Append a <style:style> definition to the automatic styles."""
        node = add_elem(self.automatic_styles, 'style:style', {
            'style:name': name,
            'style:family': family,
        })
        if parent_style:
            node.set(qname('style:parent-style-name'), parent_style)

        if attributes or family == 'text':
            add_elem(node, FAMILY_PROPERTIES[family], attributes)
        if extra is not None:
            element, extra_attributes = extra
            add_elem(node, element, extra_attributes)
        return node

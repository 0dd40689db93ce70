"""
Small ElementTree helpers for building ODF markup.
"""

import xml.etree.ElementTree as ET

from .config import DEFAULT_CONFIG
from .exceptions import StyleError

NAMESPACES = DEFAULT_CONFIG.NAMESPACES


def register_namespaces(namespaces=None):
    """Register ODF prefixes so serialized XML keeps the usual office:/text: names."""
    for prefix, uri in (namespaces or NAMESPACES).items():
        ET.register_namespace(prefix, uri)


def qname(name, namespaces=None):
    """Expand 'text:p' to '{urn:...text:1.0}p'."""
    if name.startswith('{'):
        return name
    prefix, sep, local = name.partition(':')
    if not sep:
        return name
    namespaces = namespaces or NAMESPACES
    if prefix not in namespaces:
        raise StyleError(f"Unknown namespace prefix in '{name}'")
    return f'{{{namespaces[prefix]}}}{local}'


def expand_attributes(attributes, namespaces=None):
    """Expand every prefixed attribute name of a mapping."""
    return {qname(key, namespaces): str(value) for key, value in (attributes or {}).items()}


def make_elem(name, attrib=None, text=None):
    """Create an element from a prefixed name such as 'text:span'."""
    elem = ET.Element(qname(name), expand_attributes(attrib))
    if text is not None:
        elem.text = str(text)
    return elem


def add_elem(parent, name, attrib=None, text=None):
    """Add a child element to parent."""
    elem = ET.SubElement(parent, qname(name), expand_attributes(attrib))
    if text is not None:
        elem.text = str(text)
    return elem


def is_elem(node, name):
    return isinstance(node, ET.Element) and node.tag == qname(name)


def append_node(parent, node):
    """Append an element or a text leaf, following the ElementTree text/tail model."""
    if isinstance(node, str):
        if len(parent):
            last = parent[-1]
            last.tail = (last.tail or '') + node
        else:
            parent.text = (parent.text or '') + node
    else:
        parent.append(node)


def own_text(elem):
    """Text directly owned by an element: its .text plus its children's tails."""
    parts = [elem.text or '']
    for child in elem:
        parts.append(child.tail or '')
    return ''.join(parts)

import copy
import logging
import re
import xml.etree.ElementTree as ET

from .base import OdfDocument
from .config import DEFAULT_CONFIG
from .exceptions import TemplateError
from .formats import FormatFlag, VISUAL_FLAGS, classes_to_flags, tag_rule
from .html_source import NODE_ELEMENT, NODE_TEXT, css_classes, node_kind
from .xml_helpers import append_node, is_elem, make_elem, own_text, qname

logger = logging.getLogger('html2odf')

STYLE_NAME = qname('text:style-name')

# Output nodes allowed as direct children of a list item or the text body
BLOCK_NODES = ('text:p', 'text:h', 'text:list')


class PageContext:
    """Content queued for one logical page of the output document."""

    def __init__(self, page_index):
        self.page_index = page_index
        # (compiled pattern, replacement) in the order they were added
        self.replaces = []
        # {'html': str, 'line_numbered': bool}
        self.text_blocks = []
        # Line numbering: the first numbered paragraph of a page gets its own style
        self.line_template_first_used = False

    def apply_replaces(self, text):
        if not text:
            return text
        for pattern, replacement in self.replaces:
            text = pattern.sub(lambda match, value=replacement: value, text)
        return text


class TextTransformer:
    """Recursive HTML -> ODF text converter for one page.

    transform() returns a list of output nodes: ElementTree elements in the
    text: namespace and plain strings for text leaves.
    """

    def __init__(self, styles, page, node_template=None, config=None, check_depth=None):
        self.styles = styles
        self.page = page
        self.config = config if config is not None else DEFAULT_CONFIG
        if node_template is None or node_template.tag != qname('text:p'):
            node_template = make_elem('text:p')
        self.node_template = node_template
        self.check_depth = check_depth

    # --- Line numbering ---

    def base_style(self, line_numbered):
        if not line_numbered:
            return self.config.STYLE_STANDARD
        if self.page.line_template_first_used:
            return self.config.STYLE_LINE_NUMBERED_STANDARD
        self.page.line_template_first_used = True
        return self.config.STYLE_LINE_NUMBERED_FIRST

    def next_node_template(self, line_numbered):
        """A fresh copy of the page's paragraph template."""
        node = ET.Element(self.node_template.tag, dict(self.node_template.attrib))
        node.set(STYLE_NAME, self.base_style(line_numbered))
        return node

    def create_node_with_base_style(self, name, line_numbered):
        return make_elem(name, {'text:style-name': self.base_style(line_numbered)})

    # --- Conversion ---

    def convert_body(self, body, line_numbered=False):
        """Convert the children of a parsed <body> into block-level nodes."""
        nodes = []
        for child in body.children:
            nodes.extend(self.transform(child, line_numbered, False, frozenset()))
        return self.wrap_inline_runs(nodes, line_numbered)

    def transform(self, node, line_numbered, inside_paragraph=False, inherited_styles=frozenset(), depth=0):
        kind = node_kind(node)
        if kind == NODE_TEXT:
            return [self._text_leaf(str(node), inherited_styles)]
        if kind != NODE_ELEMENT:
            logger.debug("Skipping %s node", type(node).__name__)
            return []

        if self.check_depth is not None:
            self.check_depth(depth)

        rule = tag_rule(node.name)
        own_flags = rule.flags | classes_to_flags(css_classes(node))
        child_styles = inherited_styles | own_flags
        source = node
        child_inside = inside_paragraph

        if rule.kind == 'transparent':
            # <div> has no counterpart in ODF, its children take its place
            return self._transform_children(node, line_numbered, inside_paragraph, child_styles, depth)

        if rule.kind == 'span':
            dst = make_elem('text:span')
            child_inside = True
            style_name = self.styles.resolve(own_flags & VISUAL_FLAGS)
            if style_name:
                dst.set(STYLE_NAME, style_name)
        elif rule.kind == 'line-break':
            dst = make_elem('text:line-break')
        elif rule.kind == 'link':
            dst = make_elem('text:a', {'xlink:type': 'simple'})
            href = node.get('href')
            if href:
                dst.set(qname('xlink:href'), href)
            child_inside = True
        elif rule.kind == 'paragraph':
            # ODF forbids nested paragraphs
            dst = self.create_node_with_base_style('text:span' if inside_paragraph else 'text:p', line_numbered)
            child_inside = True
        elif rule.kind == 'blockquote':
            dst = self.create_node_with_base_style('text:span' if inside_paragraph else 'text:p', line_numbered)
            if line_numbered:
                dst.set(STYLE_NAME, self.config.STYLE_BLOCKQUOTE_LINE_NUMBERED)
            else:
                dst.set(STYLE_NAME, self.config.STYLE_BLOCKQUOTE)
            only_child = self._single_paragraph_child(node)
            if only_child is not None:
                source = only_child
                child_styles = child_styles | classes_to_flags(css_classes(only_child))
            child_inside = True
        elif rule.kind == 'heading':
            dst = self.create_node_with_base_style('text:span' if inside_paragraph else 'text:p', line_numbered)
            dst.set(STYLE_NAME, self.config.STYLE_HEADINGS[rule.style])
            child_inside = True
        elif rule.kind == 'list':
            dst = make_elem('text:list')
        elif rule.kind == 'list-item':
            dst = make_elem('text:list-item')
            child_inside = False
        else:
            raise ValueError(f"Unhandled tag kind: {rule.kind}")

        children = self._transform_children(source, line_numbered, child_inside, child_styles, depth)
        if rule.kind == 'list':
            children = [child for child in children if not _is_blank(child)]
        if rule.needs_intermediate_p and children:
            children = self.wrap_inline_runs(children, line_numbered)

        for child in children:
            append_node(dst, child)
        return [dst]

    def _transform_children(self, node, line_numbered, inside_paragraph, styles, depth):
        result = []
        for child in node.children:
            result.extend(self.transform(child, line_numbered, inside_paragraph, styles, depth + 1))
        return result

    @staticmethod
    def _single_paragraph_child(node):
        children = list(node.children)
        if len(children) == 1 and node_kind(children[0]) == NODE_ELEMENT and children[0].name == 'p':
            return children[0]
        return None

    def _text_leaf(self, text, styles):
        if not text.strip():
            # blank text is never marked
            return text
        leaf = text
        if FormatFlag.DELETE in styles:
            leaf = self._wrap_span(leaf, FormatFlag.DELETE)
        if FormatFlag.INSERT in styles:
            leaf = self._wrap_span(leaf, FormatFlag.INSERT)
        return leaf

    def _wrap_span(self, node, flag):
        span = make_elem('text:span', {'text:style-name': self.styles.resolve(frozenset([flag]))})
        append_node(span, node)
        return span

    def wrap_inline_runs(self, nodes, line_numbered):
        """Move every run of inline nodes into a template paragraph.

        Paragraphs and lists stay where they are; runs consisting of
        whitespace only are dropped.
        """
        result = []
        run = []

        def flush():
            if run and not all(_is_blank(item) for item in run):
                paragraph = self.next_node_template(line_numbered)
                for item in run:
                    append_node(paragraph, item)
                result.append(paragraph)
            del run[:]

        for node in nodes:
            if any(is_elem(node, name) for name in BLOCK_NODES):
                flush()
                result.append(node)
            else:
                run.append(node)
        flush()
        return result


def _is_blank(node):
    return isinstance(node, str) and not node.strip()


class HtmlToOdt(OdfDocument):
    """Word-processor document assembled from HTML blocks, one template copy per page."""

    TEMPLATE_KIND = 'text'
    MEDIA_TYPE = 'application/vnd.oasis.opendocument.text'

    def __init__(self, template_file=None, trust_html=False, color_ins=None, color_del=None, config=None):
        super().__init__(template_file, trust_html=trust_html, color_ins=color_ins,
                         color_del=color_del, config=config)
        self.dummy_pattern = re.compile(self.config.DUMMY_MARKER, re.IGNORECASE | re.DOTALL)
        self.anchor_pattern = re.compile(self.config.TEXT_ANCHOR_MARKER, re.IGNORECASE | re.DOTALL)
        self.pages = [PageContext(0)]

    @property
    def current_page(self):
        return self.pages[-1]

    def next_page(self):
        """Start a new page; following replaces and text blocks belong to it."""
        page = PageContext(len(self.pages))
        self.pages.append(page)
        return page.page_index

    def add_replace(self, search, replace):
        """Replace a pattern in the template's text on the current page.

        Args:
            search: regular expression (str, matched case-insensitively) or compiled pattern
            replace: literal replacement text
        """
        if isinstance(search, str):
            search = re.compile(search, re.IGNORECASE)
        self.current_page.replaces.append((search, str(replace)))

    def add_html_text_block(self, html, line_numbered=False):
        """Queue an HTML fragment for the current page's text anchor."""
        self.current_page.text_blocks.append({'html': html, 'line_numbered': line_numbered})

    # --- Assembly ---

    def _get_text_body(self):
        path = f"{qname('office:body')}/{qname('office:text')}"
        body = self.content_root.find(path)
        if body is None:
            raise TemplateError("Could not parse ODT template: office:body/office:text not found")
        return body

    def create(self):
        body = self._get_text_body()
        structural = {qname(f'{prefix}:{local}') for prefix, local in self.config.STRUCTURAL_BODY_ELEMENTS}

        captured = [child for child in body if child.tag not in structural]
        templates = []
        for child in captured:
            template = self._prune_dummies(copy.deepcopy(child))
            if template is not None:
                templates.append(template)
        logger.debug("Captured %d template nodes (%d dropped)", len(templates), len(captured) - len(templates))

        page_nodes = []
        for page in self.pages:
            if page.page_index > 0 and self.config.STYLE_PAGE_BREAK:
                page_nodes.append(make_elem('text:p', {'text:style-name': self.config.STYLE_PAGE_BREAK}))
            page_nodes.extend(self._assemble_page(page, templates))

        for child in captured:
            body.remove(child)
        body.extend(page_nodes)
        logger.debug("Assembled %d pages into %d body nodes", len(self.pages), len(page_nodes))

    def _prune_dummies(self, root):
        """Drop subtrees carrying the dummy marker; returns None if root itself goes."""
        if self.dummy_pattern.search(own_text(root)):
            return None
        for parent in list(root.iter()):
            for child in list(parent):
                if self.dummy_pattern.search(own_text(child)):
                    _remove_keep_tail(parent, child)
        return root

    def _clone_with_replaces(self, node, page):
        clone = copy.deepcopy(node)
        if page.replaces:
            for elem in clone.iter():
                elem.text = page.apply_replaces(elem.text)
                elem.tail = page.apply_replaces(elem.tail)
        return clone

    def _find_anchor(self, clones):
        """Return (anchor, parent) for the paragraph holding the text anchor marker."""
        for clone in clones:
            parents = {child: parent for parent in clone.iter() for child in parent}
            for elem in clone.iter():
                if not self.anchor_pattern.search(own_text(elem)):
                    continue
                # Generated paragraphs replace the enclosing paragraph, not a span in it
                anchor = elem
                while not (is_elem(anchor, 'text:p') or is_elem(anchor, 'text:h')) and anchor in parents:
                    anchor = parents[anchor]
                if not (is_elem(anchor, 'text:p') or is_elem(anchor, 'text:h')):
                    anchor = elem
                return anchor, parents.get(anchor)
        return None, None

    def _assemble_page(self, page, templates):
        clones = [self._clone_with_replaces(node, page) for node in templates]

        anchor, parent = self._find_anchor(clones)
        if anchor is None:
            raise TemplateError(
                f"Template has no text anchor matching {self.config.TEXT_ANCHOR_MARKER} "
                f"(page {page.page_index})"
            )

        transformer = TextTransformer(self.styles, page,
                                      node_template=ET.Element(anchor.tag, dict(anchor.attrib)),
                                      config=self.config, check_depth=self.check_depth)
        new_nodes = []
        for block in page.text_blocks:
            body = self.html_to_dom(block['html'])
            new_nodes.extend(transformer.convert_body(body, block['line_numbered']))
        logger.debug("Page %d: %d text blocks -> %d nodes", page.page_index, len(page.text_blocks), len(new_nodes))

        if parent is None:
            index = clones.index(anchor)
            clones[index:index + 1] = new_nodes
        else:
            _replace_child(parent, anchor, new_nodes)
        return clones


def _remove_keep_tail(parent, child):
    """Remove child from parent without losing the text that follows it."""
    if child.tail:
        index = list(parent).index(child)
        if index > 0:
            previous = parent[index - 1]
            previous.tail = (previous.tail or '') + child.tail
        else:
            parent.text = (parent.text or '') + child.tail
    parent.remove(child)


def _replace_child(parent, child, new_nodes):
    index = list(parent).index(child)
    for offset, node in enumerate(new_nodes):
        parent.insert(index + offset, node)
    _remove_keep_tail(parent, child)

import logging
from collections import namedtuple
from collections.abc import Mapping

from .base import OdfDocument
from .exceptions import ConversionError, TemplateError
from .formats import FormatFlag, classes_to_flags, classify, linebreak_after, style_key
from .html_source import NODE_ELEMENT, NODE_TEXT, css_classes, node_kind, strip_tags
from .package import OdfPackage
from .xml_helpers import add_elem, make_elem, qname

logger = logging.getLogger('html2odf')

# A run of text plus the formatting active at that point; a token whose
# formattings contain LINEBREAK marks a paragraph boundary.
Token = namedtuple('Token', 'text formattings')


class TokenFlattener:
    """Flattens HTML into formatted text runs for spreadsheet cells.

    Cells cannot hold the nested structure of the text path, so the tree is
    reduced to a token stream and regrouped into flat paragraphs of spans.
    """

    def __init__(self, styles, check_depth=None):
        self.styles = styles
        self.check_depth = check_depth
        # style key -> style name
        self.class_cache = {}

    def flatten(self, node, active_flags=frozenset(), depth=0):
        tokens = []
        for child in node.children:
            kind = node_kind(child)
            if kind == NODE_ELEMENT:
                if self.check_depth is not None:
                    self.check_depth(depth)
                flags = active_flags | classify(child.name, css_classes(child))
                tokens.extend(self.flatten(child, flags, depth + 1))
                boundary = linebreak_after(child.name)
                if boundary is not None:
                    tokens.append(Token('', boundary))
            elif kind == NODE_TEXT:
                tokens.append(Token(str(child), active_flags))
        return tokens

    def style_for(self, flags):
        key = style_key(flags)
        if key not in self.class_cache:
            self.class_cache[key] = self.styles.resolve(frozenset(flags))
        return self.class_cache[key]

    def to_paragraphs(self, tokens):
        """Group tokens into text:p elements, one per boundary token."""
        paragraphs = []
        current = make_elem('text:p')
        has_content = False

        for token in tokens:
            if token.text.strip():
                attrib = {}
                if token.formattings:
                    attrib['text:style-name'] = self.style_for(token.formattings)
                add_elem(current, 'text:span', attrib, token.text)
                has_content = True

            if FormatFlag.LINEBREAK in token.formattings:
                paragraphs.append(current)
                current = make_elem('text:p')
                has_content = False

        if has_content or not paragraphs:
            paragraphs.append(current)
        return paragraphs


def _format_number(value):
    return '%g' % value


class HtmlToOds(OdfDocument):
    """Spreadsheet with a single table filled cell by cell."""

    TEMPLATE_KIND = 'spreadsheet'
    MEDIA_TYPE = 'application/vnd.oasis.opendocument.spreadsheet'

    TYPE_TEXT = 0
    TYPE_NUMBER = 1
    TYPE_HTML = 2
    TYPE_LINK = 3
    CELL_TYPES = (TYPE_TEXT, TYPE_NUMBER, TYPE_HTML, TYPE_LINK)

    def __init__(self, template_file=None, trust_html=False, color_ins=None, color_del=None, config=None):
        super().__init__(template_file, trust_html=trust_html, color_ins=color_ins,
                         color_del=color_del, config=config)
        # row -> col -> cell entry
        self.matrix = {}
        self.matrix_rows = 0
        self.matrix_cols = 0
        self.col_widths = {}
        self.row_heights = {}
        # (row, col) -> {'cell': {...}, 'text': {...}}
        self.cell_styles = {}
        self.pre_save_hook = None
        self.flattener = TokenFlattener(self.styles, check_depth=self.check_depth)

    def _init_row(self, row):
        if row < 0:
            raise ConversionError(f"Row index must not be negative: {row}")
        self.matrix.setdefault(row, {})
        self.matrix_rows = max(self.matrix_rows, row)

    def set_cell(self, row, col, content_type, content, css_class=None, styles=None):
        """Store the content of a cell.

        Args:
            row: 0-based row index
            col: 0-based column index
            content_type: one of TYPE_TEXT, TYPE_NUMBER, TYPE_HTML, TYPE_LINK
            content: a string, or for TYPE_LINK a mapping with 'href' and 'text'
            css_class: classes applied to the whole content of an HTML cell
            styles: cell properties, e.g. {'fo:wrap-option': 'no-wrap'}

        Raises:
            ConversionError: On an unknown type, negative index or malformed link
        """
        if content_type not in self.CELL_TYPES:
            raise ConversionError(f"Unknown cell type: {content_type}")
        if col < 0:
            raise ConversionError(f"Column index must not be negative: {col}")
        if content_type == self.TYPE_LINK:
            if not isinstance(content, Mapping) or 'href' not in content or 'text' not in content:
                raise ConversionError("Link cells need a mapping with 'href' and 'text'")

        self._init_row(row)
        self.matrix_cols = max(self.matrix_cols, col)
        self.matrix[row][col] = {
            'type': content_type,
            'content': content,
            'class': css_class,
            'styles': dict(styles or {}),
        }

    def set_column_width(self, col, width_cm):
        self.col_widths[col] = width_cm

    def set_min_row_height(self, row, height):
        """Raise the height hint (in text lines) of a row; it never decreases."""
        self._init_row(row)
        current = self.row_heights.get(row, self.config.DEFAULT_MIN_ROW_HEIGHT)
        self.row_heights[row] = max(current, height)

    def set_cell_style(self, row, col, cell_attributes=None, text_attributes=None):
        """Merge cell and text properties into the style of one cell."""
        entry = self.cell_styles.setdefault((row, col), {'cell': {}, 'text': {}})
        entry['cell'].update(cell_attributes or {})
        entry['text'].update(text_attributes or {})

    def draw_border(self, from_row, from_col, to_row, to_col, width):
        """Draw a solid black frame around a cell range; width in points."""
        line = f'{_format_number(width)}pt solid #000000'
        for row in range(from_row, to_row + 1):
            self.set_cell_style(row, from_col, {'fo:border-left': line})
            self.set_cell_style(row, to_col, {'fo:border-right': line})
        for col in range(from_col, to_col + 1):
            self.set_cell_style(from_row, col, {'fo:border-top': line})
            self.set_cell_style(to_row, col, {'fo:border-bottom': line})

    def set_pre_save_hook(self, callback):
        """Register callback(content_root), run after the table is built."""
        self.pre_save_hook = callback

    def html_to_ods_nodes(self, html, css_class=None):
        body = self.html_to_dom(html)
        tokens = self.flattener.flatten(body, classes_to_flags(css_class))
        return self.flattener.to_paragraphs(tokens)

    # --- Assembly ---

    def _get_clean_table(self):
        tables = OdfPackage.elements(self.content_root, 'table', 'table')
        if len(tables) != 1:
            raise TemplateError(
                f"Could not parse ODS template: expected exactly one table:table, found {len(tables)}"
            )
        table = tables[0]
        for child in list(table):
            table.remove(child)
        table.text = None
        return table

    def _set_column_styles(self, table):
        for col in range(self.matrix_cols + 1):
            column = add_elem(table, 'table:table-column')
            if col in self.col_widths:
                style_name = self.styles.register('table-column', {
                    'style:column-width': _format_number(self.col_widths[col]) + 'cm',
                })
                column.set(qname('table:style-name'), style_name)

    def _set_cell_content(self, table):
        """Emit the dense row/cell grid; returns (row nodes, cell nodes by (row, col))."""
        row_nodes = {}
        cell_nodes = {}
        for row in range(self.matrix_rows + 1):
            row_node = add_elem(table, 'table:table-row')
            row_nodes[row] = row_node
            for col in range(self.matrix_cols + 1):
                cell_node = add_elem(row_node, 'table:table-cell')
                cell_nodes[(row, col)] = cell_node
                cell = self.matrix.get(row, {}).get(col)
                if cell is not None:
                    self._fill_cell(cell_node, row, col, cell)
        return row_nodes, cell_nodes

    def _fill_cell(self, cell_node, row, col, cell):
        content_type = cell['type']
        content = cell['content']

        if content_type == self.TYPE_TEXT:
            add_elem(cell_node, 'text:p', text=content)
        elif content_type == self.TYPE_NUMBER:
            value = str(content)
            add_elem(cell_node, 'text:p', text=value)
            cell_node.set(qname('calcext:value-type'), 'float')
            cell_node.set(qname('office:value-type'), 'float')
            cell_node.set(qname('office:value'), value)
        elif content_type == self.TYPE_LINK:
            paragraph = add_elem(cell_node, 'text:p')
            add_elem(paragraph, 'text:a', {
                'xlink:type': 'simple',
                'xlink:href': content['href'],
            }, text=content['text'])
        elif content_type == self.TYPE_HTML:
            for node in self.html_to_ods_nodes(content, cell['class']):
                cell_node.append(node)

            if cell['styles'].get('fo:wrap-option') == 'no-wrap':
                wrap = 'no-wrap'
                height = 1
            else:
                wrap = 'wrap'
                width = self.col_widths.get(col, self.config.DEFAULT_COLUMN_WIDTH_CM)
                height = len(strip_tags(content)) / (width * self.config.CHARS_PER_CM)
            self.set_cell_style(row, col, {'fo:wrap-option': wrap}, {'fo:hyphenate': 'true'})
            self.set_min_row_height(row, height)

    def _set_row_styles(self, row_nodes):
        for row, height in sorted(self.row_heights.items()):
            style_name = self.styles.register('table-row', {
                'style:row-height': _format_number(height * self.config.ROW_HEIGHT_CM_PER_LINE) + 'cm',
            })
            row_nodes[row].set(qname('table:style-name'), style_name)

    def _set_cell_styles(self, cell_nodes):
        for (row, col), cell_node in cell_nodes.items():
            entry = self.cell_styles.get((row, col), {'cell': {}, 'text': {}})
            cell = self.matrix.get(row, {}).get(col)

            properties = dict(self.config.CELL_DEFAULT_PROPERTIES)
            properties.update(entry['cell'])
            if cell is not None:
                properties.update(cell['styles'])

            style_name = self.styles.register('table-cell', properties, entry['text'],
                                              parent_style=self.config.CELL_PARENT_STYLE)
            cell_node.set(qname('table:style-name'), style_name)

    def create(self):
        table = self._get_clean_table()
        self._set_column_styles(table)
        row_nodes, cell_nodes = self._set_cell_content(table)
        self._set_row_styles(row_nodes)
        self._set_cell_styles(cell_nodes)
        logger.debug("Built table with %d rows, %d columns, %d styles",
                     self.matrix_rows + 1, self.matrix_cols + 1, len(self.styles))

        if self.pre_save_hook is not None:
            self.pre_save_hook(self.content_root)

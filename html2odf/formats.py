"""
Mapping of HTML elements to semantic formatting flags.

Everything in here is pure: the converters look tags and CSS classes up in
the tables below instead of branching per tag, so each tag can be checked on
its own.
"""

from collections import namedtuple
from enum import IntEnum

from .config import DEFAULT_CONFIG


class FormatFlag(IntEnum):
    LINEBREAK = 0
    BOLD = 1
    ITALIC = 2
    UNDERLINE = 3
    STRIKE = 4
    INSERT = 5
    DELETE = 6
    LINK = 7
    INDENT = 8
    SUPERSCRIPT = 9
    SUBSCRIPT = 10


# Stable short names, used to build generated style names
FORMAT_NAMES = {
    FormatFlag.LINEBREAK: 'linebreak',
    FormatFlag.BOLD: 'bold',
    FormatFlag.ITALIC: 'italic',
    FormatFlag.UNDERLINE: 'underlined',
    FormatFlag.STRIKE: 'strike',
    FormatFlag.INSERT: 'ins',
    FormatFlag.DELETE: 'del',
    FormatFlag.LINK: 'link',
    FormatFlag.INDENT: 'indented',
    FormatFlag.SUPERSCRIPT: 'sup',
    FormatFlag.SUBSCRIPT: 'sub',
}

# Flags with a visual representation on an inline span
VISUAL_FLAGS = frozenset([
    FormatFlag.BOLD,
    FormatFlag.ITALIC,
    FormatFlag.UNDERLINE,
    FormatFlag.STRIKE,
    FormatFlag.SUPERSCRIPT,
    FormatFlag.SUBSCRIPT,
])

CLASS_FLAGS = {
    'underline': FormatFlag.UNDERLINE,
    'strike': FormatFlag.STRIKE,
    'ins': FormatFlag.INSERT,
    'inserted': FormatFlag.INSERT,
    'del': FormatFlag.DELETE,
    'deleted': FormatFlag.DELETE,
    'superscript': FormatFlag.SUPERSCRIPT,
    'subscript': FormatFlag.SUBSCRIPT,
}

# kind:                 output node shape on the word-processor path
# flags:                formatting the tag itself introduces
# style:                heading style key (see ConversionConfig.STYLE_HEADINGS)
# needs_intermediate_p: children must be wrapped into paragraphs
# linebreak_after:      token appended after the element on the spreadsheet path
TagRule = namedtuple('TagRule', 'kind flags style needs_intermediate_p linebreak_after')

_BREAK = frozenset([FormatFlag.LINEBREAK])
_BREAK_BOLD = frozenset([FormatFlag.LINEBREAK, FormatFlag.BOLD])


def _rule(kind, flags=(), style=None, needs_intermediate_p=False, linebreak_after=None):
    return TagRule(kind, frozenset(flags), style, needs_intermediate_p, linebreak_after)


TAG_RULES = {
    'b': _rule('span', [FormatFlag.BOLD]),
    'strong': _rule('span', [FormatFlag.BOLD]),
    'i': _rule('span', [FormatFlag.ITALIC]),
    'em': _rule('span', [FormatFlag.ITALIC]),
    's': _rule('span', [FormatFlag.STRIKE]),
    'u': _rule('span', [FormatFlag.UNDERLINE]),
    'sub': _rule('span', [FormatFlag.SUBSCRIPT]),
    'sup': _rule('span', [FormatFlag.SUPERSCRIPT]),
    'del': _rule('span', [FormatFlag.DELETE]),
    'ins': _rule('span', [FormatFlag.INSERT]),
    'span': _rule('span'),
    'br': _rule('line-break', linebreak_after=_BREAK),
    'a': _rule('link', [FormatFlag.LINK]),
    'p': _rule('paragraph', linebreak_after=_BREAK),
    'div': _rule('transparent', linebreak_after=_BREAK),
    'blockquote': _rule('blockquote', linebreak_after=_BREAK),
    'ul': _rule('list', [FormatFlag.INDENT]),
    'ol': _rule('list', [FormatFlag.INDENT]),
    'li': _rule('list-item', needs_intermediate_p=True, linebreak_after=_BREAK),
    'h1': _rule('heading', [FormatFlag.BOLD], style='H1', linebreak_after=_BREAK_BOLD),
    'h2': _rule('heading', [FormatFlag.BOLD], style='H2', linebreak_after=_BREAK_BOLD),
    'h3': _rule('heading', [FormatFlag.BOLD], style='H3', linebreak_after=_BREAK_BOLD),
    'h4': _rule('heading', [FormatFlag.BOLD], style='H4', linebreak_after=_BREAK_BOLD),
    'h5': _rule('heading', [FormatFlag.BOLD], style='H4', linebreak_after=_BREAK_BOLD),
    'h6': _rule('heading', [FormatFlag.BOLD], style='H4', linebreak_after=_BREAK_BOLD),
}

DEFAULT_RULE = TAG_RULES['span']

RECOGNIZED_TAGS = frozenset(TAG_RULES)


def tag_rule(tag_name):
    """Return the TagRule for a tag name; unknown tags behave like <span>."""
    if not tag_name:
        return DEFAULT_RULE
    return TAG_RULES.get(tag_name.lower(), DEFAULT_RULE)


def split_classes(css_classes):
    """Normalize a class attribute (string, list or None) to a list of names."""
    if not css_classes:
        return []
    if isinstance(css_classes, str):
        return css_classes.split()
    return list(css_classes)


def classes_to_flags(css_classes):
    return frozenset(
        CLASS_FLAGS[name] for name in split_classes(css_classes) if name in CLASS_FLAGS
    )


def classify(tag_name, css_classes=None):
    """Return the set of formatting flags an element introduces."""
    return tag_rule(tag_name).flags | classes_to_flags(css_classes)


def linebreak_after(tag_name):
    """Flags of the boundary token that follows an element, or None."""
    return tag_rule(tag_name).linebreak_after


def style_key(flags):
    """Canonical, order-independent key of a flag set."""
    return '_'.join(str(int(flag)) for flag in sorted(flags))


def text_properties(flag, config=None, color_ins=None, color_del=None):
    """Return the ODF text-properties attributes that render a flag."""
    config = config if config is not None else DEFAULT_CONFIG
    underline = {
        'style:text-underline-style': 'solid',
        'style:text-underline-width': 'auto',
        'style:text-underline-color': 'font-color',
    }
    line_through = {
        'style:text-line-through-style': 'solid',
        'style:text-line-through-type': 'single',
    }

    if flag == FormatFlag.BOLD:
        return {
            'fo:font-weight': 'bold',
            'style:font-weight-asian': 'bold',
            'style:font-weight-complex': 'bold',
        }
    if flag == FormatFlag.ITALIC:
        return {
            'fo:font-style': 'italic',
            'style:font-style-asian': 'italic',
            'style:font-style-complex': 'italic',
        }
    if flag == FormatFlag.UNDERLINE:
        return underline
    if flag == FormatFlag.STRIKE:
        return line_through
    if flag == FormatFlag.INSERT:
        return {'fo:color': color_ins or config.COLOR_INS, **underline}
    if flag == FormatFlag.DELETE:
        return {'fo:color': color_del or config.COLOR_DEL, **line_through}
    if flag == FormatFlag.SUPERSCRIPT:
        return {'style:text-position': config.SUPERSCRIPT_POSITION}
    if flag == FormatFlag.SUBSCRIPT:
        return {'style:text-position': config.SUBSCRIPT_POSITION}
    # LINK, INDENT and LINEBREAK are structural
    return {}

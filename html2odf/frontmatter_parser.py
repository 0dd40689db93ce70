"""
YAML front matter parser using python-frontmatter.
"""

import re

import frontmatter


def parse_markdown_with_frontmatter(file_path: str) -> tuple[dict, str]:
    """
    Parse a Markdown file with YAML front matter.

    Args:
        file_path: Path to the Markdown file

    Returns:
        (metadata_dict, markdown_content_without_frontmatter)
    """
    post = frontmatter.load(file_path)
    return dict(post.metadata), post.content


def parse_markdown_string_with_frontmatter(markdown_text: str) -> tuple[dict, str]:
    """
    Parse a Markdown string with YAML front matter.

    Args:
        markdown_text: Markdown content as string

    Returns:
        (metadata_dict, markdown_content_without_frontmatter)
    """
    post = frontmatter.loads(markdown_text)
    return dict(post.metadata), post.content


def metadata_to_replaces(metadata: dict, prefix: str = '') -> dict:
    """
    Turn front matter metadata into template replacements.

    Every key becomes a ``{{KEY}}`` placeholder (matched case-insensitively);
    nested mappings use dotted keys.

    Input:  {"title": "Report", "author": {"name": "Kim"}, "tags": ["a", "b"]}
    Output: {r"\\{\\{title\\}\\}": "Report", r"\\{\\{author\\.name\\}\\}": "Kim",
             r"\\{\\{tags\\}\\}": "a, b"}

    Args:
        metadata: Dictionary of metadata from front matter
        prefix: Dotted key prefix for nested mappings

    Returns:
        Mapping of regular expression -> replacement text
    """
    replaces = {}

    for key, value in metadata.items():
        name = f'{prefix}{key}'
        if isinstance(value, dict):
            replaces.update(metadata_to_replaces(value, prefix=name + '.'))
            continue

        if isinstance(value, list):
            text = ', '.join(str(v) for v in value)
        elif isinstance(value, bool):
            text = 'true' if value else 'false'
        elif value is None:
            text = ''
        else:
            text = str(value)
        replaces[re.escape('{{' + name + '}}')] = text

    return replaces

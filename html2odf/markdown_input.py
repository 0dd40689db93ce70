"""
Markdown input: renders Markdown to the HTML vocabulary the converters understand.
"""

from bs4 import BeautifulSoup
from marko import Markdown

# Tags marko emits that have a closer equivalent in the converter vocabulary
TAG_RENAMES = {
    'del': 's',  # ~~text~~ is strike-through, not a tracked deletion
    'h5': 'h4',
    'h6': 'h4',
}


def markdown_to_html(markdown_text):
    """Render Markdown (GitHub flavored) to an HTML fragment."""
    md = Markdown(extensions=['gfm'])
    html = md.convert(markdown_text)

    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup.find_all(list(TAG_RENAMES)):
        tag.name = TAG_RENAMES[tag.name]
    return str(soup)

"""
html2odf - HTML to OpenDocument Converter

Converts HTML (or Markdown) files into an ODT document, one page per input file.
"""

import argparse
import logging
import re
import sys

from . import __version__
from .converter_api import build_document, read_input_file
from .exceptions import OdfError

logger = logging.getLogger('html2odf')


def setup_logging(verbose=False, quiet=False):
    """Configure logging based on CLI flags.

    Args:
        verbose: If True, show DEBUG level messages
        quiet: If True, suppress all non-error output
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger = logging.getLogger('html2odf')
    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def parse_replace(value):
    """argparse type for KEY=VALUE; KEY fills the {{KEY}} placeholder."""
    key, sep, text = value.partition('=')
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{value}'")
    return re.escape('{{' + key + '}}'), text


def build_parser():
    parser = argparse.ArgumentParser(
        prog="html2odf",
        description="Convert HTML or Markdown to an OpenDocument text file.",
        epilog="Examples:\n"
               "  html2odf input.html -o output.odt\n"
               "  html2odf part1.html part2.md -o output.odt --line-numbered\n"
               "  html2odf input.html -t template.odt --replace TITLE=Minutes -o output.odt",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("input_files", nargs="+",
                        help="Input files (.html, .htm, .md); each one becomes a page")
    parser.add_argument("-o", "--output", required=True, help="Output .odt file")
    parser.add_argument("-t", "--template", default=None,
                        help="Template .odt containing the {{HTML2ODF:TEXT}} anchor "
                             "(default: built-in template)")
    parser.add_argument("--line-numbered", action="store_true", default=False,
                        help="Number the lines of the converted text")
    parser.add_argument("--trust-html", action="store_true", default=False,
                        help="Do not sanitize the HTML input")
    parser.add_argument("--replace", action="append", type=parse_replace, default=[],
                        metavar="KEY=VALUE", help="Replace {{KEY}} in the template (repeatable)")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Show detailed debug output")
    parser.add_argument("-q", "--quiet", action="store_true", default=False,
                        help="Suppress all non-error output")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    if not args.output.lower().endswith('.odt'):
        logger.error("Unsupported output format: %s (expected .odt)", args.output)
        sys.exit(1)

    try:
        pages = [read_input_file(path) for path in args.input_files]
        document = build_document(
            pages,
            template_file=args.template,
            line_numbered=args.line_numbered,
            replaces=dict(args.replace),
            trust_html=args.trust_html,
        )
        document.save(args.output)
    except OdfError as e:
        logger.error("%s", e)
        sys.exit(1)
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

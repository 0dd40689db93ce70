"""
Custom exception classes for the html2odf converter.
"""


class OdfError(Exception):
    """Base exception for all html2odf errors."""
    pass


class TemplateError(OdfError):
    """Error related to the template document (missing parts, markers or tables)."""
    pass


class StyleError(OdfError):
    """Error related to style registration."""
    pass


class ConversionError(OdfError):
    """Error during HTML-to-ODF conversion caused by invalid caller input."""
    pass


class SecurityError(OdfError):
    """Error related to security validation (size limits, nesting depth, etc.)."""
    pass

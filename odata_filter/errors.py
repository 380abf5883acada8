"""
Exceptions raised by the filter builder.

Empty or absent rules are never errors: they are silently ignored so that
optional rules compose. Exceptions are reserved for contract violations.
"""

from typing import Any, Dict, Optional


class ODataFilterError(Exception):
    """Base exception for all filter builder errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputKind(ODataFilterError, TypeError):
    """
    Raised when a rule or field argument is of an unsupported kind.

    Examples:
    - A number passed where a field name is expected
    - A field callback returning something other than text
    - A rule callback returning something other than a builder or text
    """

    pass


class RuleTreeDocumentError(ODataFilterError, ValueError):
    """
    Raised when a stored rule tree document cannot be loaded.

    Examples:
    - File not found or unsupported extension
    - Document does not match the rule tree schema
    """

    pass

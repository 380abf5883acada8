"""
Expression layer: value literals, comparisons and canonical functions.
"""

from .canonical import (
    InputField,
    CanonicalFunctions,
    functions,
    normalise_value,
    format_literal,
    field_to_str,
    canonical_function,
    compare,
    compare_map,
    compare_in,
    compare_not_in,
    negate,
    contains,
    starts_with,
    ends_with,
)

__all__ = [
    "InputField",
    "CanonicalFunctions",
    "functions",
    "normalise_value",
    "format_literal",
    "field_to_str",
    "canonical_function",
    "compare",
    "compare_map",
    "compare_in",
    "compare_not_in",
    "negate",
    "contains",
    "starts_with",
    "ends_with",
]

from __future__ import annotations
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Optional, Union

from ..errors import InvalidInputKind
from ..filters import Condition, Leaf

InputField = Union[str, Callable[["CanonicalFunctions"], str]]

# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

def _format_timestamp(value: Union[date, datetime]) -> str:
    """
    ISO-8601 UTC timestamp with milliseconds, e.g. 2016-03-22T10:15:00.000Z.
    Naive datetimes are taken as UTC, plain dates as UTC midnight.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"

def normalise_value(value: Any) -> Any:
    """
    Quote text, render dates as timestamps, pass anything else through.
    """
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    if isinstance(value, (date, datetime)):
        return _format_timestamp(value)
    return value

def format_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)

def _render(value: Any, normalise: bool) -> str:
    return format_literal(normalise_value(value) if normalise else value)

# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

def field_to_str(field: InputField) -> str:
    """
    Resolve a field given as text or as a callback over the function table.
    """
    if isinstance(field, str):
        return field
    if callable(field):
        result = field(functions)
        if not isinstance(result, str):
            raise InvalidInputKind(
                f"Field callback must return text, got {type(result).__name__}",
                {"kind": type(result).__name__},
            )
        return result
    raise InvalidInputKind(
        f"Field must be text or a callback, got {type(field).__name__}",
        {"kind": type(field).__name__},
    )

def _as_list(values: Any) -> List[Any]:
    if values is None:
        return []
    if isinstance(values, Iterable) and not isinstance(values, (str, bytes)):
        return list(values)
    return [values]

# ---------------------------------------------------------------------------
# Rule text
# ---------------------------------------------------------------------------

def canonical_function(
    function_name: str,
    field: InputField,
    values: Any = None,
    normalise: bool = True,
    reverse: bool = False,
) -> str:
    """
    ``name(field)`` or ``name(field, v1, ...)``; ``reverse`` puts the values
    ahead of the field.
    """
    field = field_to_str(field)
    vals = _as_list(values)
    if not vals:
        return f"{function_name}({field})"

    rendered = [_render(v, normalise) for v in vals]
    args = rendered + [field] if reverse else [field] + rendered
    return f"{function_name}({', '.join(args)})"

def compare(field: InputField, operator: str, value: Any, normalise: bool = True) -> str:
    return f"{field_to_str(field)} {operator} {_render(value, normalise)}"

def compare_map(field: InputField, operator: str, values: Any, normalise: bool = True) -> List[str]:
    vals = _as_list(values)
    if not vals:
        return []
    field = field_to_str(field)
    return [compare(field, operator, v, normalise) for v in vals]

def negate(rule: Union[Leaf, str, None]) -> Optional[Leaf]:
    if not rule:
        return None
    return Leaf(f"not ({rule})")

def compare_in(field: InputField, values: Any, normalise: bool = True) -> Leaf:
    parts = compare_map(field, "eq", values, normalise)
    return Leaf(f" {Condition.OR.value} ".join(parts), grouped=len(parts) > 1)

def compare_not_in(field: InputField, values: Any, normalise: bool = True) -> Optional[Leaf]:
    return negate(compare_in(field, values, normalise))

def contains(field: InputField, value: Any) -> str:
    return canonical_function("contains", field, value)

def starts_with(field: InputField, value: Any) -> str:
    return canonical_function("startswith", field, value)

def ends_with(field: InputField, value: Any) -> str:
    return canonical_function("endswith", field, value)

# ---------------------------------------------------------------------------
# Canonical function table
# ---------------------------------------------------------------------------

class CanonicalFunctions:
    """
    String functions usable in field position, e.g.
    ``f().eq(lambda x: x.to_lower("Name"), "a")`` gives ``tolower(Name) eq 'a'``.
    """
    __slots__ = ()

    @staticmethod
    def length(field: InputField) -> str:
        """Number of characters: ``length(CompanyName)``."""
        return canonical_function("length", field)

    @staticmethod
    def to_lower(field: InputField) -> str:
        return canonical_function("tolower", field)

    @staticmethod
    def to_upper(field: InputField) -> str:
        return canonical_function("toupper", field)

    @staticmethod
    def trim(field: InputField) -> str:
        return canonical_function("trim", field)

    @staticmethod
    def index_of(field: InputField, value: Any) -> str:
        """Zero-based position of ``value``: ``indexof(CompanyName, 'lfreds')``."""
        return canonical_function("indexof", field, [value])

    @staticmethod
    def substring(field: InputField, *values: int) -> str:
        """
        ``substring(CompanyName, 1)`` or ``substring(CompanyName, 1, 2)``.
        """
        if len(values) not in (1, 2):
            raise TypeError(f"substring() takes a start and an optional length, got {len(values)} values")
        return canonical_function("substring", field, list(values))

    @staticmethod
    def concat(field: InputField, value: Any, normalise: bool = True) -> str:
        """
        ``concat(concat(City, ', '), Country)`` from
        ``x.concat(lambda y: y.concat("City", ", "), "Country", False)``.
        """
        return canonical_function("concat", field, [value], normalise)


functions = CanonicalFunctions()

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

"""
Fluent builder for OData ``$filter`` expressions.

Example:
    >>> f().eq("TypeId", "1").eq("SubType/Id", 1).to_string()
    "TypeId eq '1' and SubType/Id eq 1"
    >>> f.disjunction().eq("a", 1).and_(lambda x: x.eq("b", 2).eq("c", 3)).to_string()
    'a eq 1 and (b eq 2 and c eq 3)'
"""

from __future__ import annotations
from copy import deepcopy
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union
import logging

from .config import DEFAULT_CONDITION
from .errors import InvalidInputKind
from .filters import Condition, Leaf, RuleNode, add_rule
from .functions import (
    InputField,
    canonical_function,
    compare,
    compare_in,
    compare_not_in,
    contains,
    ends_with,
    negate,
    starts_with,
)
from .query import build_filter_param, serialize

log = logging.getLogger(__name__)

InputRule = Union[str, "FilterBuilder", Callable[["FilterBuilder"], Union["FilterBuilder", str, None]], None]


class InputKind(str, Enum):
    TEXT = "text"
    CALLBACK = "callback"
    BUILDER = "builder"


def classify_rule(rule: Any) -> InputKind:
    if isinstance(rule, FilterBuilder):
        return InputKind.BUILDER
    if isinstance(rule, str):
        return InputKind.TEXT
    if callable(rule):
        return InputKind.CALLBACK
    raise InvalidInputKind(
        f"Rule must be text, a FilterBuilder or a callback, got {type(rule).__name__}",
        {"kind": type(rule).__name__},
    )


def rule_to_str(rule: InputRule) -> str:
    """
    Reduce a rule input to its filter text. ``None`` reduces to ''.
    """
    if rule is None:
        return ""
    kind = classify_rule(rule)
    if kind is InputKind.CALLBACK:
        rule = rule(FilterBuilder())
        if rule is None:
            return ""
        if not isinstance(rule, (FilterBuilder, str)):
            raise InvalidInputKind(
                f"Rule callback must return a FilterBuilder or text, got {type(rule).__name__}",
                {"kind": type(rule).__name__},
            )
    return rule if isinstance(rule, str) else rule.to_string()


def is_filter_builder(instance: Any) -> bool:
    return isinstance(instance, FilterBuilder)


class FilterBuilder:
    """
    Accumulates rules into a tree and renders it as a filter expression.

    Every chaining method mutates this builder and returns it. Rules added
    without an explicit condition use the builder's default condition.
    """

    def __init__(self, condition: Union[Condition, str] = DEFAULT_CONDITION):
        self.condition = Condition(condition)
        self._source = RuleNode(condition=self.condition)

    @classmethod
    def conjunction(cls) -> "FilterBuilder":
        """New builder joining rules with 'and'."""
        return cls(Condition.AND)

    @classmethod
    def disjunction(cls) -> "FilterBuilder":
        """New builder joining rules with 'or'."""
        return cls(Condition.OR)

    @classmethod
    def from_tree(cls, root: RuleNode, condition: Union[Condition, str, None] = None) -> "FilterBuilder":
        """
        Continue building on a stored tree. The tree is copied.
        """
        builder = cls(condition if condition is not None else root.condition)
        builder._source = deepcopy(root)
        log.debug("Resuming %s builder on a tree of %d rules", builder.condition.value, len(root.children))
        return builder

    @property
    def source(self) -> RuleNode:
        return self._source

    def _add(self, rule: Union[Leaf, str, None], condition: Optional[Condition] = None) -> "FilterBuilder":
        self._source = add_rule(self._source, rule, condition or self.condition)
        return self

    def _add_input(self, rule: InputRule, condition: Optional[Condition] = None) -> "FilterBuilder":
        return self._add(Leaf(rule_to_str(rule), grouped=True), condition)

    # Logical operators

    def and_(self, rule: InputRule) -> "FilterBuilder":
        return self._add_input(rule, Condition.AND)

    def or_(self, rule: InputRule) -> "FilterBuilder":
        return self._add_input(rule, Condition.OR)

    def not_(self, rule: InputRule) -> "FilterBuilder":
        return self._add(negate(rule_to_str(rule)))

    # Comparison operators

    def _compare(self, field: InputField, operator: str, value: Any, normalise: bool) -> "FilterBuilder":
        return self._add(compare(field, operator, value, normalise))

    def eq(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "eq", value, normalise)

    def ne(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "ne", value, normalise)

    def gt(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "gt", value, normalise)

    def ge(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "ge", value, normalise)

    def lt(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "lt", value, normalise)

    def le(self, field: InputField, value: Any, normalise: bool = True) -> "FilterBuilder":
        return self._compare(field, "le", value, normalise)

    def in_(self, field: InputField, values: Any, normalise: bool = True) -> "FilterBuilder":
        """
        ``f eq 1 or f eq 2`` for ``in_("f", [1, 2])``.
        """
        return self._add(compare_in(field, values, normalise))

    def not_in(self, field: InputField, values: Any, normalise: bool = True) -> "FilterBuilder":
        """
        ``not (f eq 1 or f eq 2)`` for ``not_in("f", [1, 2])``.
        """
        return self._add(compare_not_in(field, values, normalise))

    # Canonical functions

    def contains(self, field: InputField, value: Any) -> "FilterBuilder":
        return self._add(contains(field, value))

    def starts_with(self, field: InputField, value: Any) -> "FilterBuilder":
        return self._add(starts_with(field, value))

    def ends_with(self, field: InputField, value: Any) -> "FilterBuilder":
        return self._add(ends_with(field, value))

    def fn(
        self,
        function_name: str,
        field: InputField,
        values: Any = None,
        normalise: bool = True,
        reverse: bool = False,
    ) -> "FilterBuilder":
        """
        Any function by name, e.g. ``fn("substringof", "Name", "a", reverse=True)``
        gives ``substringof('a', Name)``.
        """
        return self._add(canonical_function(function_name, field, values, normalise, reverse))

    # Terminal operations

    def is_empty(self) -> bool:
        return self._source.is_empty()

    def to_string(self) -> str:
        return serialize(self._source)

    def to_query_param(self, include_keyword: bool = True) -> str:
        return build_filter_param(self._source, include_keyword=include_keyword)

    def to_dict(self) -> Dict[str, Any]:
        return self._source.to_dict()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"FilterBuilder({self.condition.value!r}, {self.to_string()!r})"


f = FilterBuilder

__all__ = [
    "FilterBuilder",
    "InputKind",
    "InputRule",
    "classify_rule",
    "rule_to_str",
    "is_filter_builder",
    "f",
]

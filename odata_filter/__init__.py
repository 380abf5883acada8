"""
odata-filter: fluent builder for OData $filter query options.
"""

from .builder import (
    FilterBuilder,
    InputKind,
    classify_rule,
    is_filter_builder,
    rule_to_str,
    f,
)
from .errors import ODataFilterError, InvalidInputKind, RuleTreeDocumentError
from .filters import (
    Condition,
    Leaf,
    RuleNode,
    add_rule,
    RULE_TREE_SCHEMA,
    parse_rule_tree_json,
    load_rule_tree,
)
from .functions import CanonicalFunctions, functions, normalise_value
from .query import serialize, build_filter_param

__version__ = "1.0.0"

__all__ = [
    "FilterBuilder",
    "InputKind",
    "classify_rule",
    "is_filter_builder",
    "rule_to_str",
    "f",
    "ODataFilterError",
    "InvalidInputKind",
    "RuleTreeDocumentError",
    "Condition",
    "Leaf",
    "RuleNode",
    "add_rule",
    "RULE_TREE_SCHEMA",
    "parse_rule_tree_json",
    "load_rule_tree",
    "CanonicalFunctions",
    "functions",
    "normalise_value",
    "serialize",
    "build_filter_param",
]

"""
Rule tree for the filter builder.

This module provides the tree models, the merge algorithm and stored tree documents.
"""

from .models import (
    Condition,
    Leaf,
    RuleNode,
    add_rule,
    RULE_TREE_SCHEMA,
    parse_rule_tree_json,
    load_rule_tree,
)

__all__ = [
    "Condition",
    "Leaf",
    "RuleNode",
    "add_rule",
    "RULE_TREE_SCHEMA",
    "parse_rule_tree_json",
    "load_rule_tree",
]

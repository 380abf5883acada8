from __future__ import annotations
from typing import List, Union

from ..config import FILTER_KEYWORD
from ..filters import Condition, Leaf, RuleNode


def _join_rules(parts: List[str], condition: Condition) -> str:
    return f" {condition.value} ".join(parts)

def _node_to_str(node: Union[RuleNode, Leaf, str], wrap: bool = False) -> str:
    if isinstance(node, str):
        return node
    if isinstance(node, Leaf):
        return f"({node.text})" if wrap and node.grouped else node.text

    children = [c for c in node.children if _node_to_str(c)]
    if not children:
        return ""
    if len(children) == 1:
        # transparent level, the child decides on its own parentheses
        return _node_to_str(children[0], wrap)

    body = _join_rules([_node_to_str(c, True) for c in children], node.condition)
    return f"({body})" if wrap else body

def serialize(node: Union[RuleNode, Leaf, str]) -> str:
    """
    Render a rule tree as filter expression text.

    Nested groups are parenthesized, the top level never is.
    """
    return _node_to_str(node, False)

def build_filter_param(
    root: RuleNode,
    *,
    include_keyword: bool = False,
    keyword: str = FILTER_KEYWORD,
    default_when_empty: str = "",
) -> str:
    """
    Returns the filter expression. If `include_keyword` is True the result
    is '$filter=...'; an empty tree yields `default_when_empty` as-is.
    """
    body = serialize(root).strip()
    if not body:
        return default_when_empty
    return f"{keyword}={body}" if include_keyword else body

# -----------------------------------------------------------------------------
# Public exports
# -----------------------------------------------------------------------------
__all__ = [
    "serialize",
    "build_filter_param",
]

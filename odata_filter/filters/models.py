from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

import jsonschema
import yaml

from ..errors import RuleTreeDocumentError

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Condition(str, Enum):
    AND = "and"
    OR = "or"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Core tree models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Leaf:
    """
    Opaque rule text already in final filter syntax, e.g. ``Id eq 1``.

    ``grouped`` marks text that is itself a composite expression and must be
    parenthesized when it sits next to sibling rules.
    """
    text: str
    grouped: bool = False

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text

    def to_dict(self) -> Union[str, Dict[str, Any]]:
        if not self.grouped:
            return self.text
        return {"text": self.text, "grouped": True}


@dataclass
class RuleNode:
    """
    Rules joined by one logical condition. A child RuleNode always carries
    the opposite condition of its parent.
    """
    condition: Condition = Condition.AND
    children: List[Union["RuleNode", Leaf]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.condition = Condition(self.condition)

    def is_empty(self) -> bool:
        return not self.children

    # JSON helpers
    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition.value,
            "rules": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleNode":
        """
        Build a tree from its dict form. Empty groups and rules are dropped
        and groups sharing their parent's condition are flattened into it.
        """
        node = cls(condition=Condition(data.get("condition", Condition.AND.value)))
        for entry in data.get("rules", []):
            child = _child_from_dict(entry)
            if not child or (isinstance(child, RuleNode) and child.is_empty()):
                continue
            if isinstance(child, RuleNode) and child.condition == node.condition:
                node.children.extend(child.children)
            else:
                node.children.append(child)
        return node


def _child_from_dict(data: Union[str, Dict[str, Any]]) -> Union[RuleNode, Leaf]:
    if isinstance(data, str):
        return Leaf(data)
    if isinstance(data, dict) and "text" in data:
        return Leaf(str(data["text"]), bool(data.get("grouped", False)))
    if isinstance(data, dict) and "condition" in data:
        return RuleNode.from_dict(data)
    raise RuleTreeDocumentError(f"Bad rule entry: {data!r}", {"rule": data})


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def add_rule(
    root: RuleNode,
    rule: Union[Leaf, str, None],
    condition: Optional[Condition] = None,
) -> RuleNode:
    """
    Append ``rule`` to ``root`` under ``condition`` and return the new root.

    A condition switch on a root holding several rules pushes the whole root
    down one level so its grouping survives; with zero or one rule the root
    is simply relabeled. Empty rules leave the tree untouched.
    """
    if not rule:
        log.debug("Skipping empty rule")
        return root

    leaf = rule if isinstance(rule, Leaf) else Leaf(str(rule))

    if condition is not None and root.condition != condition:
        condition = Condition(condition)
        if len(root.children) > 1:
            log.debug(
                "Regrouping %d %s rules under %s",
                len(root.children), root.condition.value, condition.value,
            )
            root = RuleNode(condition=condition, children=[root])
        else:
            root.condition = condition

    root.children.append(leaf)
    return root


# ---------------------------------------------------------------------------
# JSON Schema for stored rule trees
# ---------------------------------------------------------------------------

RULE_TREE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://example.com/rule-tree.schema.json",
    "title": "Rule Tree",
    "$defs": {
        "Leaf": {
            "oneOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "text": {"type": "string", "minLength": 1},
                        "grouped": {"type": "boolean"},
                    },
                    "required": ["text"],
                },
            ],
        },
        "Rules": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"$ref": "#/$defs/Leaf"},
                    {"$ref": "#/$defs/RuleNode"},
                ],
            },
        },
        # nested groups always hold at least one rule
        "RuleNode": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "condition": {"type": "string", "enum": ["and", "or"]},
                "rules": {"$ref": "#/$defs/Rules", "minItems": 1},
            },
            "required": ["condition", "rules"],
        },
    },
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "condition": {"type": "string", "enum": ["and", "or"]},
        "rules": {"$ref": "#/$defs/Rules"},
    },
    "required": ["condition"],
}


def _validate(instance: Dict[str, Any], schema: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise RuleTreeDocumentError(
            f"Invalid rule tree document: {exc.message}",
            {"path": list(exc.absolute_path)},
        ) from exc


def parse_rule_tree_json(
    payload: Union[str, Dict[str, Any]],
    *,
    validate: bool = True,
) -> RuleNode:
    """
    Accept a JSON string or dict and return a RuleNode.
    """
    data = json.loads(payload) if isinstance(payload, str) else payload
    if validate:
        _validate(data, RULE_TREE_SCHEMA)
    return RuleNode.from_dict(data)


def load_rule_tree(path: Union[str, Path], *, validate: bool = True) -> RuleNode:
    """
    Load a stored rule tree from a YAML or JSON file.
    """
    path = Path(path)
    if not path.exists():
        raise RuleTreeDocumentError(f"Rule tree file not found: {path}", {"path": str(path)})
    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise RuleTreeDocumentError(
                f"Unsupported rule tree file type: {path.suffix}", {"path": str(path)}
            )
    if not isinstance(data, dict):
        raise RuleTreeDocumentError(f"Rule tree document must be a mapping: {path}", {"path": str(path)})
    log.debug("Loaded rule tree from %s", path)
    return parse_rule_tree_json(data, validate=validate)


# ---------------------------------------------------------------------------
# Public exports
# ---------------------------------------------------------------------------

__all__ = [
    "Condition",
    "Leaf",
    "RuleNode",
    "add_rule",
    "RULE_TREE_SCHEMA",
    "parse_rule_tree_json",
    "load_rule_tree",
]

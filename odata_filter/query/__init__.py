"""
Serialization of rule trees into filter expression text.
"""

from .builder import (
    serialize,
    build_filter_param,
)

__all__ = [
    "serialize",
    "build_filter_param",
]

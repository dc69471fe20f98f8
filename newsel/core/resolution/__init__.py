"""Selector candidate resolution."""

from newsel.core.resolution.resolver import (
    SelectorResolver,
    attribute_only,
    attribute_or_text,
    resolve,
    text_value,
)

__all__ = ['SelectorResolver', 'attribute_only', 'attribute_or_text', 'resolve', 'text_value']

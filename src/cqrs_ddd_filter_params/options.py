"""
Helpers for resolving and formatting field options.

Options are either plain values (``"active"``) or ``(label, value)`` pairs.
The parser, serializer and query builder never resolve options; these are
for UI collaborators that render choice lists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import FieldConfig


def resolve_options(config: FieldConfig) -> list[Any]:
    """Return the static options, else call ``options_fn``, else ``[]``."""
    if config.options is not None:
        return list(config.options)
    if config.options_fn is not None:
        return list(config.options_fn())
    return []


def opt_value(option: Any) -> Any:
    if isinstance(option, tuple) and len(option) == 2:
        return option[1]
    return option


def opt_value_string(option: Any) -> str:
    """Option value as a string, for comparisons against URL values."""
    value = opt_value(option)
    if hasattr(value, "value") and isinstance(value.value, str):
        return value.value
    return str(value)


def opt_label(option: Any) -> Any:
    if isinstance(option, tuple) and len(option) == 2:
        return option[0]
    return option


def opt_label_display(option: Any) -> str:
    """Label for display; bare values are capitalised."""
    if isinstance(option, tuple) and len(option) == 2:
        return str(option[0])
    raw = option.value if hasattr(option, "value") else option
    return str(raw).capitalize()

#
# formatkit Tools
#

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Iterable


# Methods --------------------------------------------------------------------------------------------------------------


def fmt_choices(choices: Iterable[str]) -> str:
    """
    Format a collection of accepted option labels for validation error messages.

    Labels are quoted and kept in the given order, so tables declared in a meaningful
    order (e.g. full, long, medium, short) read naturally.

    Examples:
        >>> fmt_choices(["full", "long", "medium", "short"])
        "'full', 'long', 'medium', 'short'"
        >>> fmt_choices([])
        '<none>'
    """
    labels = [repr(c) for c in choices]
    if not labels:
        return "<none>"
    return ", ".join(labels)


def fmt_type(obj: Any, *, max_repr: int = 120) -> str:
    """Format type information for exception messages.

    Accepts both type objects and instances.

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(int)
        '<type: int>'
        >>> fmt_type(ValueError("test"))
        '<type: ValueError>'
    """
    target_type = obj if isinstance(obj, type) else type(obj)

    try:
        type_name = target_type.__name__
    except AttributeError:
        type_name = str(target_type)

    return _fmt_format_pair("type", _fmt_truncate(type_name, max_repr))


def fmt_value(x: Any, *, max_repr: int = 120) -> str:
    """
    Format a single value as a type–value pair for exception messages.

    Handles broken __repr__ and very long representations gracefully, since the
    values shown here are whatever the caller passed in as an option.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("half_even")
        "<str: 'half_even'>"
        >>> fmt_value("hello world", max_repr=8)
        "<str: 'hell'...>"
    """
    t = type(x).__name__

    try:
        base_repr = repr(x)
    except Exception as e:
        base_repr = f"<{t} object (repr failed: {type(e).__name__})>"

    # Escape inner ">" so the wrapper brackets stay unambiguous
    base_repr = base_repr.replace(">", "\\>")

    return _fmt_format_pair(t, _fmt_truncate(base_repr, max_repr))


# Private Methods ------------------------------------------------------------------------------------------------------

def _fmt_truncate(s: str, max_len: int, ellipsis: str = "...") -> str:
    """
    Truncate s to at most max_len visible characters before appending the ellipsis.

    Quoted reprs keep their quotes, and the ellipsis goes outside the closing quote.
    """
    if max_len <= 0:
        return ""
    if len(s) <= max_len:
        return s

    if len(s) >= 2 and s[0] in ("'", '"') and s[-1] == s[0]:
        inner_len = max(1, max_len - 4)
        inner = s[1:1 + inner_len]
        return f"{s[0]}{inner}{s[0]}{ellipsis}"

    return s[:max(1, max_len)] + ellipsis


def _fmt_format_pair(type_name: str, value_repr: str) -> str:
    return f"<{type_name}: {value_repr}>"

"""
Value rendering and message shaping.

render_value() turns arbitrary call arguments into deterministic text.
It is bounded in depth and safe on cyclic structures, so any argument
graph produces a finite string and never raises.

truncate() bounds the final message length, appending a marker when
there is room for it.
"""

import dataclasses
from typing import Any

DEFAULT_DEPTH = 20
DEFAULT_TRUNCATED_TEXT = "_TRUNCATED_"

UNDEFINED = "undefined"
CIRCULAR = "[Circular]"


def render_value(value: Any, depth: int = DEFAULT_DEPTH) -> str:
    """
    Render ``value`` as text.

    Containers nested more than ``depth`` levels below ``value`` are
    abbreviated; a container met again while it is still being rendered
    is replaced by ``[Circular]``.
    """
    return _render(value, depth, set())


def _render(value: Any, depth: int, active: set[int]) -> str:
    if value is None:
        return UNDEFINED
    if isinstance(value, (str, bytes, bool, int, float, complex)):
        return _safe_repr(value)

    if isinstance(value, (list, tuple)):
        return _render_container(
            value, depth, active, "[", "]",
            lambda d: [_render(item, d, active) for item in value],
        )
    if isinstance(value, dict):
        return _render_container(
            value, depth, active, "{", "}",
            lambda d: [
                f"{_render(k, d, active)}: {_render(v, d, active)}"
                for k, v in value.items()
            ],
        )
    if isinstance(value, (set, frozenset)):
        if not value:
            return f"{type(value).__name__}()"
        return _render_container(
            value, depth, active, "{", "}",
            lambda d: sorted(_render(item, d, active) for item in value),
        )
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        name = type(value).__name__
        return _render_container(
            value, depth, active, f"{name}(", ")",
            lambda d: [
                f"{f.name}={_render(getattr(value, f.name, None), d, active)}"
                for f in dataclasses.fields(value)
            ],
        )

    return _safe_repr(value)


def _render_container(value, depth, active, open_, close, render_items) -> str:
    key = id(value)
    if key in active:
        return CIRCULAR
    if depth < 0:
        return f"{open_}...{close}"

    active.add(key)
    try:
        items = render_items(depth - 1)
    finally:
        active.discard(key)
    return f"{open_}{', '.join(items)}{close}"


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def format_message(message: Any) -> str:
    """
    Shape the message text.

    A message that starts with '{' or '[' is rendered as a quoted literal so
    log consumers do not read it as nested structure. An absent message
    becomes ``undefined``; other non-string messages are rendered.
    """
    if message is None:
        return UNDEFINED
    if not isinstance(message, str):
        return render_value(message)
    if message and message[0] in "{[":
        return render_value(message)
    return message


def truncate(
    text: str,
    limit: int | None,
    marker: str = DEFAULT_TRUNCATED_TEXT,
) -> str:
    """
    Shorten ``text`` to ``limit`` characters.

    Disabled when ``limit`` is unset, zero or negative. Text no longer than
    ``limit + len(marker)`` is left alone. When the marker does not fit in
    ``limit`` it is dropped and the text is cut hard.
    """
    if not limit or limit <= 0:
        return text

    marker_len = len(marker)
    if len(text) <= limit + marker_len:
        return text
    if limit > marker_len:
        return text[: limit - marker_len] + marker
    return text[:limit]

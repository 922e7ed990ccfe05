"""Map raw keyboard and swipe input to headings."""

from __future__ import annotations

from snakekit.snake import Direction

SWIPE_THRESHOLD = 20.0

_KEY_MAP: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


def direction_from_key(key: str) -> Direction | None:
    """Return the heading bound to *key*, or ``None`` for unbound keys."""
    if key in _KEY_MAP:
        return _KEY_MAP[key]
    return _KEY_MAP.get(key.lower()) if len(key) == 1 else None


def direction_from_swipe(
    dx: float, dy: float, threshold: float = SWIPE_THRESHOLD,
) -> Direction | None:
    """Pick the heading of the dominant swipe axis.

    Screen coordinates grow downwards, so a positive *dy* is DOWN. Swipes
    no longer than *threshold* along the dominant axis are ignored.
    """
    if abs(dx) > abs(dy):
        if dx > threshold:
            return Direction.RIGHT
        if dx < -threshold:
            return Direction.LEFT
        return None
    if dy > threshold:
        return Direction.DOWN
    if dy < -threshold:
        return Direction.UP
    return None


def parse_input(message: dict) -> Direction | None:
    """Decode a client input message into a heading.

    Accepts ``{"direction": name}``, ``{"key": key}`` or
    ``{"swipe": [dx, dy]}``; anything else maps to ``None``.
    """
    name = message.get("direction")
    if isinstance(name, str):
        return Direction.parse(name)

    key = message.get("key")
    if isinstance(key, str):
        return direction_from_key(key)

    swipe = message.get("swipe")
    if isinstance(swipe, (list, tuple)) and len(swipe) == 2:
        try:
            dx, dy = float(swipe[0]), float(swipe[1])
        except (TypeError, ValueError):
            return None
        return direction_from_swipe(dx, dy)
    return None

"""
Navigation events and key-edge detection.

The window layer reports raw input once per frame as an InputSnapshot:
the scroll wheel deltas seen this frame and the set of directional keys
currently held. KeyEdgeTracker turns held-key snapshots into press
edges by diffing against the previous frame, so holding an arrow key
pans once rather than every frame.
"""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple


class Direction(enum.Enum):
    """Pan direction, with its unit vector in pixel axes (y grows downward)."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self):
        return self.value


@dataclass(frozen=True)
class ScrollEvent:
    """Mouse wheel movement; only the sign of delta is used (> 0 zooms in)."""
    delta: float


@dataclass(frozen=True)
class PanEvent:
    """A directional key was pressed this frame."""
    direction: Direction


@dataclass(frozen=True)
class ResetEvent:
    """Return to the startup view."""


@dataclass(frozen=True)
class InputSnapshot:
    """Raw input for one frame."""
    scroll_deltas: Tuple[float, ...] = ()
    held: FrozenSet[Direction] = frozenset()
    reset: bool = False


@dataclass
class KeyEdgeTracker:
    """
    Detects key press edges from successive held-key snapshots.

    Usage:
        tracker = KeyEdgeTracker()
        tracker.update({Direction.UP})   # -> [PanEvent(UP)]
        tracker.update({Direction.UP})   # -> [] (still held)
        tracker.update(set())            # -> [] (released)
    """

    previous: FrozenSet[Direction] = field(default_factory=frozenset)

    def update(self, held):
        """Record this frame's held keys and return the newly pressed ones."""
        current = frozenset(held)
        pressed = current - self.previous
        self.previous = current
        # Direction declaration order keeps the result deterministic
        return [PanEvent(d) for d in Direction if d in pressed]

    def reset(self):
        """Forget held keys, e.g. after the window loses focus."""
        self.previous = frozenset()


def events_from_snapshot(snapshot, tracker):
    """
    Translate one frame of raw input into navigation events.

    Args:
        snapshot: InputSnapshot for this frame
        tracker: KeyEdgeTracker carrying the previous frame's held keys

    Returns:
        List of ResetEvent / ScrollEvent / PanEvent, in that order
    """
    events = []
    if snapshot.reset:
        events.append(ResetEvent())
    events.extend(ScrollEvent(delta) for delta in snapshot.scroll_deltas)
    events.extend(tracker.update(snapshot.held))
    return events

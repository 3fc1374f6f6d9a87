"""
Pan/zoom state of the viewer.

ViewportState is an immutable snapshot; Viewport owns the current one
and replaces it as navigation events arrive. A render always receives a
single snapshot, so it never sees a half-applied update.
"""

import logging
import sys
from dataclasses import dataclass, replace

from .compute import ComplexPoint
from .events import PanEvent, ResetEvent, ScrollEvent


logger = logging.getLogger(__name__)

ZOOM_FACTOR = 2.0
MIN_SCALE = sys.float_info.min
MAX_SCALE = sys.float_info.max


@dataclass(frozen=True)
class ViewportState:
    """
    Attributes:
        scale: Plane units per pixel (> 0); larger means zoomed out
        offset: Plane point at the viewport center
    """
    scale: float
    offset: ComplexPoint

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        object.__setattr__(self, 'offset', ComplexPoint(*self.offset))


class Viewport:
    """
    Applies navigation events to the current ViewportState.

    Per call to apply_navigation:
    - a ResetEvent restores the initial state first
    - the first ScrollEvent with a nonzero delta halves (delta > 0) or
      doubles (delta < 0) the scale; further scroll events are ignored,
      as is a zoom that would leave the normal float range
    - every PanEvent moves the offset by direction * scale * pan_step
    - anything else is ignored
    """

    def __init__(self, initial_state, pan_step):
        if not pan_step > 0:
            raise ValueError(f"pan_step must be positive, got {pan_step}")
        self.initial_state = initial_state
        self.pan_step = float(pan_step)
        self.state = initial_state

    @classmethod
    def from_config(cls, config):
        return cls(
            ViewportState(config.initial_scale, ComplexPoint(*config.initial_offset)),
            config.pan_step,
        )

    def apply_navigation(self, events):
        """
        Apply one frame's events.

        Args:
            events: Iterable of navigation events

        Returns:
            The new ViewportState (also stored as self.state)
        """
        events = list(events)
        state = self.state

        if any(isinstance(e, ResetEvent) for e in events):
            state = self.initial_state

        for event in events:
            if isinstance(event, ScrollEvent) and event.delta != 0:
                if event.delta > 0:
                    scale = state.scale / ZOOM_FACTOR
                else:
                    scale = state.scale * ZOOM_FACTOR
                # Zooming stops where halving/doubling would no longer be exact
                if MIN_SCALE <= scale <= MAX_SCALE:
                    state = replace(state, scale=scale)
                break

        x, y = state.offset
        for event in events:
            if isinstance(event, PanEvent):
                dx, dy = event.direction.vector
                x += dx * state.scale * self.pan_step
                y += dy * state.scale * self.pan_step
        if (x, y) != state.offset:
            state = replace(state, offset=ComplexPoint(x, y))

        if state != self.state:
            logger.debug("Viewport: scale=%g offset=(%g, %g)", state.scale, *state.offset)
        self.state = state
        return state

    def reset(self):
        """Restore the startup view."""
        return self.apply_navigation([ResetEvent()])

"""
Gesture recognition and scroll dispatch for hand landmark frames.
"""
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, Iterable, Optional, Union

from .types import (
    ControllerProto,
    FrameResult,
    GestureSymbol,
    LandmarkFrame,
    ScrollCommand,
)

logger = logging.getLogger(__name__)

# Normalized margin the index tip must clear above its PIP joint
EXTENSION_MARGIN = 0.05

DEFAULT_INTENSITY = 5
MIN_INTENSITY = 1
MAX_INTENSITY = 20


@dataclass(frozen=True)
class FingerStates:
    """Per-finger bend predicates derived from a single frame."""
    index_extended: bool
    middle_closed: bool
    ring_closed: bool
    pinky_closed: bool
    all_fingers_closed: bool


def finger_states(frame: LandmarkFrame) -> FingerStates:
    """
    Derive finger states from tip vs. PIP joint heights.

    Image y grows downward, so a tip with a smaller y than its PIP joint
    points up.

    Args:
        frame: Landmarks of one hand

    Returns:
        FingerStates for the frame
    """
    # Thumb is read but does not take part in any decision yet
    _thumb = frame.thumb_tip

    index_extended = frame.index_tip.y < frame.index_pip.y - EXTENSION_MARGIN
    middle_closed = frame.middle_tip.y > frame.middle_pip.y
    ring_closed = frame.ring_tip.y > frame.ring_pip.y
    pinky_closed = frame.pinky_tip.y > frame.pinky_pip.y

    # Unmargined index comparison, distinct from index_extended
    all_fingers_closed = (
        frame.index_tip.y > frame.index_pip.y
        and middle_closed
        and ring_closed
        and pinky_closed
    )

    return FingerStates(
        index_extended=index_extended,
        middle_closed=middle_closed,
        ring_closed=ring_closed,
        pinky_closed=pinky_closed,
        all_fingers_closed=all_fingers_closed,
    )


def classify(frame: Optional[LandmarkFrame]) -> GestureSymbol:
    """
    Classify one frame of landmarks into a gesture symbol.

    Args:
        frame: Landmarks of one hand (None if no hand detected); raw
            payloads are validated first

    Returns:
        CLOSED_FIST, OPEN_INDEX or NONE
    """
    if not isinstance(frame, LandmarkFrame):
        frame = LandmarkFrame.from_points(frame)
    if frame is None:
        return GestureSymbol.NONE

    states = finger_states(frame)

    if states.all_fingers_closed:
        return GestureSymbol.CLOSED_FIST

    if (states.index_extended and states.middle_closed and
            states.ring_closed and states.pinky_closed):
        return GestureSymbol.OPEN_INDEX

    return GestureSymbol.NONE


def dispatch(symbol: GestureSymbol, intensity: float) -> Optional[ScrollCommand]:
    """
    Map a gesture symbol to a scroll command.

    Raised index scrolls up (negative offset), closed fist scrolls down.

    Args:
        symbol: Gesture recognized for the current frame
        intensity: Pixels to scroll for this frame

    Returns:
        ScrollCommand, or None when nothing should scroll
    """
    if symbol is GestureSymbol.OPEN_INDEX:
        dy_px = -intensity
    elif symbol is GestureSymbol.CLOSED_FIST:
        dy_px = intensity
    else:
        return None

    # Don't send zero commands
    if dy_px == 0:
        return None

    return ScrollCommand(dy_px=dy_px)


class ScrollController:
    """
    Owns the scroll intensity and turns gesture symbols into commands.

    The intensity may be changed at any time from another task (a live
    control); each step reads it exactly once.
    """

    def __init__(self, intensity: float = DEFAULT_INTENSITY,
                 min_intensity: float = MIN_INTENSITY,
                 max_intensity: float = MAX_INTENSITY):
        """Initialize the controller with a starting intensity and its recommended range."""
        self.min_intensity = min_intensity
        self.max_intensity = max_intensity
        self._intensity = DEFAULT_INTENSITY
        self.intensity = intensity

    @property
    def intensity(self) -> float:
        """Pixels scrolled per frame while a gesture is held."""
        return self._intensity

    @intensity.setter
    def intensity(self, value: float) -> None:
        if not self.min_intensity <= value <= self.max_intensity:
            logger.warning(
                "Scroll intensity %s outside recommended range %s-%s",
                value, self.min_intensity, self.max_intensity,
            )
        if value != self._intensity:
            logger.info("Scroll intensity set to %s", value)
        self._intensity = value

    def adjust(self, delta: float) -> float:
        """
        Nudge the intensity by delta, staying within the recommended range.

        Used by live controls; direct assignment stays unclamped.

        Returns:
            The new intensity
        """
        value = self._intensity + delta
        value = max(self.min_intensity, min(self.max_intensity, value))
        self.intensity = value
        return value

    def step(self, symbol: GestureSymbol) -> Optional[ScrollCommand]:
        """Dispatch one frame's symbol at the current intensity."""
        return dispatch(symbol, self._intensity)


class GestureProcessor:
    """
    Runs classification and dispatch for each incoming frame.
    """

    def __init__(self, controller: Optional[ScrollController] = None):
        """Initialize gesture processor with a scroll controller."""
        self.controller = controller or ScrollController()
        self.last_result = FrameResult(
            symbol=GestureSymbol.NONE, command=None, hand_present=False
        )
        self.frame_count = 0

    def process_frame(self, landmarks: Any) -> FrameResult:
        """
        Process a frame and return the recognized gesture and command.

        Args:
            landmarks: LandmarkFrame or raw landmark payload (None if no hand detected)

        Returns:
            FrameResult for this frame
        """
        frame = LandmarkFrame.from_points(landmarks)
        symbol = classify(frame)
        command = self.controller.step(symbol)

        if symbol is not self.last_result.symbol:
            logger.info("Gesture: %s -> %s",
                        self.last_result.symbol.display_name, symbol.display_name)

        result = FrameResult(symbol=symbol, command=command,
                             hand_present=frame is not None)
        self.last_result = result
        self.frame_count += 1

        logger.debug("Frame %d: %s dy=%s", self.frame_count, symbol.value,
                     command.dy_px if command else 0)
        return result


FrameSource = Union[AsyncIterable[Any], Iterable[Any]]


class FrameDriver:
    """
    Feeds landmark frames through the processor into a scroll sink.

    Each frame is classified, dispatched and applied to the sink before the
    next frame is accepted.
    """

    def __init__(self, processor: GestureProcessor, sink: ControllerProto):
        self.processor = processor
        self.sink = sink

    async def handle(self, landmarks: Any) -> FrameResult:
        """Process one frame and apply its scroll command, if any."""
        result = self.processor.process_frame(landmarks)
        if result.command is not None:
            await self.sink.scroll(result.command.dy_px)
        return result

    async def run(self, source: FrameSource) -> int:
        """
        Drive frames from a source until it is exhausted.

        Args:
            source: Async or sync iterable yielding one landmark payload per frame

        Returns:
            Number of frames processed
        """
        count = 0
        if hasattr(source, "__aiter__"):
            async for landmarks in source:
                await self.handle(landmarks)
                count += 1
        else:
            for landmarks in source:
                await self.handle(landmarks)
                count += 1
        return count

"""
Type definitions for the hand gesture scroll system.
"""
import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Protocol, Tuple, runtime_checkable


NUM_LANDMARKS = 21


class LandmarkIndex(IntEnum):
    """MediaPipe hand landmark numbering (only the consulted subset)."""
    WRIST = 0
    THUMB_TIP = 4
    INDEX_PIP = 6
    INDEX_TIP = 8
    MIDDLE_PIP = 10
    MIDDLE_TIP = 12
    RING_PIP = 14
    RING_TIP = 16
    PINKY_PIP = 18
    PINKY_TIP = 20


@dataclass(frozen=True)
class LandmarkPoint:
    """A normalized hand landmark. Origin top-left, y grows downward."""
    x: float
    y: float
    z: float = 0.0  # depth, carried along but unused


@dataclass(frozen=True)
class LandmarkFrame:
    """The 21 landmarks of one hand for a single video frame."""
    points: Tuple[LandmarkPoint, ...]

    def __post_init__(self):
        if len(self.points) != NUM_LANDMARKS:
            raise ValueError(
                f"LandmarkFrame needs {NUM_LANDMARKS} points, got {len(self.points)}"
            )

    def __getitem__(self, index: int) -> LandmarkPoint:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def wrist(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.WRIST]

    @property
    def thumb_tip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.THUMB_TIP]

    @property
    def index_tip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.INDEX_TIP]

    @property
    def index_pip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.INDEX_PIP]

    @property
    def middle_tip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.MIDDLE_TIP]

    @property
    def middle_pip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.MIDDLE_PIP]

    @property
    def ring_tip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.RING_TIP]

    @property
    def ring_pip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.RING_PIP]

    @property
    def pinky_tip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.PINKY_TIP]

    @property
    def pinky_pip(self) -> LandmarkPoint:
        return self.points[LandmarkIndex.PINKY_PIP]

    @classmethod
    def from_points(cls, raw: Optional[Iterable[Any]]) -> Optional["LandmarkFrame"]:
        """
        Validate a raw landmark payload from a landmark source.

        Accepts (x, y) or (x, y, z) sequences, or objects with ``x``/``y``
        attributes such as MediaPipe's NormalizedLandmark.

        Args:
            raw: Landmark payload for one hand, or None

        Returns:
            A LandmarkFrame, or None when the payload is missing or malformed
        """
        if raw is None:
            return None
        if isinstance(raw, LandmarkFrame):
            return raw

        try:
            items = list(raw)
        except TypeError:
            return None
        if len(items) != NUM_LANDMARKS:
            return None

        points = []
        for item in items:
            point = _to_point(item)
            if point is None:
                return None
            points.append(point)

        return cls(points=tuple(points))


def _to_point(item: Any) -> Optional[LandmarkPoint]:
    """Convert one raw landmark into a LandmarkPoint, or None if malformed."""
    if isinstance(item, LandmarkPoint):
        return item

    if hasattr(item, "x") and hasattr(item, "y"):
        coords = (item.x, item.y, getattr(item, "z", 0.0))
    elif not isinstance(item, (str, bytes)) and hasattr(item, "__len__") and len(item) in (2, 3):
        # tuples, lists and numpy rows
        coords = tuple(item) + ((0.0,) if len(item) == 2 else ())
    else:
        return None

    try:
        x, y, z = (float(c) for c in coords)
    except (TypeError, ValueError, OverflowError):
        return None

    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if not math.isfinite(z):
        z = 0.0

    return LandmarkPoint(x=x, y=y, z=z)


class GestureSymbol(str, Enum):
    """Discrete gesture recognized in a single frame."""
    OPEN_INDEX = "OpenIndex"
    CLOSED_FIST = "ClosedFist"
    NONE = "None"

    @property
    def display_name(self) -> str:
        """Short label shown in the overlay."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    GestureSymbol.OPEN_INDEX: "Index",
    GestureSymbol.CLOSED_FIST: "Fist",
    GestureSymbol.NONE: "None",
}


@dataclass
class ScrollCommand:
    """Command to scroll by a pixel delta (negative is up)."""
    dy_px: float


@dataclass
class FrameResult:
    """Outcome of processing one frame."""
    symbol: GestureSymbol
    command: Optional[ScrollCommand]
    hand_present: bool


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for scroll sinks that apply gesture commands."""

    async def scroll(self, dy_px: float) -> None:
        """Apply a vertical scroll offset to the current viewport."""
        ...

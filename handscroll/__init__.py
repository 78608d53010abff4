"""
Hand Gesture Scroll Control

Reads webcam frames, detects hand landmarks using MediaPipe, and turns a
raised index finger or a closed fist into continuous scrolling.
"""

__version__ = "0.1.0"

from .types import (
    ControllerProto,
    FrameResult,
    GestureSymbol,
    LandmarkFrame,
    LandmarkIndex,
    LandmarkPoint,
    ScrollCommand,
)
from .config import load_config, Cfg
from .controller_mock import MockController
from .gestures import (
    FrameDriver,
    GestureProcessor,
    ScrollController,
    classify,
    dispatch,
    finger_states,
)

__all__ = [
    "ControllerProto",
    "FrameResult",
    "GestureSymbol",
    "LandmarkFrame",
    "LandmarkIndex",
    "LandmarkPoint",
    "ScrollCommand",
    "load_config",
    "Cfg",
    "MockController",
    "FrameDriver",
    "GestureProcessor",
    "ScrollController",
    "classify",
    "dispatch",
    "finger_states",
]

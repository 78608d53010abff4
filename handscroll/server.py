"""
Control API for a running gesture scroll session.

Exposes the current gesture and lets a client change the scroll intensity
while frames are being processed.
"""
import logging
import math
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .gestures import GestureProcessor

logger = logging.getLogger(__name__)


class StatusResponse(BaseModel):
    gesture: str
    display_name: str
    hand_present: bool
    frame_count: int
    intensity: float
    last_dy_px: Optional[float] = None


class IntensityRequest(BaseModel):
    intensity: float


class IntensityResponse(BaseModel):
    intensity: float
    min: float
    max: float


def create_app(processor: GestureProcessor) -> FastAPI:
    """Build the control API around a gesture processor."""
    app = FastAPI(title="Hand Gesture Scroll Control")
    controller = processor.controller

    def _intensity_response() -> IntensityResponse:
        return IntensityResponse(
            intensity=controller.intensity,
            min=controller.min_intensity,
            max=controller.max_intensity,
        )

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        """Current gesture and scroll state"""
        result = processor.last_result
        return StatusResponse(
            gesture=result.symbol.value,
            display_name=result.symbol.display_name,
            hand_present=result.hand_present,
            frame_count=processor.frame_count,
            intensity=controller.intensity,
            last_dy_px=result.command.dy_px if result.command else None,
        )

    @app.get("/intensity", response_model=IntensityResponse)
    async def get_intensity():
        """Current scroll intensity and its recommended range"""
        return _intensity_response()

    @app.put("/intensity", response_model=IntensityResponse)
    async def set_intensity(request: IntensityRequest):
        """Change the scroll intensity; applies from the next frame"""
        if not math.isfinite(request.intensity):
            raise HTTPException(status_code=400, detail="Intensity must be a finite number")
        # A non-positive value would stop or reverse scrolling
        if request.intensity <= 0:
            raise HTTPException(status_code=400, detail="Intensity must be greater than zero")

        controller.intensity = request.intensity
        logger.info("🎚️ Intensity updated via API: %s", request.intensity)
        return _intensity_response()

    return app

"""
Main application for hand gesture scroll control.
"""
import argparse
import asyncio
import logging
import os
from typing import Optional

import cv2
from dotenv import load_dotenv

from .config import Cfg, load_config
from .controller_mock import MockController
from .gestures import FrameDriver, GestureProcessor, ScrollController
from .landmarks import HandsTracker, draw_landmarks
from .types import FrameResult, GestureSymbol

logger = logging.getLogger(__name__)

_GESTURE_COLORS = {
    GestureSymbol.OPEN_INDEX: (0, 255, 0),
    GestureSymbol.CLOSED_FIST: (0, 165, 255),
    GestureSymbol.NONE: (0, 0, 255),
}


class GestureScrollApp:
    """Main application class for hand gesture scroll control."""

    def __init__(self, config: Cfg, use_browser: bool = False, serve_api: bool = False):
        """Initialize the application with configuration."""
        self.config = config
        self.serve_api = serve_api
        self.tracker = HandsTracker(
            max_num_hands=config.mediapipe.max_num_hands,
            model_complexity=config.mediapipe.model_complexity,
            min_detection_conf=config.mediapipe.min_detection_confidence,
            min_tracking_conf=config.mediapipe.min_tracking_confidence
        )

        # Choose controller type
        if use_browser:
            from .controller_browser import BrowserController
            self.controller = BrowserController(
                url=config.browser.url,
                headless=config.browser.headless,
                cdp_url=config.browser.cdp_url
            )
            logger.info("🌐 Using browser controller")
        else:
            self.controller = MockController()
            logger.info("Using mock controller (scrolls are only logged)")

        self.scroll_controller = ScrollController(
            intensity=config.scroll.intensity,
            min_intensity=config.scroll.min_intensity,
            max_intensity=config.scroll.max_intensity
        )
        self.processor = GestureProcessor(self.scroll_controller)
        self.driver = FrameDriver(self.processor, self.controller)

        self._api_server = None
        self._api_task: Optional[asyncio.Task] = None

        # Initialize camera
        self.cap = cv2.VideoCapture(config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, config.camera.fps)

        if not self.cap.isOpened():
            self.tracker.close()
            raise RuntimeError(f"Failed to open camera {config.camera.index}")

    async def _start_api(self) -> None:
        """Serve the control API inside the running event loop."""
        import uvicorn
        from .server import create_app

        app = create_app(self.processor)
        server_config = uvicorn.Config(
            app,
            host=self.config.api.host,
            port=self.config.api.port,
            log_level="warning"
        )
        self._api_server = uvicorn.Server(server_config)
        self._api_task = asyncio.create_task(self._api_server.serve())
        logger.info("🎚️ Control API at http://%s:%d/docs",
                    self.config.api.host, self.config.api.port)

    async def run(self):
        """Run the main application loop."""
        try:
            if hasattr(self.controller, "start"):
                await self.controller.start()
            if self.serve_api:
                await self._start_api()

            logger.info("Starting %s", self.config.display.window_name)
            logger.info("  - Index finger up = Scroll up")
            logger.info("  - Closed fist = Scroll down")
            logger.info("  - '+'/'-' = Change speed, 'q' = Quit")

            while True:
                ret, frame = await asyncio.to_thread(self.cap.read)
                if not ret:
                    logger.error("Failed to read frame from camera")
                    break

                if self.config.camera.mirror:
                    frame = cv2.flip(frame, 1)

                landmarks = self.tracker.process(frame)
                result = await self.driver.handle(landmarks)

                if landmarks is not None and self.config.display.show_landmarks:
                    frame = draw_landmarks(frame, landmarks)

                self._draw_status(frame, result)
                cv2.imshow(self.config.display.window_name, frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                elif key in (ord('+'), ord('=')):
                    self.scroll_controller.adjust(1)
                elif key == ord('-'):
                    self.scroll_controller.adjust(-1)
        except Exception:
            logger.exception("Gesture loop stopped")
            raise
        finally:
            await self.close()

    def _draw_status(self, frame, result: FrameResult) -> None:
        """Draw gesture, speed and instructions on the frame."""
        if result.hand_present:
            gesture_text = f"Gesture: {result.symbol.display_name}"
        else:
            gesture_text = "No hand detected"
        if result.command:
            gesture_text += f" | SCROLLING: {result.command.dy_px:+g}px"

        cv2.putText(frame, gesture_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                    _GESTURE_COLORS[result.symbol], 2)
        cv2.putText(frame, f"Speed: {self.scroll_controller.intensity:g}", (10, 60),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)

        cv2.putText(frame, "Index Finger Up = Scroll Up", (10, frame.shape[0] - 80), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "Closed Fist = Scroll Down", (10, frame.shape[0] - 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "+/- speed, 'q' to quit", (10, frame.shape[0] - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

    async def close(self):
        """Release camera, tracker, windows, API server and controller."""
        if self._api_server is not None:
            self._api_server.should_exit = True
            await self._api_task
            self._api_server = None
            self._api_task = None

        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()

        if hasattr(self.controller, "close"):
            await self.controller.close()


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Scroll with hand gestures")
    parser.add_argument("--config", default=os.getenv("HANDSCROLL_CONFIG"),
                        help="Path to YAML config (default: packaged config.default.yaml)")
    parser.add_argument("--browser", action="store_true",
                        help="Scroll a Playwright-driven browser instead of the mock controller")
    parser.add_argument("--url", help="Page to open in browser mode")
    parser.add_argument("--api", action="store_true",
                        help="Serve the control API while running")
    parser.add_argument("--port", type=int, help="Control API port")
    parser.add_argument("--intensity", type=float, help="Starting scroll intensity (1-20)")
    parser.add_argument("--log-level", default=os.getenv("HANDSCROLL_LOG_LEVEL"),
                        help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


async def run_app(args: argparse.Namespace) -> None:
    """Load configuration and run the application."""
    config = load_config(args.config)

    if args.url:
        config.browser.url = args.url
    if args.port:
        config.api.port = args.port
    if args.intensity is not None:
        config.scroll.intensity = args.intensity

    logging.basicConfig(
        level=(args.log_level or config.logging.level).upper(),
        format="%(asctime)s %(levelname)-7s %(name)s | %(message)s"
    )

    app = GestureScrollApp(config, use_browser=args.browser, serve_api=args.api)
    await app.run()


def main(argv=None):
    """Entry point for the application."""
    load_dotenv()
    args = parse_args(argv)

    try:
        asyncio.run(run_app(args))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    main()

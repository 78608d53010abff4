"""
Configuration management for the hand gesture scroll system.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    mirror: bool = True


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ScrollConfig:
    """Scroll dispatch configuration."""
    intensity: float
    min_intensity: float = 1
    max_intensity: float = 20


@dataclass
class BrowserConfig:
    """Playwright browser sink configuration."""
    url: str = "https://example.com"
    headless: bool = False
    cdp_url: Optional[str] = None


@dataclass
class ApiConfig:
    """Control API configuration."""
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    scroll: ScrollConfig
    display: DisplayConfig
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return _dict_to_config(data)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a required config section, naming it when missing."""
    if name not in data or data[name] is None:
        raise KeyError(f"Missing config section: {name}")
    return data[name]


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = _section(data, 'camera')
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps'],
        mirror=camera_data.get('mirror', True)
    )

    mp_data = _section(data, 'mediapipe')
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data.get('model_complexity', 1),
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    scroll_data = _section(data, 'scroll')
    scroll = ScrollConfig(
        intensity=scroll_data['intensity'],
        min_intensity=scroll_data.get('min_intensity', 1),
        max_intensity=scroll_data.get('max_intensity', 20)
    )

    display_data = _section(data, 'display')
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    browser_data = data.get('browser') or {}
    browser = BrowserConfig(
        url=browser_data.get('url', BrowserConfig.url),
        headless=browser_data.get('headless', BrowserConfig.headless),
        cdp_url=browser_data.get('cdp_url')
    )

    api_data = data.get('api') or {}
    api = ApiConfig(
        host=api_data.get('host', ApiConfig.host),
        port=api_data.get('port', ApiConfig.port)
    )

    logging_data = data.get('logging') or {}
    logging_cfg = LoggingConfig(
        level=str(logging_data.get('level', LoggingConfig.level)).upper()
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        scroll=scroll,
        display=display,
        browser=browser,
        api=api,
        logging=logging_cfg
    )

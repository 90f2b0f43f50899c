"""
Server Configuration
====================

Configuration settings for the age & gender demo server.
"""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_MODEL_URL = (
    "https://huggingface.co/hammad140/age-gender-browser-model/resolve/main/model.onnx"
)


@dataclass
class ServerConfig:
    """Server configuration settings."""
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    threaded: bool = True
    log_level: str = "INFO"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: Optional[int] = None  # None for auto-detect
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class ModelConfig:
    """Model source and I/O contract."""
    url: str = DEFAULT_MODEL_URL
    input_name: str = "input_image"
    age_output: str = "predicted_age"
    gender_output: str = "predicted_gender_logits"
    input_size: int = 224
    timeout: float = 30.0
    cache_path: Optional[str] = None  # None: fetch on every start


@dataclass
class LoopConfig:
    """Display surface and refresh rate of the frame loop."""
    display_width: int = 640
    display_height: int = 480
    display_fps: int = 30


def get_server_config() -> ServerConfig:
    """Get server configuration from environment."""
    return ServerConfig(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=os.getenv("DEBUG", "false").lower() == "true",
        threaded=True,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def get_camera_config() -> CameraConfig:
    """Get camera configuration from environment."""
    index = os.getenv("CAMERA_INDEX")
    return CameraConfig(
        index=int(index) if index else None,
        width=int(os.getenv("CAMERA_WIDTH", "640")),
        height=int(os.getenv("CAMERA_HEIGHT", "480")),
        fps=int(os.getenv("CAMERA_FPS", "30"))
    )


def get_model_config() -> ModelConfig:
    """Get model configuration from environment."""
    return ModelConfig(
        url=os.getenv("MODEL_URL", DEFAULT_MODEL_URL),
        timeout=float(os.getenv("MODEL_TIMEOUT", "30")),
        cache_path=os.getenv("MODEL_CACHE_PATH") or None,
    )


def get_loop_config() -> LoopConfig:
    """Get frame loop configuration from environment."""
    return LoopConfig(
        display_fps=int(os.getenv("DISPLAY_FPS", "30")),
    )

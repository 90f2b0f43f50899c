"""
Configuration Module
====================
"""

from .settings import (
    DEFAULT_MODEL_URL,
    ServerConfig,
    CameraConfig,
    ModelConfig,
    LoopConfig,
    get_server_config,
    get_camera_config,
    get_model_config,
    get_loop_config,
)

__all__ = [
    "DEFAULT_MODEL_URL",
    "ServerConfig",
    "CameraConfig",
    "ModelConfig",
    "LoopConfig",
    "get_server_config",
    "get_camera_config",
    "get_model_config",
    "get_loop_config",
]

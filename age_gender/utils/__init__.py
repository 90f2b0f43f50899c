"""
Utilities Module
================

Camera access, overlay drawing, logging and the frame inference loop.
"""

from .camera_manager import CameraStream, open_camera
from .frame_loop import FrameInferenceLoop, LoopContext, create_default_loop
from .logging_config import setup_logging
from .overlay import draw_overlay, format_readout

__all__ = [
    "CameraStream",
    "open_camera",
    "FrameInferenceLoop",
    "LoopContext",
    "create_default_loop",
    "setup_logging",
    "draw_overlay",
    "format_readout",
]

"""
Overlay Drawing
===============

Builds the 640x480 display surface and draws the prediction readout on it.
"""

from typing import Optional

import cv2
import numpy as np

from ..inference.predictor import Prediction

PLACEHOLDER_TEXT = "--"

BOX_ORIGIN = (10, 10)
BOX_PADDING = (10, 8)
BOX_ALPHA = 0.6
FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.8
FONT_THICKNESS = 2
TEXT_COLOR = (255, 255, 255)


def format_readout(prediction: Optional[Prediction]) -> str:
    """Readout text, with "--" standing in before the first prediction."""
    if prediction is None or prediction.is_placeholder:
        return f"Age: {PLACEHOLDER_TEXT} | Gender: {PLACEHOLDER_TEXT}"
    return f"Age: {prediction.age} | Gender: {prediction.gender}"


def blank_surface(width: int, height: int) -> np.ndarray:
    """Black surface shown when there is no video."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def fit_frame(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """Draw a frame into a new surface of the display size."""
    if frame.shape[1] == width and frame.shape[0] == height:
        return frame.copy()
    return cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)


def draw_overlay(surface: np.ndarray, prediction: Optional[Prediction]) -> np.ndarray:
    """
    Draw the readout in a translucent box at the top-left of the surface.

    Args:
        surface: Display surface, modified in place
        prediction: Latest prediction or None

    Returns:
        The same surface
    """
    text = format_readout(prediction)
    (text_w, text_h), baseline = cv2.getTextSize(text, FONT, FONT_SCALE, FONT_THICKNESS)

    x0, y0 = BOX_ORIGIN
    pad_x, pad_y = BOX_PADDING
    h, w = surface.shape[:2]
    x1 = min(w, x0 + text_w + 2 * pad_x)
    y1 = min(h, y0 + text_h + baseline + 2 * pad_y)

    roi = surface[y0:y1, x0:x1]
    if roi.size:
        shade = np.zeros_like(roi)
        surface[y0:y1, x0:x1] = cv2.addWeighted(shade, BOX_ALPHA, roi, 1.0 - BOX_ALPHA, 0)

    cv2.putText(surface, text, (x0 + pad_x, y0 + pad_y + text_h),
                FONT, FONT_SCALE, TEXT_COLOR, FONT_THICKNESS, cv2.LINE_AA)
    return surface

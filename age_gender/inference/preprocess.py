"""
Frame Preprocessing
===================

Converts a captured BGR frame into the planar float tensor the model expects.

Resizing uses cv2.INTER_LINEAR, which samples at half-pixel centres. A
bilinear resize with corner-aligned sampling (half_pixel_centers=False, as in
tf.image / tfjs resizeBilinear defaults) gives slightly different values for
the same frame.
"""

import cv2
import numpy as np

from ..errors import InferenceError

INPUT_SIZE = 224


def to_input_tensor(frame: np.ndarray, size: int = INPUT_SIZE) -> np.ndarray:
    """
    Derive the model input tensor from a camera frame.

    The frame is converted to RGB, bilinearly resized to ``size`` x ``size``,
    scaled from [0, 255] to [0, 1] and permuted from interleaved (HWC) to
    planar (CHW) layout with a leading batch axis.

    Args:
        frame: Camera frame as an HxWx3 uint8 BGR array
        size: Square edge length of the model input

    Returns:
        Contiguous float32 array of shape (1, 3, size, size)

    Raises:
        InferenceError: If the frame is not a 3-channel image
    """
    if frame is None or frame.ndim != 3 or frame.shape[2] != 3 or frame.size == 0:
        shape = None if frame is None else frame.shape
        raise InferenceError(f"Expected an HxWx3 frame, got shape {shape}")

    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    resized = cv2.resize(rgb, (size, size), interpolation=cv2.INTER_LINEAR)
    scaled = resized.astype(np.float32) / 255.0
    planar = np.transpose(scaled, (2, 0, 1))[np.newaxis, ...]
    return np.ascontiguousarray(planar)

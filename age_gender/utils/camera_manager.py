"""
Camera Manager Module
=====================

Opens and reads the webcam used as the live video source.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from config import CameraConfig
from ..errors import CameraError

log = logging.getLogger(__name__)

AUTO_DETECT_INDICES = (0, 1, 2)


class CameraStream:
    """
    Single webcam video source.

    Attributes:
        config (CameraConfig): Requested device index and capture size
        cap: Underlying cv2.VideoCapture, or None when closed
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        """Initialize without touching the device."""
        self.config = config or CameraConfig()
        self.cap: Optional[cv2.VideoCapture] = None
        self._has_frame = False

    def open(self) -> "CameraStream":
        """
        Open the configured device, auto-detecting when no index is set.

        Raises:
            CameraError: If no device can be opened
        """
        if self.config.index is None:
            cap = self._auto_detect_camera()
        else:
            cap = cv2.VideoCapture(self.config.index)
        if cap is None or not cap.isOpened():
            if cap is not None:
                cap.release()
            raise CameraError(f"Could not open camera (index={self.config.index})")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        cap.set(cv2.CAP_PROP_FPS, self.config.fps)
        self.cap = cap
        log.info("Webcam started (%dx%d)",
                 int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
                 int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
        return self

    @staticmethod
    def _auto_detect_camera() -> Optional[cv2.VideoCapture]:
        """Return the first device that delivers a non-empty frame."""
        for idx in AUTO_DETECT_INDICES:
            cap = cv2.VideoCapture(idx)
            if cap.isOpened():
                ret, frame = cap.read()
                if ret and frame is not None and frame.size > 0:
                    log.info("Using camera %d", idx)
                    return cap
            cap.release()
        return None

    def is_opened(self) -> bool:
        """Check if the device is open."""
        return self.cap is not None and self.cap.isOpened()

    def is_ready(self) -> bool:
        """Open and already delivering decoded frames."""
        return self.is_opened() and self._has_frame

    def read_frame(self) -> Optional[np.ndarray]:
        """
        Grab the current frame.

        Returns:
            BGR frame, or None if the device is closed or has no data yet
        """
        if not self.is_opened():
            return None
        ret, frame = self.cap.read()
        if not ret or frame is None or frame.size == 0:
            return None
        self._has_frame = True
        return frame

    def release(self) -> None:
        """Release the device."""
        if self.cap is not None:
            try:
                self.cap.release()
            finally:
                self.cap = None
                self._has_frame = False


def open_camera(config: Optional[CameraConfig] = None) -> CameraStream:
    """Open a camera stream or raise CameraError."""
    return CameraStream(config).open()

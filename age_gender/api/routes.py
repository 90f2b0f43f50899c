"""
API Routes Module
=================

Flask API routes for the age & gender demo server.
"""

import logging
import time

import cv2
import numpy as np
from flask import Response, render_template_string, jsonify

from ..utils import FrameInferenceLoop, format_readout

log = logging.getLogger(__name__)

JPEG_QUALITY = 85


def _encode_frame(frame: np.ndarray) -> bytes:
    """Encode frame to JPEG bytes."""
    ret, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
    return buffer.tobytes() if ret else b""


def _stream_frames(loop: FrameInferenceLoop):
    """Generator for streaming the annotated display surface."""
    if not loop.start():
        return

    interval = 1.0 / max(1, loop.config.display_fps)
    while loop.is_running():
        frame = loop.latest_surface()
        if frame is not None:
            chunk = _encode_frame(frame)
            if chunk:
                yield (b"--frame\r\n" b"Content-Type: image/jpeg\r\n\r\n" + chunk + b"\r\n")
        time.sleep(interval)


def register_routes(app, html_template: str, loop: FrameInferenceLoop):
    """
    Register all API routes with the Flask app.

    Args:
        app: Flask application instance
        html_template: HTML template string for the index page
        loop: Frame loop that owns the camera, model and latest prediction
    """

    @app.route("/")
    def index():
        """Serve the main web interface."""
        return render_template_string(
            html_template,
            width=loop.config.display_width,
            height=loop.config.display_height,
        )

    @app.route("/video_feed")
    def video_feed():
        """Stream MJPEG video with the prediction overlay."""
        return Response(
            _stream_frames(loop),
            mimetype="multipart/x-mixed-replace; boundary=frame",
        )

    @app.route("/prediction")
    def prediction():
        """
        Latest prediction.

        Response JSON:
            {
                "age": "<one-decimal age>" | null,
                "gender": "Male" | "Female" | null,
                "text": "Age: ... | Gender: ..."
            }
        """
        current = loop.prediction
        return jsonify({
            "age": current.age or None,
            "gender": current.gender or None,
            "text": format_readout(current),
        })

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "loop_running": loop.is_running(),
            "model_loaded": loop.model_loaded(),
            "camera_ready": loop.camera_ready(),
        })

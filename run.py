"""
Age & Gender Demo Server
========================

Main entry point for the Flask server.

Usage:
    python run.py

Or with gunicorn (single worker; the loop owns the webcam):
    gunicorn -w 1 --threads 4 -b 0.0.0.0:5000 run:app
"""

import atexit
import logging
from typing import Optional

from flask import Flask

from age_gender.api import register_routes
from age_gender.utils import FrameInferenceLoop, create_default_loop, setup_logging
from config import get_camera_config, get_loop_config, get_model_config, get_server_config
from templates.index import HTML_TEMPLATE

log = logging.getLogger(__name__)


def create_app(loop: Optional[FrameInferenceLoop] = None) -> Flask:
    """
    Build the Flask app.

    Args:
        loop: Frame loop to serve; one wired to the webcam and remote model
            is created when omitted. It starts on the first stream request.
    """
    if loop is None:
        loop = create_default_loop(
            camera_config=get_camera_config(),
            model_config=get_model_config(),
            loop_config=get_loop_config(),
        )

    app = Flask(__name__)
    app.config["JSON_SORT_KEYS"] = False
    app.extensions["frame_loop"] = loop
    # Stop capture and release the webcam when the server process exits
    atexit.register(loop.stop)

    register_routes(app, HTML_TEMPLATE, loop)
    return app


app = create_app()


def main():
    """Main entry point."""
    config = get_server_config()
    setup_logging(config.log_level)
    log.info("Age & Gender Demo running at http://%s:%d (debug=%s)",
             config.host, config.port, config.debug)
    log.info("Endpoints: GET / | GET /video_feed | GET /prediction | GET /health")
    app.run(host=config.host, port=config.port, debug=config.debug,
            threaded=config.threaded, use_reloader=False)


if __name__ == "__main__":
    main()

"""
Age & Gender Demo Server
========================

A Flask-based server that runs a pretrained age/gender ONNX model on live
webcam frames and streams the annotated video to the browser.

Modules:
    - inference: Model loading, preprocessing and output parsing
    - api: Flask API routes and endpoints
    - utils: Camera access, overlay drawing and the frame loop
"""

__version__ = "1.0.0"
__author__ = "Age & Gender Demo Team"

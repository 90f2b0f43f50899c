"""
Frame Inference Loop
====================

Captures webcam frames, runs the age/gender model on them and keeps the
latest annotated display surface for streaming.

The loop thread is the only writer of the prediction and the surface. Model
loading and inference run on a single-worker executor, so at most one of them
is in flight. Drawing does not wait for inference: the readout may lag the
video by one or more frames when the model is slower than the display rate.

Usage:
    loop = FrameInferenceLoop(model_factory, camera_factory)
    loop.start()
    surface = loop.latest_surface()
    loop.stop()
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from functools import partial
from typing import Callable, Optional

import numpy as np

from config import CameraConfig, LoopConfig, ModelConfig
from ..inference import AgeGenderModel, Prediction, PLACEHOLDER, load_model, to_input_tensor
from .camera_manager import CameraStream, open_camera
from .overlay import blank_surface, draw_overlay, fit_frame

log = logging.getLogger(__name__)

ModelFactory = Callable[[], AgeGenderModel]
CameraFactory = Callable[[], CameraStream]


class LoopContext:
    """
    State owned by one run of the loop.

    Attributes:
        model: Loaded model handle, None until loading succeeds
        camera: Open camera stream, None if acquisition failed
        prediction (Prediction): Last published prediction
        cancelled (bool): Teardown flag
    """

    def __init__(self):
        self.model: Optional[AgeGenderModel] = None
        self.camera: Optional[CameraStream] = None
        self.prediction: Prediction = PLACEHOLDER
        self.surface: Optional[np.ndarray] = None
        self.cancelled = False
        self.lock = threading.Lock()


class FrameInferenceLoop:
    """
    Capture -> preprocess -> infer -> publish loop.

    Attributes:
        running (bool): Whether the loop thread is active
        context (LoopContext): State of the current run
    """

    def __init__(
        self,
        model_factory: ModelFactory,
        camera_factory: CameraFactory,
        config: Optional[LoopConfig] = None,
        input_size: int = 224,
    ):
        self._model_factory = model_factory
        self._camera_factory = camera_factory
        self.config = config or LoopConfig()
        self.input_size = input_size

        self.context = LoopContext()
        self.running = False
        self.thread: Optional[threading.Thread] = None
        self.lock = threading.Lock()
        self.join_timeout = 2.0

        self._executor: Optional[ThreadPoolExecutor] = None
        self._model_future: Optional[Future] = None
        self._pending: Optional[Future] = None

    # ------------------------------------------------------------------ lifecycle

    def initialize(self) -> None:
        """Acquire the camera and start loading the model, independently."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self._release_camera(self.context)
        self.context = LoopContext()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="inference")
        self._pending = None

        try:
            self.context.camera = self._camera_factory()
        except Exception as e:
            log.error("Webcam error: %s", e)

        self._model_future = self._executor.submit(self._model_factory)

    def start(self) -> bool:
        """
        Initialize and start the loop thread.

        Returns:
            True once the loop is running
        """
        with self.lock:
            if self.running:
                return True
            self.initialize()
            self.running = True
            self.thread = threading.Thread(target=self._run, name="frame-loop", daemon=True)
            self.thread.start()
            return True

    def stop(self) -> None:
        """Cancel the loop; an in-flight inference finishes but is not published."""
        with self.lock:
            ctx = self.context
            ctx.cancelled = True
            self.running = False
            loop_alive = False
            if self.thread:
                self.thread.join(timeout=self.join_timeout)
                loop_alive = self.thread.is_alive()
                self.thread = None
            if self._executor:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
            if loop_alive:
                log.warning("Frame loop still busy after %.1fs; it releases the camera on exit",
                            self.join_timeout)
            else:
                self._release_camera(ctx)
            ctx.model = None
            self._model_future = None
            self._pending = None

    def _run(self) -> None:
        interval = 1.0 / max(1, self.config.display_fps)
        ctx = self.context
        try:
            while not ctx.cancelled:
                started = time.monotonic()
                try:
                    self.step()
                except Exception:
                    log.exception("Frame loop error")
                time.sleep(max(0.0, interval - (time.monotonic() - started)))
        finally:
            self._release_camera(ctx)

    @staticmethod
    def _release_camera(ctx: LoopContext) -> None:
        with ctx.lock:
            camera, ctx.camera = ctx.camera, None
        if camera is not None:
            try:
                camera.release()
            except Exception as e:
                log.warning("Camera release failed: %s", e)

    # ------------------------------------------------------------------ one tick

    def step(self) -> None:
        """Run one display refresh."""
        ctx = self.context
        self._poll_model()
        self._collect_inference()

        camera = ctx.camera
        executor = self._executor
        frame = camera.read_frame() if camera is not None else None

        width, height = self.config.display_width, self.config.display_height
        if frame is None:
            surface = blank_surface(width, height)
        else:
            surface = fit_frame(frame, width, height)

        if (frame is not None and ctx.model is not None and executor is not None
                and self._pending is None and not ctx.cancelled):
            self._pending = executor.submit(self._infer, ctx.model, frame)

        draw_overlay(surface, ctx.prediction)
        with ctx.lock:
            ctx.surface = surface

    def _infer(self, model: AgeGenderModel, frame: np.ndarray) -> Prediction:
        tensor = to_input_tensor(frame, self.input_size)
        return model.predict(tensor)

    def _poll_model(self) -> None:
        fut = self._model_future
        if fut is None or not fut.done():
            return
        self._model_future = None
        try:
            model = fut.result()
        except Exception as e:
            log.error("Model load error: %s", e)
            return
        if not self.context.cancelled:
            self.context.model = model

    def _collect_inference(self) -> None:
        fut = self._pending
        if fut is None or not fut.done():
            return
        self._pending = None
        try:
            prediction = fut.result()
        except Exception:
            log.exception("Inference error")
            return
        if self.context.cancelled:
            return
        # Single reference swap; readers never see a half-updated pair
        self.context.prediction = prediction

    def drain(self, timeout: float = 5.0) -> None:
        """Wait for outstanding model-load/inference work and absorb its result."""
        futures = [f for f in (self._model_future, self._pending) if f is not None]
        if futures:
            wait(futures, timeout=timeout)
        self._poll_model()
        self._collect_inference()

    # ------------------------------------------------------------------ readers

    @property
    def prediction(self) -> Prediction:
        return self.context.prediction

    def model_loaded(self) -> bool:
        return self.context.model is not None

    def camera_ready(self) -> bool:
        camera = self.context.camera
        return camera is not None and camera.is_ready()

    def is_running(self) -> bool:
        return self.running

    def latest_surface(self) -> Optional[np.ndarray]:
        """
        Copy of the latest display surface.

        Returns:
            640x480 BGR image, or None before the first tick
        """
        with self.context.lock:
            if self.context.surface is not None:
                return self.context.surface.copy()
            return None


def create_default_loop(
    camera_config: Optional[CameraConfig] = None,
    model_config: Optional[ModelConfig] = None,
    loop_config: Optional[LoopConfig] = None,
) -> FrameInferenceLoop:
    """Loop wired to the real webcam and the remote ONNX model."""
    model_config = model_config or ModelConfig()
    return FrameInferenceLoop(
        model_factory=partial(load_model, model_config),
        camera_factory=partial(open_camera, camera_config),
        config=loop_config,
        input_size=model_config.input_size,
    )

"""
Model Loader
============

Fetches the ONNX model from its remote location and opens an inference
session on it. No versioning or checksum validation is done.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import onnxruntime as ort
import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import ModelConfig
from ..errors import ModelLoadError
from .predictor import AgeGenderModel

log = logging.getLogger(__name__)

USER_AGENT = "age-gender-demo/1.0"


def make_session(retries: int = 3) -> requests.Session:
    """Create an HTTP session that retries transient failures."""
    s = requests.Session()
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    s.mount("https://", HTTPAdapter(max_retries=retry))
    s.mount("http://", HTTPAdapter(max_retries=retry))
    s.headers.update({"User-Agent": USER_AGENT})
    return s


def fetch_model_bytes(url: str, timeout: float,
                      http: Optional[requests.Session] = None) -> bytes:
    """
    Download the serialized model.

    Raises:
        ModelLoadError: On any network or HTTP error, or an empty body
    """
    http = http or make_session()
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ModelLoadError(f"Failed to download model from {url}: {e}") from e

    data = resp.content
    if not data:
        raise ModelLoadError(f"Empty model body from {url}")
    return data


def _read_model_bytes(config: ModelConfig, http: Optional[requests.Session]) -> Tuple[bytes, bool]:
    """Model bytes, and whether they came from the local cache."""
    cache = Path(config.cache_path) if config.cache_path else None
    if cache is not None and cache.is_file():
        log.info("Using cached model at %s", cache)
        return cache.read_bytes(), True

    data = fetch_model_bytes(config.url, config.timeout, http)
    if cache is not None:
        try:
            cache.parent.mkdir(parents=True, exist_ok=True)
            cache.write_bytes(data)
        except OSError as e:
            log.warning("Could not cache model at %s: %s", cache, e)
    return data, False


def _create_ort_session(data: bytes):
    return ort.InferenceSession(data, providers=["CPUExecutionProvider"])


def load_model(
    config: ModelConfig,
    http: Optional[requests.Session] = None,
    session_factory: Callable[[bytes], object] = _create_ort_session,
) -> AgeGenderModel:
    """
    Load the age/gender model.

    A cached copy that fails to parse is deleted and downloaded once more.

    Args:
        config: Model source and I/O names
        http: Optional HTTP session (a retrying one is created otherwise)
        session_factory: Builds an inference session from model bytes

    Returns:
        Ready-to-use model handle

    Raises:
        ModelLoadError: If the model cannot be fetched or parsed
    """
    data, cached = _read_model_bytes(config, http)
    try:
        session = session_factory(data)
    except Exception as e:
        if not cached:
            raise ModelLoadError(f"Failed to parse model: {e}") from e
        log.warning("Cached model at %s is unusable (%s), downloading again",
                    config.cache_path, e)
        Path(config.cache_path).unlink(missing_ok=True)
        data, _ = _read_model_bytes(config, http)
        try:
            session = session_factory(data)
        except Exception as retry_error:
            raise ModelLoadError(f"Failed to parse model: {retry_error}") from retry_error

    log.info("Model loaded from %s (%d bytes)", config.url, len(data))
    return AgeGenderModel(
        session,
        input_name=config.input_name,
        age_output=config.age_output,
        gender_output=config.gender_output,
    )

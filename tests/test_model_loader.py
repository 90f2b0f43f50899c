"""
Unit tests for model loading.

The network and onnxruntime are replaced with fakes.
"""

import pytest
import requests
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import ModelConfig
from age_gender.errors import ModelLoadError
from age_gender.inference import AgeGenderModel, load_model

MODEL_BYTES = b"\x08\x07onnx-model-bytes"


class FakeResponse:
    def __init__(self, content=MODEL_BYTES, status=200):
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.response


class TestLoadModel:
    """Test suite for load_model."""

    def test_downloads_and_builds_session(self):
        http = FakeHttp()
        seen = []

        model = load_model(ModelConfig(), http=http,
                           session_factory=lambda data: seen.append(data) or object())

        assert isinstance(model, AgeGenderModel)
        assert model.input_name == "input_image"
        assert http.urls == [ModelConfig().url]
        assert seen == [MODEL_BYTES]

    def test_network_error_raises_model_load_error(self):
        http = FakeHttp(error=requests.ConnectionError("offline"))
        with pytest.raises(ModelLoadError):
            load_model(ModelConfig(), http=http, session_factory=lambda data: object())

    def test_http_error_raises_model_load_error(self):
        http = FakeHttp(response=FakeResponse(status=404))
        with pytest.raises(ModelLoadError):
            load_model(ModelConfig(), http=http, session_factory=lambda data: object())

    def test_malformed_model_raises_model_load_error(self):
        def broken(data):
            raise ValueError("not an onnx model")

        with pytest.raises(ModelLoadError):
            load_model(ModelConfig(), http=FakeHttp(), session_factory=broken)

    def test_cache_written_then_reused(self, tmp_path):
        cache = tmp_path / "models" / "model.onnx"
        config = ModelConfig(cache_path=str(cache))

        first = FakeHttp()
        load_model(config, http=first, session_factory=lambda data: object())
        assert cache.read_bytes() == MODEL_BYTES

        second = FakeHttp(error=requests.ConnectionError("offline"))
        load_model(config, http=second, session_factory=lambda data: object())
        assert second.urls == []

    def test_corrupt_cache_is_replaced(self, tmp_path):
        cache = tmp_path / "model.onnx"
        cache.write_bytes(b"truncated")
        config = ModelConfig(cache_path=str(cache))
        http = FakeHttp()

        def only_real_model(data):
            if data != MODEL_BYTES:
                raise ValueError("protobuf parsing failed")
            return object()

        model = load_model(config, http=http, session_factory=only_real_model)

        assert isinstance(model, AgeGenderModel)
        assert http.urls == [config.url]
        assert cache.read_bytes() == MODEL_BYTES

    def test_corrupt_download_after_corrupt_cache_raises(self, tmp_path):
        cache = tmp_path / "model.onnx"
        cache.write_bytes(b"truncated")
        config = ModelConfig(cache_path=str(cache))

        def broken(data):
            raise ValueError("not an onnx model")

        with pytest.raises(ModelLoadError):
            load_model(config, http=FakeHttp(), session_factory=broken)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

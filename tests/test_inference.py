"""
Unit tests for inference modules.

Tests for preprocessing, output parsing and the model wrapper.
"""

import pytest
import numpy as np
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from age_gender.errors import InferenceError
from age_gender.inference import (
    AgeGenderModel,
    Prediction,
    PLACEHOLDER,
    format_age,
    gender_from_logits,
    parse_outputs,
    to_input_tensor,
)


class FakeSession:
    """Stands in for onnxruntime.InferenceSession."""

    def __init__(self, age=23.456, logits=(0.8, 0.2), error=None):
        self.age = age
        self.logits = logits
        self.error = error
        self.calls = []

    def run(self, output_names, feed):
        self.calls.append((list(output_names), feed))
        if self.error:
            raise self.error
        return [
            np.array([self.age], dtype=np.float32),
            np.array([self.logits], dtype=np.float32),
        ]


class TestGenderFromLogits:
    """Test suite for gender label selection."""

    def test_first_logit_higher_is_male(self):
        assert gender_from_logits([0.8, 0.2]) == "Male"

    def test_second_logit_higher_is_female(self):
        assert gender_from_logits([0.2, 0.8]) == "Female"

    def test_tie_is_female(self):
        assert gender_from_logits([0.5, 0.5]) == "Female"

    def test_batched_logits_are_flattened(self):
        assert gender_from_logits(np.array([[3.0, -1.0]], dtype=np.float32)) == "Male"

    def test_too_few_logits_raises(self):
        with pytest.raises(InferenceError):
            gender_from_logits([1.0])


class TestFormatAge:
    """Test suite for age formatting."""

    def test_rounds_to_one_decimal(self):
        assert format_age(23.456) == "23.5"

    def test_whole_number_keeps_decimal(self):
        assert format_age(30) == "30.0"

    def test_float32_scalar(self):
        assert format_age(np.float32(41.04)) == "41.0"

    def test_exact_tie_rounds_up(self):
        assert format_age(22.25) == "22.3"
        assert format_age(np.float32(30.75)) == "30.8"

    def test_parsed_tie_rounds_up(self):
        prediction = parse_outputs({
            "predicted_age": np.array([22.25], dtype=np.float32),
            "predicted_gender_logits": np.array([[0.8, 0.2]], dtype=np.float32),
        })
        assert prediction.age == "22.3"


class TestParseOutputs:
    """Test suite for output parsing."""

    def test_both_fields_parsed(self):
        prediction = parse_outputs({
            "predicted_age": np.array([23.456], dtype=np.float32),
            "predicted_gender_logits": np.array([[0.2, 0.8]], dtype=np.float32),
        })
        assert prediction == Prediction(age="23.5", gender="Female")

    def test_scalar_age(self):
        prediction = parse_outputs({
            "predicted_age": np.float32(19.0),
            "predicted_gender_logits": [0.9, 0.1],
        })
        assert prediction.age == "19.0"
        assert prediction.gender == "Male"

    def test_missing_gender_output_raises(self):
        with pytest.raises(InferenceError):
            parse_outputs({"predicted_age": np.array([20.0])})

    def test_missing_age_output_raises(self):
        with pytest.raises(InferenceError):
            parse_outputs({"predicted_gender_logits": np.array([0.1, 0.2])})

    def test_placeholder(self):
        assert PLACEHOLDER.is_placeholder
        assert not Prediction(age="1.0", gender="Male").is_placeholder


class TestPreprocess:
    """Test suite for input tensor derivation."""

    def test_shape_and_dtype(self):
        frame = np.random.randint(0, 256, (480, 640, 3), dtype=np.uint8)
        tensor = to_input_tensor(frame)
        assert tensor.shape == (1, 3, 224, 224)
        assert tensor.dtype == np.float32

    def test_values_scaled_to_unit_range(self):
        frame = np.full((100, 100, 3), 255, dtype=np.uint8)
        tensor = to_input_tensor(frame)
        assert tensor.min() == pytest.approx(1.0)
        assert tensor.max() == pytest.approx(1.0)

    def test_channels_are_planar_rgb(self):
        # Pure blue in BGR becomes the last (B) plane in RGB order
        frame = np.zeros((50, 80, 3), dtype=np.uint8)
        frame[:, :, 0] = 255
        tensor = to_input_tensor(frame)
        assert np.allclose(tensor[0, 0], 0.0)
        assert np.allclose(tensor[0, 1], 0.0)
        assert np.allclose(tensor[0, 2], 1.0)

    def test_deterministic(self):
        frame = np.random.randint(0, 256, (480, 640, 3), dtype=np.uint8)
        first = to_input_tensor(frame)
        second = to_input_tensor(frame)
        assert np.array_equal(first, second)

    def test_resize_samples_half_pixel_centres(self):
        # Alternating black/white columns halved in width: half-pixel sampling
        # blends each pair, corner-aligned sampling would keep only the black ones
        frame = np.zeros((448, 448, 3), dtype=np.uint8)
        frame[:, 1::2] = 255
        tensor = to_input_tensor(frame)
        assert tensor.shape == (1, 3, 224, 224)
        assert np.allclose(tensor, 0.5, atol=0.01)

    def test_rejects_grayscale(self):
        with pytest.raises(InferenceError):
            to_input_tensor(np.zeros((480, 640), dtype=np.uint8))


class TestAgeGenderModel:
    """Test suite for the model wrapper."""

    def test_predict_binds_input_name(self):
        session = FakeSession()
        model = AgeGenderModel(session)
        tensor = np.zeros((1, 3, 224, 224), dtype=np.float32)

        prediction = model.predict(tensor)

        assert prediction == Prediction(age="23.5", gender="Male")
        output_names, feed = session.calls[0]
        assert output_names == ["predicted_age", "predicted_gender_logits"]
        assert list(feed) == ["input_image"]
        assert feed["input_image"] is tensor

    def test_session_error_is_wrapped(self):
        model = AgeGenderModel(FakeSession(error=RuntimeError("bad input")))
        with pytest.raises(InferenceError):
            model.predict(np.zeros((1, 3, 224, 224), dtype=np.float32))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

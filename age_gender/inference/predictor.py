"""
Age & Gender Predictor
======================

Runs the loaded ONNX session on an input tensor and turns the raw outputs
into a displayable prediction.

Classes:
    Prediction: Immutable (age, gender) pair shown on the overlay
    AgeGenderModel: Model handle wrapping an onnxruntime session

Usage:
    model = AgeGenderModel(session)
    prediction = model.predict(to_input_tensor(frame))
    print(prediction.age, prediction.gender)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Sequence

import numpy as np

from ..errors import InferenceError

MALE = "Male"
FEMALE = "Female"

INPUT_NAME = "input_image"
AGE_OUTPUT = "predicted_age"
GENDER_OUTPUT = "predicted_gender_logits"

ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class Prediction:
    """
    Latest age/gender estimate.

    Both fields are replaced together by swapping the whole object; an empty
    string means no successful inference has happened yet.
    """
    age: str = ""
    gender: str = ""

    @property
    def is_placeholder(self) -> bool:
        return not self.age and not self.gender


PLACEHOLDER = Prediction()


def format_age(value: Any) -> str:
    """Format a raw age estimate with exactly one decimal digit, ties rounded up."""
    return str(Decimal(float(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def gender_from_logits(logits: Any) -> str:
    """
    Pick the gender label from two logits.

    "Male" only when the first logit is strictly greater; ties go to "Female".
    """
    flat = np.asarray(logits, dtype=np.float32).reshape(-1)
    if flat.size < 2:
        raise InferenceError(f"Expected 2 gender logits, got {flat.size}")
    return MALE if flat[0] > flat[1] else FEMALE


def parse_outputs(
    outputs: Mapping[str, Any],
    age_output: str = AGE_OUTPUT,
    gender_output: str = GENDER_OUTPUT,
) -> Prediction:
    """
    Build a Prediction from named model outputs.

    Raises:
        InferenceError: If an output is missing or malformed
    """
    for name in (age_output, gender_output):
        if name not in outputs or outputs[name] is None:
            raise InferenceError(f"Model output '{name}' missing")

    age = np.asarray(outputs[age_output], dtype=np.float32).reshape(-1)
    if age.size < 1:
        raise InferenceError("Model output for age is empty")

    # Compute both fields before building the pair
    gender = gender_from_logits(outputs[gender_output])
    return Prediction(age=format_age(age[0]), gender=gender)


class AgeGenderModel:
    """
    Loaded age/gender model.

    Attributes:
        session: onnxruntime.InferenceSession (or anything with the same run())
        input_name (str): Name the input tensor is bound to
    """

    def __init__(
        self,
        session,
        input_name: str = INPUT_NAME,
        age_output: str = AGE_OUTPUT,
        gender_output: str = GENDER_OUTPUT,
    ):
        self.session = session
        self.input_name = input_name
        self.age_output = age_output
        self.gender_output = gender_output

    @property
    def output_names(self) -> Sequence[str]:
        return [self.age_output, self.gender_output]

    def predict(self, tensor: np.ndarray) -> Prediction:
        """
        Run one forward pass.

        Args:
            tensor: float32 array of shape (1, 3, 224, 224)

        Returns:
            Prediction parsed from the model outputs

        Raises:
            InferenceError: If the session fails or returns malformed outputs
        """
        try:
            results = self.session.run(self.output_names, {self.input_name: tensor})
        except Exception as e:
            raise InferenceError(f"Model run failed: {e}") from e

        return parse_outputs(
            dict(zip(self.output_names, results)),
            age_output=self.age_output,
            gender_output=self.gender_output,
        )

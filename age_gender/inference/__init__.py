"""
Inference Module
================

Model loading, frame preprocessing and output parsing.
"""

from .predictor import (
    AgeGenderModel,
    Prediction,
    PLACEHOLDER,
    format_age,
    gender_from_logits,
    parse_outputs,
)
from .preprocess import to_input_tensor
from .model_loader import load_model

__all__ = [
    "AgeGenderModel",
    "Prediction",
    "PLACEHOLDER",
    "format_age",
    "gender_from_logits",
    "parse_outputs",
    "to_input_tensor",
    "load_model",
]

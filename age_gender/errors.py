"""
Errors
======

Exception types raised at the model, camera and inference seams.
"""


class AgeGenderError(Exception):
    """Base class for all demo errors."""


class ModelLoadError(AgeGenderError):
    """The model could not be fetched or parsed."""


class CameraError(AgeGenderError):
    """No usable camera could be opened."""


class InferenceError(AgeGenderError):
    """A single inference cycle failed."""

"""Input records and run settings."""

from .config import ModelInput, SampleSettings, as_model_input

__all__ = [
    'ModelInput',
    'SampleSettings',
    'as_model_input',
]

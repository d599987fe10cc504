"""
AI image generation package for PixeTale.
"""

from .images import PLACEHOLDER_IMAGE_URI, decode_data_uri, to_data_uri
from .prompting import IllustrationPrompt, build_illustration_prompt
from .replicate_service import ReplicateImageGenerator

__all__ = [
    "PLACEHOLDER_IMAGE_URI",
    "decode_data_uri",
    "to_data_uri",
    "IllustrationPrompt",
    "build_illustration_prompt",
    "ReplicateImageGenerator",
]

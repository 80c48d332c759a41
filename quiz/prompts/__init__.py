"""Quiz Prompts - Templates e builder."""

from .builder import build_generation_prompt, build_similarity_prompt, truncate_content
from .templates import MAX_CONTENT_LENGTH, OUTPUT_GRAMMAR, TRUNCATION_MARKER

__all__ = [
    "build_generation_prompt",
    "build_similarity_prompt",
    "truncate_content",
    "MAX_CONTENT_LENGTH",
    "OUTPUT_GRAMMAR",
    "TRUNCATION_MARKER",
]

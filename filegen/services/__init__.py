"""Business logic services."""

from .content_generator import ContentGenerator
from .generation_job import (
    GenerationJob,
    build_job,
    resolve_content_mode,
    start_generation,
)
from .size_resolver import format_size, normalize_filename, parse_unit, to_bytes
from .slider_mapper import SliderMapper, position_for, size_for

__all__ = [
    "ContentGenerator",
    "GenerationJob",
    "SliderMapper",
    "build_job",
    "format_size",
    "normalize_filename",
    "parse_unit",
    "position_for",
    "resolve_content_mode",
    "size_for",
    "start_generation",
    "to_bytes",
]

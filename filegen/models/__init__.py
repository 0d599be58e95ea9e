"""Domain value types."""

from filegen.models.content import ContentMode, ContentModeType, parse_hex_pattern
from filegen.models.job import (
    STATE_TRANSITIONS,
    TERMINAL_STATES,
    Chunk,
    GenerationResult,
    JobState,
)
from filegen.models.size import MAX_FILE_SIZE_BYTES, FileSizeSpec, SizeUnit

__all__ = [
    "Chunk",
    "ContentMode",
    "ContentModeType",
    "FileSizeSpec",
    "GenerationResult",
    "JobState",
    "MAX_FILE_SIZE_BYTES",
    "STATE_TRANSITIONS",
    "SizeUnit",
    "TERMINAL_STATES",
    "parse_hex_pattern",
]

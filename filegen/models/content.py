"""Content mode value types."""

import re
import string
from dataclasses import dataclass
from enum import Enum

from filegen.core.exceptions import ValidationError

_WHITESPACE_RE = re.compile(r"\s+")


class ContentModeType(str, Enum):
    """Kind of bytes a generated file is filled with."""

    RANDOM = "random"
    ZERO_FILL = "zero_fill"
    HEX_PATTERN = "hex_pattern"


@dataclass(frozen=True)
class ContentMode:
    """Content mode with its decoded pattern (hex_pattern mode only)."""

    type: ContentModeType
    pattern: bytes = b""

    def __post_init__(self) -> None:
        if self.type == ContentModeType.HEX_PATTERN and not self.pattern:
            raise ValidationError(
                "Hex pattern must decode to at least one byte", field="hex_pattern"
            )
        if self.type != ContentModeType.HEX_PATTERN and self.pattern:
            raise ValidationError(
                f"Content mode {self.type.value} does not take a pattern",
                field="hex_pattern",
            )

    @classmethod
    def random(cls) -> "ContentMode":
        return cls(ContentModeType.RANDOM)

    @classmethod
    def zero_fill(cls) -> "ContentMode":
        return cls(ContentModeType.ZERO_FILL)

    @classmethod
    def hex_pattern(cls, hex_string: str) -> "ContentMode":
        """Build a hex_pattern mode from text such as ``"DEADBEEF"`` or ``"de ad"``."""
        return cls(ContentModeType.HEX_PATTERN, parse_hex_pattern(hex_string))


def parse_hex_pattern(hex_string: str | None) -> bytes:
    """Decode a hex pattern string into bytes.

    Whitespace between digits is ignored. The remaining text must be a
    non-empty, even-length run of hexadecimal digits.

    Raises:
        ValidationError: If the pattern is empty, odd-length or not hex
    """
    if not isinstance(hex_string, str):
        raise ValidationError("Hex pattern is required", field="hex_pattern")

    digits = _WHITESPACE_RE.sub("", hex_string)
    if not digits:
        raise ValidationError("Hex pattern cannot be empty", field="hex_pattern")
    if any(ch not in string.hexdigits for ch in digits):
        raise ValidationError(
            "Hex pattern must contain only hexadecimal characters (0-9, A-F)",
            field="hex_pattern",
        )
    if len(digits) % 2:
        raise ValidationError(
            "Hex pattern must have an even number of hex digits",
            field="hex_pattern",
        )
    return bytes.fromhex(digits)

"""File size value types."""

from dataclasses import dataclass
from enum import Enum

# Hard cap on any generated payload: 10 GiB
MAX_FILE_SIZE_BYTES = 10 * 1024**3


class SizeUnit(str, Enum):
    """Unit of a requested file size."""

    BYTES = "Bytes"
    KB = "KB"
    MB = "MB"
    GB = "GB"

    def multiplier(self, binary: bool = True) -> int:
        """Bytes per unit (1024-based when binary, else 1000-based)."""
        base = 1024 if binary else 1000
        return base ** _UNIT_EXPONENTS[self]


_UNIT_EXPONENTS = {
    SizeUnit.BYTES: 0,
    SizeUnit.KB: 1,
    SizeUnit.MB: 2,
    SizeUnit.GB: 3,
}


@dataclass(frozen=True)
class FileSizeSpec:
    """A requested size as entered by the caller, e.g. ``(10, MB)``."""

    amount: float
    unit: SizeUnit

    def __str__(self) -> str:
        amount = int(self.amount) if float(self.amount).is_integer() else self.amount
        return f"{amount} {self.unit.value}"

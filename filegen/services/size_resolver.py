"""Size resolution: (amount, unit) to a validated byte count."""

import math
from numbers import Real

from filegen.core.exceptions import ValidationError
from filegen.models.size import MAX_FILE_SIZE_BYTES, FileSizeSpec, SizeUnit

DEFAULT_EXTENSION = "bin"
DEFAULT_BASENAME = "file"

# Accepted spellings for each unit (lowercase)
UNIT_ALIASES: dict[str, SizeUnit] = {
    "b": SizeUnit.BYTES,
    "byte": SizeUnit.BYTES,
    "bytes": SizeUnit.BYTES,
    "k": SizeUnit.KB,
    "kb": SizeUnit.KB,
    "kib": SizeUnit.KB,
    "m": SizeUnit.MB,
    "mb": SizeUnit.MB,
    "mib": SizeUnit.MB,
    "g": SizeUnit.GB,
    "gb": SizeUnit.GB,
    "gib": SizeUnit.GB,
}


def parse_unit(value: str | SizeUnit) -> SizeUnit:
    """Resolve a unit name such as ``"kb"`` or ``"Bytes"`` to a SizeUnit.

    Raises:
        ValidationError: If the unit is unknown
    """
    if isinstance(value, SizeUnit):
        return value
    unit = UNIT_ALIASES.get(str(value).strip().lower())
    if unit is None:
        raise ValidationError(f"Unknown size unit: {value!r}", field="unit")
    return unit


def to_bytes(spec: FileSizeSpec, binary: bool = True) -> int:
    """Resolve a size spec to a byte count.

    The amount is multiplied by the unit's multiplier and rounded to whole
    bytes. The 10 GiB cap applies in both binary and decimal mode.

    Args:
        spec: Requested size
        binary: Use 1024-based units (default) instead of 1000-based

    Returns:
        Byte count in ``1..MAX_FILE_SIZE_BYTES``

    Raises:
        ValidationError: If the amount is not a finite positive number, or
            the resolved size is 0 bytes or exceeds 10 GiB
    """
    amount = spec.amount
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise ValidationError("File size must be a number", field="amount")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValidationError("File size must be a finite number", field="amount")
    if amount <= 0:
        raise ValidationError("File size must be greater than 0", field="amount")

    unit = parse_unit(spec.unit)
    multiplier = unit.multiplier(binary)
    # Checked before multiplying: huge amounts overflow a float product
    if amount > MAX_FILE_SIZE_BYTES / multiplier:
        raise ValidationError("File size cannot exceed 10 GB", field="amount")
    num_bytes = round(amount * multiplier)

    if num_bytes <= 0:
        raise ValidationError(
            f"File size {spec} resolves to 0 bytes", field="amount"
        )
    if num_bytes > MAX_FILE_SIZE_BYTES:
        raise ValidationError("File size cannot exceed 10 GB", field="amount")
    return num_bytes


def format_size(num_bytes: int, binary: bool = True) -> str:
    """Human-readable size, e.g. ``"512 B"``, ``"1.5 MB"``."""
    base = 1024 if binary else 1000
    if num_bytes < base:
        return f"{num_bytes} B"
    if num_bytes < base**2:
        return f"{num_bytes / base:.1f} KB"
    if num_bytes < base**3:
        return f"{num_bytes / base**2:.1f} MB"
    return f"{num_bytes / base**3:.1f} GB"


def normalize_filename(
    extension: str | None = None,
    basename: str | None = None,
) -> str:
    """Build a download filename from an optional extension.

    A leading dot is stripped and an empty extension falls back to ``bin``.
    """
    ext = (extension or "").strip()
    if ext.startswith("."):
        ext = ext[1:]
    if not ext:
        ext = DEFAULT_EXTENSION

    name = (basename or "").strip() or DEFAULT_BASENAME
    return f"{name}.{ext}"

"""Slider position <-> file size mapping.

A size slider runs from 0 to 100. A fixed table of breakpoints (1 KB up
to 10 GB) is laid out at equally spaced positions, and sizes between two
breakpoints are interpolated piecewise:

- Both breakpoints share a unit: the amount is interpolated linearly.
- The unit changes (KB -> MB, MB -> GB): the first half of the segment
  counts the lower unit up to 1000, the second half counts the upper unit
  from 1 up to the next breakpoint's amount.

Sizes that fall outside every segment (e.g. 1010 KB, or a size given in
bytes) are placed on a logarithmic bytes scale between the first and last
breakpoint and clamped to the slider range.
"""

import math
from collections.abc import Sequence
from itertools import pairwise

from filegen.core.exceptions import ConfigurationError, ValidationError
from filegen.models.size import FileSizeSpec, SizeUnit
from filegen.services.size_resolver import parse_unit

SLIDER_MIN = 0.0
SLIDER_MAX = 100.0

# Amount at which a unit hands over to the next one in cross-unit segments
UNIT_CROSSOVER_AMOUNT = 1000

DEFAULT_BREAKPOINTS: tuple[FileSizeSpec, ...] = (
    FileSizeSpec(1, SizeUnit.KB),
    FileSizeSpec(10, SizeUnit.KB),
    FileSizeSpec(100, SizeUnit.KB),
    FileSizeSpec(1, SizeUnit.MB),
    FileSizeSpec(10, SizeUnit.MB),
    FileSizeSpec(100, SizeUnit.MB),
    FileSizeSpec(1, SizeUnit.GB),
    FileSizeSpec(5, SizeUnit.GB),
    FileSizeSpec(10, SizeUnit.GB),
)


def _spec_bytes(spec: FileSizeSpec) -> float:
    return spec.amount * spec.unit.multiplier()


class SliderMapper:
    """Bidirectional mapping over a breakpoint table."""

    def __init__(self, breakpoints: Sequence[FileSizeSpec] = DEFAULT_BREAKPOINTS):
        if len(breakpoints) < 2:
            raise ConfigurationError("Slider needs at least two breakpoints")
        sizes = [_spec_bytes(bp) for bp in breakpoints]
        if any(b <= a for a, b in pairwise(sizes)):
            raise ConfigurationError("Slider breakpoints must be strictly increasing")

        self.breakpoints = tuple(breakpoints)
        self.segment_width = (SLIDER_MAX - SLIDER_MIN) / (len(self.breakpoints) - 1)
        self._min_bytes = sizes[0]
        self._max_bytes = sizes[-1]

    def position_for(self, spec: FileSizeSpec) -> float:
        """Slider position (0-100) for a requested size."""
        amount = spec.amount
        unit = parse_unit(spec.unit)
        if isinstance(amount, float) and not math.isfinite(amount):
            return SLIDER_MIN
        if amount <= 0:
            return SLIDER_MIN

        width = self.segment_width
        for i, bp in enumerate(self.breakpoints):
            if bp.unit == unit and amount == bp.amount:
                return SLIDER_MIN + i * width

        for i, (lower, upper) in enumerate(pairwise(self.breakpoints)):
            start = SLIDER_MIN + i * width

            if lower.unit == upper.unit:
                if unit == lower.unit and lower.amount < amount < upper.amount:
                    progress = (amount - lower.amount) / (upper.amount - lower.amount)
                    return start + progress * width
                continue

            # Unit changes inside this segment
            if unit == lower.unit and lower.amount < amount <= UNIT_CROSSOVER_AMOUNT:
                progress = (
                    (amount - lower.amount)
                    / (UNIT_CROSSOVER_AMOUNT - lower.amount)
                    * 0.5
                )
                return start + progress * width
            if unit == upper.unit and 1 <= amount < upper.amount:
                progress = 0.5 + (amount - 1) / (upper.amount - 1) * 0.5
                return start + progress * width

        return self._log_position(amount * unit.multiplier())

    def size_for(self, position: float) -> FileSizeSpec:
        """Requested size for a slider position.

        Positions outside 0-100 are clamped. The amount is rounded to an
        integer.

        Raises:
            ValidationError: If position is not a finite number
        """
        if not math.isfinite(position):
            raise ValidationError("Slider position must be a finite number", field="position")

        position = min(max(position, SLIDER_MIN), SLIDER_MAX) - SLIDER_MIN
        width = self.segment_width
        index = int(position // width)
        if index >= len(self.breakpoints) - 1:
            return self.breakpoints[-1]

        lower = self.breakpoints[index]
        upper = self.breakpoints[index + 1]
        segment_position = (position - index * width) / width
        if segment_position <= 0:
            return lower

        if lower.unit == upper.unit:
            amount = lower.amount + (upper.amount - lower.amount) * segment_position
            return FileSizeSpec(round(amount), lower.unit)

        if segment_position < 0.5:
            progress = segment_position * 2
            amount = lower.amount + progress * (UNIT_CROSSOVER_AMOUNT - lower.amount)
            return FileSizeSpec(round(amount), lower.unit)

        progress = (segment_position - 0.5) * 2
        amount = 1 + progress * (upper.amount - 1)
        return FileSizeSpec(round(amount), upper.unit)

    def _log_position(self, num_bytes: float) -> float:
        """Position on a log-bytes scale between the table's ends, clamped."""
        if num_bytes <= self._min_bytes:
            return SLIDER_MIN
        if num_bytes >= self._max_bytes:
            return SLIDER_MAX
        fraction = math.log(num_bytes / self._min_bytes) / math.log(
            self._max_bytes / self._min_bytes
        )
        position = SLIDER_MIN + fraction * (SLIDER_MAX - SLIDER_MIN)
        return max(SLIDER_MIN, min(SLIDER_MAX, position))


default_mapper = SliderMapper()


def position_for(spec: FileSizeSpec) -> float:
    """Slider position for a size using the default breakpoint table."""
    return default_mapper.position_for(spec)


def size_for(position: float) -> FileSizeSpec:
    """Size for a slider position using the default breakpoint table."""
    return default_mapper.size_for(position)

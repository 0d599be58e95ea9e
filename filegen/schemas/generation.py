"""File generation Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from filegen.models.content import ContentModeType
from filegen.models.job import JobState
from filegen.models.size import SizeUnit


class GenerationRequest(BaseModel):
    """Request to generate a file."""

    amount: float = Field(..., description="Size amount in the given unit")
    unit: SizeUnit = SizeUnit.KB
    content_mode: ContentModeType = ContentModeType.RANDOM
    hex_pattern: str | None = Field(
        None,
        max_length=1024,
        description="Hex digits repeated to fill the file (hex_pattern mode)",
    )
    extension: str | None = Field(None, max_length=32)
    use_binary: bool | None = Field(
        None, description="1024-based units; defaults to server setting"
    )


class GenerationResultResponse(BaseModel):
    """Outcome of a generation job."""

    model_config = ConfigDict(from_attributes=True)

    job_id: UUID
    state: JobState
    bytes_written: int
    total_bytes: int
    filename: str | None = None
    display_size: str | None = None


class SliderSizeResponse(BaseModel):
    """Size selected by a slider position."""

    position: float
    amount: float
    unit: SizeUnit
    size_bytes: int
    display_size: str


class SliderPositionResponse(BaseModel):
    """Slider position for a size."""

    amount: float
    unit: SizeUnit
    position: float

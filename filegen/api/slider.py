"""Size slider API endpoints."""

from fastapi import APIRouter, Query

from filegen.config import get_settings
from filegen.models.size import FileSizeSpec, SizeUnit
from filegen.schemas.generation import SliderPositionResponse, SliderSizeResponse
from filegen.services.size_resolver import format_size, to_bytes
from filegen.services.slider_mapper import position_for, size_for

router = APIRouter(prefix="/slider", tags=["slider"])


@router.get("/size", response_model=SliderSizeResponse)
async def get_size_for_position(
    position: float = Query(..., description="Slider position, clamped to 0-100"),
) -> SliderSizeResponse:
    """Get the file size selected by a slider position."""
    settings = get_settings()
    spec = size_for(position)
    size_bytes = to_bytes(spec, binary=settings.use_binary_units)

    return SliderSizeResponse(
        position=position,
        amount=spec.amount,
        unit=spec.unit,
        size_bytes=size_bytes,
        display_size=format_size(size_bytes, binary=settings.use_binary_units),
    )


@router.get("/position", response_model=SliderPositionResponse)
async def get_position_for_size(
    amount: float = Query(...),
    unit: SizeUnit = Query(SizeUnit.KB),
) -> SliderPositionResponse:
    """Get the slider position for a file size."""
    return SliderPositionResponse(
        amount=amount,
        unit=unit,
        position=position_for(FileSizeSpec(amount, unit)),
    )

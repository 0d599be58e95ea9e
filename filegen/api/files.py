"""File generation API endpoints."""

import asyncio
from collections.abc import AsyncIterator

from fastapi import APIRouter, status
from fastapi.responses import StreamingResponse

from filegen.config import get_settings
from filegen.core.logging import get_logger
from filegen.core.storage import ChannelSink, FileSink, resolve_output_path
from filegen.schemas.generation import GenerationRequest, GenerationResultResponse
from filegen.services.generation_job import GenerationJob, build_job
from filegen.services.size_resolver import format_size, normalize_filename

logger = get_logger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


def _job_from_request(request: GenerationRequest) -> GenerationJob:
    """Validate a request into an idle job (raises ValidationError)."""
    return build_job(
        request.amount,
        request.unit,
        request.content_mode,
        request.hex_pattern,
        binary=request.use_binary,
    )


async def stream_job(job: GenerationJob) -> AsyncIterator[bytes]:
    """Run ``job`` in the background and yield its chunks as they arrive.

    If the consumer stops early (client disconnect), the job is cancelled.
    """
    sink = ChannelSink()

    async def produce() -> None:
        try:
            await job.run(sink)
        finally:
            await sink.close()

    task = asyncio.create_task(produce())
    try:
        async for data in sink:
            yield data
        await task
    finally:
        if not task.done():
            job.cancel()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            logger.info(
                "stream_aborted",
                job_id=str(job.id),
                bytes_written=job.bytes_written,
            )


@router.post("/stream")
async def stream_file(request: GenerationRequest) -> StreamingResponse:
    """Stream a generated file to the client.

    The request is validated before the response starts, so invalid sizes
    or patterns produce a 422 instead of a truncated body.
    """
    job = _job_from_request(request)
    filename = normalize_filename(request.extension)

    logger.info(
        "stream_requested",
        job_id=str(job.id),
        total_bytes=job.total_bytes,
        mode=job.mode.type.value,
    )

    return StreamingResponse(
        stream_job(job),
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(job.total_bytes),
            "X-Job-ID": str(job.id),
        },
    )


@router.post(
    "",
    response_model=GenerationResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_file(request: GenerationRequest) -> GenerationResultResponse:
    """Generate a file into the configured output directory.

    Returns:
        GenerationResultResponse with the stored filename

    Raises:
        ValidationError: 422 for invalid size or pattern
        WriteError: 507 if the file could not be written
    """
    settings = get_settings()
    job = _job_from_request(request)
    filename = normalize_filename(request.extension, basename=str(job.id))
    path = resolve_output_path(filename)

    async with FileSink(path) as sink:
        result = await job.run(sink)

    binary = settings.use_binary_units if request.use_binary is None else request.use_binary
    logger.info(
        "file_generated",
        job_id=str(result.job_id),
        filename=filename,
        bytes_written=result.bytes_written,
    )

    return GenerationResultResponse(
        job_id=result.job_id,
        state=result.state,
        bytes_written=result.bytes_written,
        total_bytes=result.total_bytes,
        filename=filename,
        display_size=format_size(result.total_bytes, binary=binary),
    )

"""Generation job orchestration.

A GenerationJob drives one generation from start to a terminal state:
it pulls chunks from a ContentGenerator one at a time, awaits the sink's
write for each, tracks bytes written and reports integer progress.

State machine:
    idle -> running -> completed | failed | cancelled
    idle -> cancelled (cancelled before it started)

Terminal states are final; a job is discarded after it reaches one.
"""

import asyncio
from collections.abc import Callable
from uuid import UUID, uuid4

import structlog

from filegen.config import get_settings
from filegen.core.exceptions import (
    GenerationError,
    InvalidStateTransitionError,
    ValidationError,
    WriteError,
)
from filegen.core.logging import get_logger
from filegen.core.storage import StreamSink
from filegen.models.content import ContentMode, ContentModeType
from filegen.models.job import (
    STATE_TRANSITIONS,
    TERMINAL_STATES,
    GenerationResult,
    JobState,
)
from filegen.models.size import FileSizeSpec, SizeUnit
from filegen.services.content_generator import ContentGenerator
from filegen.services.size_resolver import parse_unit, to_bytes

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]

# Accepted spellings for content modes (lowercase)
CONTENT_MODE_ALIASES: dict[str, ContentModeType] = {
    "random": ContentModeType.RANDOM,
    "zero_fill": ContentModeType.ZERO_FILL,
    "zerofill": ContentModeType.ZERO_FILL,
    "zero": ContentModeType.ZERO_FILL,
    "zeros": ContentModeType.ZERO_FILL,
    "hex_pattern": ContentModeType.HEX_PATTERN,
    "hexpattern": ContentModeType.HEX_PATTERN,
    "hex": ContentModeType.HEX_PATTERN,
    "custom_hex": ContentModeType.HEX_PATTERN,
}


class GenerationJob:
    """One generation run from a validated size and content mode."""

    def __init__(
        self,
        total_bytes: int,
        mode: ContentMode,
        chunk_size_bytes: int | None = None,
        seed: int | None = None,
    ) -> None:
        self.id: UUID = uuid4()
        self.total_bytes = total_bytes
        self.mode = mode
        self.chunk_size_bytes = (
            get_settings().chunk_size_bytes if chunk_size_bytes is None else chunk_size_bytes
        )
        self.bytes_written = 0
        self.state = JobState.IDLE
        self.error: Exception | None = None

        self._seed = seed
        self._generator: ContentGenerator | None = None
        self._cancel_requested = False

    @property
    def progress(self) -> int:
        """Integer percentage of bytes written (0-100)."""
        return self.bytes_written * 100 // self.total_bytes

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    def can_transition_to(self, new_state: JobState) -> bool:
        """Check if state transition is valid."""
        return new_state in STATE_TRANSITIONS.get(self.state, set())

    def _transition(self, new_state: JobState) -> None:
        if not self.can_transition_to(new_state):
            raise InvalidStateTransitionError(
                f"Cannot move job from {self.state.value} to {new_state.value}",
                bytes_written=self.bytes_written,
            )
        logger.debug(
            "job_state_changed",
            job_id=str(self.id),
            from_state=self.state.value,
            to_state=new_state.value,
        )
        self.state = new_state

    def cancel(self) -> None:
        """Request cooperative cancellation.

        A running job stops at the next chunk boundary, so up to one more
        chunk may still be written. An idle job is cancelled immediately.
        Terminal jobs are left unchanged.
        """
        if self.is_terminal:
            return
        if self.state == JobState.IDLE:
            self._transition(JobState.CANCELLED)
            return
        self._cancel_requested = True

    def chunks(self) -> ContentGenerator:
        """Pull-based chunk iterator over this job's content.

        The content can only be consumed once.
        """
        if self._generator is not None:
            raise GenerationError(
                "Job content has already been consumed",
                bytes_written=self.bytes_written,
            )
        self._generator = ContentGenerator(
            self.total_bytes,
            self.mode,
            self.chunk_size_bytes,
            seed=self._seed,
        )
        return self._generator

    def result(self) -> GenerationResult:
        return GenerationResult(
            job_id=self.id,
            state=self.state,
            bytes_written=self.bytes_written,
            total_bytes=self.total_bytes,
        )

    async def run(
        self,
        sink: StreamSink,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Write the job's content into ``sink``.

        Each chunk is generated only after the previous write completed.

        Args:
            sink: Destination for chunks
            on_progress: Called with the integer percentage whenever it
                changes, starting with 0 and ending with 100 on completion

        Returns:
            GenerationResult in state completed or cancelled

        Raises:
            WriteError: If the sink fails; the job is then failed and the
                error carries the bytes written so far
            InvalidStateTransitionError: If the job is not idle
            asyncio.CancelledError: If the surrounding task is cancelled;
                the job is marked cancelled first
        """
        self._transition(JobState.RUNNING)

        with structlog.contextvars.bound_contextvars(job_id=str(self.id)):
            logger.info(
                "generation_started",
                total_bytes=self.total_bytes,
                mode=self.mode.type.value,
                chunk_size_bytes=self.chunk_size_bytes,
            )
            try:
                return await self._run(sink, on_progress)
            except asyncio.CancelledError:
                if not self.is_terminal:
                    self._transition(JobState.CANCELLED)
                logger.info(
                    "generation_cancelled",
                    reason="task_cancelled",
                    bytes_written=self.bytes_written,
                )
                raise
            except Exception as e:
                if not self.is_terminal:
                    self.error = e
                    self._transition(JobState.FAILED)
                    logger.error(
                        "generation_failed",
                        error=str(e),
                        bytes_written=self.bytes_written,
                        exc_info=True,
                    )
                raise

    async def _run(
        self,
        sink: StreamSink,
        on_progress: ProgressCallback | None,
    ) -> GenerationResult:
        reported = 0
        if on_progress:
            on_progress(reported)

        if self._cancel_requested:
            return self._finish_cancelled()

        for chunk in self.chunks():
            try:
                await sink.write(chunk.data)
            except Exception as e:
                self.error = e
                self._transition(JobState.FAILED)
                logger.error(
                    "generation_failed",
                    error=str(e),
                    bytes_written=self.bytes_written,
                )
                if isinstance(e, WriteError):
                    e.bytes_written = self.bytes_written
                    raise
                raise WriteError(
                    f"Sink write failed: {e}", bytes_written=self.bytes_written
                ) from e

            self.bytes_written += len(chunk.data)
            if chunk.is_last:
                break

            percent = self.progress
            if on_progress and percent != reported:
                reported = percent
                on_progress(percent)

            # Suspension point between chunks
            await asyncio.sleep(0)

            if self._cancel_requested:
                return self._finish_cancelled()

        self._transition(JobState.COMPLETED)
        if on_progress:
            on_progress(100)
        logger.info("generation_completed", bytes_written=self.bytes_written)
        return self.result()

    def _finish_cancelled(self) -> GenerationResult:
        self._transition(JobState.CANCELLED)
        logger.info("generation_cancelled", bytes_written=self.bytes_written)
        return self.result()


def resolve_content_mode(
    content_mode: ContentMode | ContentModeType | str,
    hex_pattern: str | None = None,
) -> ContentMode:
    """Build a ContentMode from a mode name and optional hex pattern.

    The hex pattern is only read for the hex_pattern mode.

    Raises:
        ValidationError: If the mode is unknown or the pattern is malformed
    """
    if isinstance(content_mode, ContentMode):
        return content_mode

    if isinstance(content_mode, ContentModeType):
        mode_type = content_mode
    else:
        mode_type = CONTENT_MODE_ALIASES.get(str(content_mode).strip().lower())
        if mode_type is None:
            raise ValidationError(
                f"Unknown content mode: {content_mode!r}", field="content_mode"
            )

    if mode_type == ContentModeType.HEX_PATTERN:
        return ContentMode.hex_pattern(hex_pattern)
    return ContentMode(mode_type)


def build_job(
    amount: float,
    unit: SizeUnit | str,
    content_mode: ContentMode | ContentModeType | str,
    hex_pattern: str | None = None,
    *,
    chunk_size_bytes: int | None = None,
    binary: bool | None = None,
    seed: int | None = None,
) -> GenerationJob:
    """Validate caller input and create an idle GenerationJob.

    Args:
        amount: Requested size amount
        unit: Size unit (SizeUnit or name such as "MB")
        content_mode: random, zero_fill or hex_pattern
        hex_pattern: Hex string for the hex_pattern mode
        chunk_size_bytes: Override the configured chunk size
        binary: Use 1024-based units; defaults to the configured setting
        seed: Optional PRNG seed for random content

    Returns:
        Idle GenerationJob

    Raises:
        ValidationError: If size, unit, mode or pattern is invalid
    """
    settings = get_settings()
    spec = FileSizeSpec(amount, parse_unit(unit))
    mode = resolve_content_mode(content_mode, hex_pattern)
    return _create_job(
        spec,
        mode,
        chunk_size_bytes=(
            settings.chunk_size_bytes if chunk_size_bytes is None else chunk_size_bytes
        ),
        binary=settings.use_binary_units if binary is None else binary,
        seed=seed,
    )


async def start_generation(
    spec: FileSizeSpec,
    mode: ContentMode,
    sink: StreamSink,
    on_progress: ProgressCallback | None = None,
    *,
    chunk_size_bytes: int | None = None,
    binary: bool | None = None,
) -> GenerationResult:
    """Validate ``spec`` and ``mode`` and run a job into ``sink``.

    Validation failures raise before anything is written to the sink.
    """
    settings = get_settings()
    job = _create_job(
        spec,
        mode,
        chunk_size_bytes=(
            settings.chunk_size_bytes if chunk_size_bytes is None else chunk_size_bytes
        ),
        binary=settings.use_binary_units if binary is None else binary,
    )
    return await job.run(sink, on_progress)


def _create_job(
    spec: FileSizeSpec,
    mode: ContentMode,
    chunk_size_bytes: int,
    binary: bool,
    seed: int | None = None,
) -> GenerationJob:
    if isinstance(chunk_size_bytes, bool) or not isinstance(chunk_size_bytes, int):
        raise ValidationError("Chunk size must be an integer", field="chunk_size_bytes")
    if chunk_size_bytes <= 0:
        raise ValidationError("Chunk size must be positive", field="chunk_size_bytes")

    total_bytes = to_bytes(spec, binary=binary)
    job = GenerationJob(total_bytes, mode, chunk_size_bytes, seed=seed)
    logger.debug(
        "job_created",
        job_id=str(job.id),
        size=str(spec),
        total_bytes=total_bytes,
        mode=mode.type.value,
    )
    return job

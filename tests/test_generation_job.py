"""Tests for generation job orchestration."""

import asyncio

import pytest

from filegen.core.exceptions import (
    GenerationError,
    InvalidStateTransitionError,
    ValidationError,
    WriteError,
)
from filegen.core.storage import BufferSink, StreamSink
from filegen.models.content import ContentMode
from filegen.models.job import STATE_TRANSITIONS, TERMINAL_STATES, JobState
from filegen.models.size import FileSizeSpec, SizeUnit
from filegen.services.generation_job import (
    GenerationJob,
    build_job,
    start_generation,
)

CHUNK = 1024


class CancellingSink(StreamSink):
    """Sink that requests cancellation of a job on its n-th write."""

    def __init__(self, job: GenerationJob, cancel_on: int) -> None:
        self.job = job
        self.cancel_on = cancel_on
        self.writes = 0

    async def write(self, chunk: bytes) -> None:
        self.writes += 1
        if self.writes == self.cancel_on:
            self.job.cancel()


class FailingSink(StreamSink):
    """Sink whose n-th write raises."""

    def __init__(self, fail_on: int, error: Exception) -> None:
        self.fail_on = fail_on
        self.error = error
        self.writes = 0

    async def write(self, chunk: bytes) -> None:
        self.writes += 1
        if self.writes == self.fail_on:
            raise self.error


class SlowSink(StreamSink):
    """Sink that records overlapping writes."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.writes = 0

    async def write(self, chunk: bytes) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(self.delay)
        self.writes += 1
        self.in_flight -= 1


class TestStateTransitions:
    """Tests for the job state machine."""

    def test_terminal_states(self):
        """Completed, failed and cancelled are terminal."""
        assert TERMINAL_STATES == {
            JobState.COMPLETED,
            JobState.FAILED,
            JobState.CANCELLED,
        }

    def test_idle_transitions(self):
        """An idle job can start or be cancelled."""
        assert STATE_TRANSITIONS[JobState.IDLE] == {JobState.RUNNING, JobState.CANCELLED}

    def test_new_job_is_idle(self):
        """Jobs start idle with nothing written."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        assert job.state == JobState.IDLE
        assert job.bytes_written == 0
        assert job.progress == 0
        assert job.can_transition_to(JobState.RUNNING)
        assert not job.can_transition_to(JobState.COMPLETED)

    def test_cancel_idle_job(self):
        """Cancelling an idle job is immediate."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        job.cancel()
        assert job.state == JobState.CANCELLED

    @pytest.mark.asyncio
    async def test_cancelled_job_cannot_run(self):
        """A job cancelled before starting cannot run."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        job.cancel()
        sink = BufferSink()
        with pytest.raises(InvalidStateTransitionError):
            await job.run(sink)
        assert len(sink) == 0

    @pytest.mark.asyncio
    async def test_job_runs_once(self):
        """A finished job cannot be run again."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        await job.run(BufferSink())
        with pytest.raises(InvalidStateTransitionError):
            await job.run(BufferSink())

    @pytest.mark.asyncio
    async def test_cancel_after_completion_is_noop(self):
        """Cancelling a terminal job leaves it unchanged."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        await job.run(BufferSink())
        job.cancel()
        assert job.state == JobState.COMPLETED

    def test_chunks_consumed_once(self):
        """Job content is single-use."""
        job = GenerationJob(10, ContentMode.zero_fill(), CHUNK)
        list(job.chunks())
        with pytest.raises(GenerationError, match="already been consumed"):
            job.chunks()


class TestRun:
    """Tests for GenerationJob.run."""

    @pytest.mark.asyncio
    async def test_one_kb_zero_fill(self):
        """1 KB of zeros is 1024 zero bytes."""
        job = build_job(1, "KB", "zero_fill")
        sink = BufferSink()
        result = await job.run(sink)

        assert result.completed
        assert result.bytes_written == 1024
        assert sink.getvalue() == bytes(1024)

    @pytest.mark.asyncio
    async def test_two_bytes_hex(self):
        """2 bytes of pattern AB."""
        job = build_job(2, "Bytes", "hex_pattern", "AB")
        sink = BufferSink()
        await job.run(sink)
        assert sink.getvalue() == b"\xab\xab"

    @pytest.mark.asyncio
    async def test_random_size_exact(self):
        """Random content has exactly the requested length."""
        job = build_job(10, "KB", "random", chunk_size_bytes=3000, seed=42)
        sink = BufferSink()
        result = await job.run(sink)
        assert len(sink) == 10 * 1024
        assert result.total_bytes == 10 * 1024

    @pytest.mark.asyncio
    async def test_decimal_units(self):
        """binary=False resolves 1000-based units."""
        job = build_job(1, "KB", "zero_fill", binary=False)
        sink = BufferSink()
        await job.run(sink)
        assert len(sink) == 1000

    @pytest.mark.asyncio
    async def test_progress_reported(self):
        """Progress starts at 0, never decreases and ends at 100."""
        job = build_job(10, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        reports: list[int] = []
        await job.run(BufferSink(), reports.append)

        assert reports[0] == 0
        assert reports[-1] == 100
        assert reports == sorted(reports)
        assert reports.count(100) == 1
        assert len(reports) == len(set(reports))

    @pytest.mark.asyncio
    async def test_one_write_outstanding(self):
        """The next chunk is written only after the previous write returns."""
        job = build_job(8, "KB", "random", chunk_size_bytes=CHUNK)
        sink = SlowSink(delay=0.001)
        await job.run(sink)
        assert sink.max_in_flight == 1
        assert sink.writes == 8


class TestCancellation:
    """Tests for cooperative cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_after_third_chunk(self):
        """Cancelling during the third write stops after three chunks."""
        job = build_job(10, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        sink = CancellingSink(job, cancel_on=3)
        reports: list[int] = []
        result = await job.run(sink, reports.append)

        assert result.state == JobState.CANCELLED
        assert result.bytes_written == 3 * CHUNK
        assert sink.writes == 3
        assert 100 not in reports

    @pytest.mark.asyncio
    async def test_cancel_on_last_chunk_completes(self):
        """A cancel that arrives during the final write does not undo completion."""
        job = build_job(2, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        result = await job.run(CancellingSink(job, cancel_on=2))
        assert result.state == JobState.COMPLETED
        assert result.bytes_written == 2 * CHUNK

    @pytest.mark.asyncio
    async def test_timeout_cancels_job(self):
        """A caller deadline cancels the job."""
        job = build_job(10, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        sink = SlowSink(delay=0.05)

        with pytest.raises(TimeoutError):
            await asyncio.wait_for(job.run(sink), timeout=0.01)

        assert job.state == JobState.CANCELLED
        assert job.bytes_written < job.total_bytes

    @pytest.mark.asyncio
    async def test_task_cancel(self):
        """Cancelling the task running the job marks it cancelled."""
        job = build_job(10, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        task = asyncio.create_task(job.run(SlowSink(delay=0.05)))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert job.state == JobState.CANCELLED


class TestFailures:
    """Tests for sink failures."""

    @pytest.mark.asyncio
    async def test_sink_failure_fails_job(self):
        """A failing write fails the job and reports bytes written so far."""
        job = build_job(10, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        sink = FailingSink(fail_on=2, error=OSError("disk full"))

        with pytest.raises(WriteError) as exc_info:
            await job.run(sink)

        assert exc_info.value.bytes_written == CHUNK
        assert isinstance(exc_info.value.__cause__, OSError)
        assert job.state == JobState.FAILED
        assert job.bytes_written == CHUNK
        assert isinstance(job.error, OSError)

    @pytest.mark.asyncio
    async def test_write_error_passes_through(self):
        """A WriteError from the sink is re-raised with the byte count."""
        job = build_job(4, "KB", "zero_fill", chunk_size_bytes=CHUNK)
        error = WriteError("no space")
        with pytest.raises(WriteError) as exc_info:
            await job.run(FailingSink(fail_on=3, error=error))

        assert exc_info.value is error
        assert error.bytes_written == 2 * CHUNK


class TestValidation:
    """Tests for input validation before a job starts."""

    @pytest.mark.parametrize(
        "amount,unit,mode,pattern",
        [
            (0, "KB", "random", None),
            (11, "GB", "random", None),
            (1e300, "GB", "random", None),
            (1, "TB", "random", None),
            (1, "KB", "hex_pattern", "ABC"),
            (1, "KB", "hex_pattern", ""),
            (1, "KB", "sparkles", None),
        ],
    )
    def test_build_job_rejects(self, amount, unit, mode, pattern):
        """Invalid input raises ValidationError."""
        with pytest.raises(ValidationError):
            build_job(amount, unit, mode, pattern)

    @pytest.mark.parametrize("chunk_size", [0, -1, 1.5, True])
    def test_invalid_chunk_size(self, chunk_size):
        """Chunk size must be a positive integer."""
        with pytest.raises(ValidationError) as exc_info:
            build_job(1, "KB", "random", chunk_size_bytes=chunk_size)
        assert exc_info.value.field == "chunk_size_bytes"

    @pytest.mark.asyncio
    async def test_start_generation_validates_before_writing(self):
        """Nothing reaches the sink when validation fails."""
        sink = BufferSink()
        with pytest.raises(ValidationError):
            await start_generation(
                FileSizeSpec(-1, SizeUnit.KB), ContentMode.random(), sink
            )
        assert len(sink) == 0

    @pytest.mark.asyncio
    async def test_start_generation(self):
        """start_generation validates and runs in one call."""
        sink = BufferSink()
        result = await start_generation(
            FileSizeSpec(3, SizeUnit.BYTES),
            ContentMode.hex_pattern("0102"),
            sink,
            chunk_size_bytes=2,
        )
        assert result.completed
        assert sink.getvalue() == b"\x01\x02\x01"

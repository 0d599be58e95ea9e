"""Generate a file of an exact size on local disk.

Content is written chunk by chunk, so memory use stays constant regardless
of the requested size (up to 10 GB).

Usage:
    python -m filegen.scripts.generate_file SIZE UNIT OUTPUT [options]

Examples:
    # 1 KB of zeros
    python -m filegen.scripts.generate_file 1 KB zeros.bin --mode zero_fill

    # 5 GB of a repeated pattern
    python -m filegen.scripts.generate_file 5 GB big.bin --mode hex_pattern --hex DEADBEEF

    # Give up after 30 seconds
    python -m filegen.scripts.generate_file 10 GB huge.bin --timeout 30
"""

import argparse
import asyncio
import sys
from pathlib import Path

from filegen.core.exceptions import (
    GenerationCancelledError,
    ValidationError,
    WriteError,
)
from filegen.core.logging import configure_logging, get_logger
from filegen.core.storage import FileSink
from filegen.services.generation_job import GenerationJob, ProgressCallback, build_job
from filegen.services.size_resolver import format_size

logger = get_logger(__name__)


def print_progress(percent: int) -> None:
    """Print progress update to console.

    Args:
        percent: Current progress percentage
    """
    print(f"\rProgress: {percent}%", end="", flush=True)


async def _write(
    job: GenerationJob,
    sink: FileSink,
    on_progress: ProgressCallback | None,
    timeout: float | None,
) -> None:
    """Run ``job`` into ``sink``, raising if it does not complete."""
    try:
        result = await asyncio.wait_for(job.run(sink, on_progress), timeout=timeout)
    except TimeoutError as e:
        raise GenerationCancelledError(
            f"Cancelled after {timeout}s", bytes_written=job.bytes_written
        ) from e

    if not result.completed:
        raise GenerationCancelledError("Cancelled", bytes_written=result.bytes_written)


async def run_generation(
    job: GenerationJob,
    output: Path,
    timeout: float | None = None,
    quiet: bool = False,
) -> int:
    """Write ``job`` to ``output``.

    Args:
        job: Validated, idle job
        output: Destination file path
        timeout: Optional deadline in seconds; the job is cancelled when hit
        quiet: Suppress the console progress line

    Returns:
        Exit code (0 for success, 1 for failure, 2 for cancelled)
    """
    on_progress = None if quiet else print_progress

    try:
        async with FileSink(output) as sink:
            await _write(job, sink, on_progress, timeout)
    except GenerationCancelledError as e:
        if not quiet:
            print()
        logger.warning(
            "generation_cancelled",
            output=str(output),
            reason=str(e),
            bytes_written=e.bytes_written,
        )
        print(f"{e}: wrote {e.bytes_written} bytes to {output}")
        return 2
    except WriteError as e:
        if not quiet:
            print()
        print(f"ERROR: {e} ({e.bytes_written} bytes written)")
        return 1

    if not quiet:
        print()  # Newline after progress

    print(f"Wrote {format_size(job.bytes_written)} ({job.bytes_written} bytes) to {output}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate a file of an exact size",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1 KB of zeros
  python -m filegen.scripts.generate_file 1 KB zeros.bin --mode zero_fill

  # 100 MB of random bytes using 1000-based units
  python -m filegen.scripts.generate_file 100 MB random.bin --decimal

  # 2 bytes of 0xAB
  python -m filegen.scripts.generate_file 2 Bytes ab.bin --mode hex_pattern --hex AB
        """,
    )
    parser.add_argument("amount", type=float, help="Size amount")
    parser.add_argument("unit", help="Size unit: Bytes, KB, MB or GB")
    parser.add_argument("output", type=Path, help="Output file path")
    parser.add_argument(
        "--mode",
        default="random",
        help="Content mode: random, zero_fill or hex_pattern (default: random)",
    )
    parser.add_argument(
        "--hex",
        dest="hex_pattern",
        default=None,
        help="Hex pattern for hex_pattern mode, e.g. DEADBEEF",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Chunk size in bytes (default: CHUNK_SIZE_BYTES setting)",
    )
    parser.add_argument(
        "--decimal",
        action="store_true",
        help="Use 1000-based units instead of 1024-based",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Cancel the job after this many seconds",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print progress",
    )

    args = parser.parse_args(argv)

    # Log to stderr so stdout carries only progress and results
    configure_logging(stream=sys.stderr)

    try:
        job = build_job(
            args.amount,
            args.unit,
            args.mode,
            args.hex_pattern,
            chunk_size_bytes=args.chunk_size,
            binary=False if args.decimal else None,
        )
    except ValidationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    exit_code = asyncio.run(
        run_generation(
            job,
            args.output,
            timeout=args.timeout,
            quiet=args.quiet,
        )
    )

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

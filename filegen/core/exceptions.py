"""Core application exception classes.

This module provides a centralized exception hierarchy for all filegen
errors. All custom exceptions inherit from FileGenError, enabling:
- Consistent error handling across the engine, the API and the CLI
- Easy categorization of errors by type
- Structured logging with exception context

Exception Hierarchy:
    FileGenError (base)
    +-- ValidationError (bad size or malformed hex pattern)
    +-- GenerationError (failures while a job is in progress)
    |   +-- WriteError (sink-side I/O failure)
    |   +-- GenerationCancelledError (user-initiated stop)
    |   +-- InvalidStateTransitionError (state machine misuse)
    +-- ConfigurationError (missing/invalid configuration)
"""


class FileGenError(Exception):
    """Base exception for all filegen errors.

    Example:
        try:
            job = build_job(amount, unit, mode)
        except FileGenError as e:
            logger.error("generation_error", error=str(e), exc_info=True)
            raise
    """

    pass


class ValidationError(FileGenError):
    """Exception for invalid caller input.

    Raised before any generation starts, so it never leaves partial output:
    - Size that is not a finite positive number
    - Size that resolves to 0 bytes or more than 10 GiB
    - Hex pattern that is empty, of odd length, or not hexadecimal
    - Unknown size unit or content mode
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


# --- Category Exceptions ---


class GenerationError(FileGenError):
    """Base exception for failures of an in-progress generation job.

    Carries the number of bytes that reached the sink before the job
    stopped.
    """

    def __init__(self, message: str, bytes_written: int = 0):
        super().__init__(message)
        self.bytes_written = bytes_written


class ConfigurationError(FileGenError):
    """Exception for missing or invalid configuration.

    This exception typically indicates a deployment/setup issue rather
    than a runtime error.
    """

    pass


# --- Generation Exceptions ---


class WriteError(GenerationError):
    """Exception for sink-side I/O failures.

    Use for errors such as:
    - Disk full
    - Revoked or missing write permission
    - Sink closed underneath a running job

    The underlying error is chained as ``__cause__``. Not retried.
    """

    pass


class GenerationCancelledError(GenerationError):
    """Raised by callers that need cancellation as an exception.

    The generate_file script raises it when a job is cancelled or hits its
    deadline.

    GenerationJob.run itself reports a user-initiated stop as a
    CANCELLED result, not as an error.
    """

    pass


class InvalidStateTransitionError(GenerationError):
    """Exception for illegal job state transitions.

    Terminal states (completed, failed, cancelled) are final.
    """

    pass

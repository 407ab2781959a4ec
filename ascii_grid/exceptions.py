"""Errors raised by the conversion pipeline."""


class ConversionError(Exception):
    """Base class for all conversion errors."""


class ConfigurationError(ConversionError, ValueError):
    """A config value cannot be used for a conversion."""


class WorkerFailure(ConversionError, RuntimeError):
    """A worker failed while processing its row range.

    The whole conversion is aborted; no partial output exists.
    """

    def __init__(self, stage: str, chunk: int):
        super().__init__(f"Worker {chunk} failed during {stage}")
        self.stage = stage
        self.chunk = chunk

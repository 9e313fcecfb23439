"""Exception types raised by the summarization pipeline."""


class SummarizerError(Exception):
    """Base class for every error the pipeline raises on purpose."""


class ConfigurationError(SummarizerError):
    """Invalid window/overlap sizes, worker counts or service settings.

    Raised before any completion call is made and never retried.
    """


class ServiceError(SummarizerError):
    """Any failure of the completion service (network, quota, bad request).

    Fatal to the whole pipeline invocation; the core does not retry it.
    """


class EmptyInputError(SummarizerError):
    """Document has no text to summarize."""

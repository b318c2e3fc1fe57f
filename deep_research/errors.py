"""Exceptions raised by the research pipeline."""


class DeepResearchError(Exception):
    """Base exception for research pipeline errors."""

    pass


class ConfigurationError(DeepResearchError):
    """Raised when required configuration (API keys, backends) is missing or invalid."""

    pass


class StructuredOutputError(DeepResearchError):
    """Raised when model output cannot be coerced into the requested schema."""

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output


class PlanningFailure(DeepResearchError):
    """Raised when the research plan cannot be generated or validated."""

    pass


class SynthesisFailure(DeepResearchError):
    """Raised when the final report cannot be generated."""

    pass


class TaskExecutionFailure(DeepResearchError):
    """Raised when a research task fails and the failure policy aborts the run."""

    def __init__(self, index: int, title: str, reason: str):
        super().__init__(f"Task {index + 1} ({title}) failed: {reason}")
        self.index = index
        self.title = title
        self.reason = reason


class SourceUnavailable(DeepResearchError):
    """A search page or page fetch produced nothing usable.

    Only raised inside the tools layer; callers see an empty result instead.
    """

    pass

"""Exception types raised by the orchestration core.

Errors local to a single tool invocation (unknown tool, tool raising) are
never raised: the executor turns them into ``tool`` messages so the model can
react. The exceptions below signal a broken contract and abort the run.
"""


class OrchestrationError(Exception):
    """Base class for fatal orchestration errors."""


class InvalidFunctionError(OrchestrationError, TypeError):
    """Raised when a non-callable is registered as an agent function."""


class ResultCastError(OrchestrationError, TypeError):
    """Raised when a tool's return value cannot be rendered as text."""


class ProviderError(OrchestrationError):
    """Raised when a completion provider returns an unusable response."""

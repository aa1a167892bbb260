"""
Domain errors for retrieval and quiz generation.

Fatal errors (ConfigurationError, NotFoundError, EmbeddingError) surface to
the routers directly. QuizAttemptError subclasses describe why a single
model in the fallback chain failed; they never leave the fallback loop.
"""


class CoursewareError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(CoursewareError):
    """Deployment configuration is unusable (unknown model, missing credential)."""


class NotFoundError(CoursewareError):
    """A referenced topic does not exist."""


class EmbeddingError(CoursewareError):
    """The embedding provider is unreachable or returned a malformed vector."""


# ── Retry-class errors (consumed by the fallback loop) ───────────────────────

class QuizAttemptError(CoursewareError):
    """One model attempt failed; the next model in the chain should be tried."""

    def __init__(self, model_id: str, message: str):
        super().__init__(f"{model_id}: {message}")
        self.model_id = model_id


class ProviderError(QuizAttemptError):
    """The provider SDK raised (network, auth, rate limit, timeout)."""


class EmptyResponseError(QuizAttemptError):
    """The model returned no text."""


class ParseError(QuizAttemptError):
    """No JSON object could be extracted from the model response."""


class IncompleteError(QuizAttemptError):
    """Fewer valid questions survived normalization than were requested."""

    def __init__(self, model_id: str, valid: int, requested: int):
        super().__init__(model_id, f"only {valid} of {requested} questions were valid")
        self.valid = valid
        self.requested = requested


class QuizGenerationError(CoursewareError):
    """Every model in the chain failed. Carries no provider diagnostics."""

    def __init__(self, attempted: int):
        super().__init__(f"Failed to generate quiz after trying {attempted} model(s)")
        self.attempted = attempted

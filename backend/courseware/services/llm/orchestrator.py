"""
LLM Orchestrator

Shared logic for all providers:
- JSON extraction from LLM responses
- Sequential fallback over an ordered model chain

The fallback loop is an explicit state machine:

    Trying(0) ──fail──▶ Trying(1) ──fail──▶ ... ──▶ Exhausted(failures)
        │                   │
        └──ok──▶ Succeeded  └──ok──▶ Succeeded

Each failure is kept as data on the state, so callers can inspect exactly
which models failed and why without any provider error escaping the loop.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from courseware.services.errors import ParseError, QuizAttemptError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def extract_json(model_id: str, content: str) -> dict[str, Any]:
    """
    Parse the object spanning the first "{" to the last "}" of a response.

    Tolerates prose and code fences around the JSON body.

    Raises:
        ParseError: If the delimiters are missing or the span is not a JSON object
    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ParseError(model_id, "no JSON object found in response")

    try:
        data = json.loads(content[start:end + 1])
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise ParseError(model_id, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(model_id, "response JSON is not an object")
    return data


# ── Fallback states ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AttemptFailure:
    model_id: str
    error: QuizAttemptError


@dataclass(frozen=True)
class Trying:
    index: int
    failures: tuple[AttemptFailure, ...] = ()


@dataclass(frozen=True)
class Succeeded(Generic[T]):
    model_id: str
    result: T
    failures: tuple[AttemptFailure, ...] = ()


@dataclass(frozen=True)
class Exhausted:
    failures: tuple[AttemptFailure, ...] = ()


FallbackState = Union[Trying, Succeeded, Exhausted]


class LLMOrchestrator:
    """Drives an attempt function across a model chain, one model at a time."""

    async def step(
        self,
        state: Trying,
        chain: Sequence[str],
        attempt: Callable[[str], Awaitable[T]],
    ) -> FallbackState:
        """Run the attempt for the model at state.index and return the next state."""
        if state.index >= len(chain):
            return Exhausted(state.failures)

        model_id = chain[state.index]
        try:
            result = await attempt(model_id)
        except QuizAttemptError as e:
            logger.warning("[LLM] model=%s failed: %s", model_id, e)
            return Trying(state.index + 1, state.failures + (AttemptFailure(model_id, e),))

        logger.info("[LLM] model=%s succeeded after %d failure(s)", model_id, len(state.failures))
        return Succeeded(model_id, result, state.failures)

    async def run(
        self,
        chain: Sequence[str],
        attempt: Callable[[str], Awaitable[T]],
    ) -> Union[Succeeded, Exhausted]:
        """
        Try each model in order until one attempt succeeds.

        Only QuizAttemptError advances the chain. Anything else, including
        cancellation, propagates immediately and abandons the loop.
        """
        state: FallbackState = Trying(0)
        while isinstance(state, Trying):
            state = await self.step(state, chain, attempt)
        return state


# ── Singleton ─────────────────────────────────────────────────────────────────

_orchestrator: LLMOrchestrator | None = None


def get_orchestrator() -> LLMOrchestrator:
    """Get or create the LLM orchestrator singleton."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = LLMOrchestrator()
    return _orchestrator

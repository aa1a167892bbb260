"""
Quiz Generation Engine

Builds a quiz prompt for a topic and walks the model fallback chain until
one model returns enough valid questions.

Per model, in order:
1. Call the provider                  -> ProviderError on SDK failure
2. Require non-empty text             -> EmptyResponseError
3. Extract the JSON object            -> ParseError
4. Normalize the questions array
5. Require at least the requested count -> IncompleteError

The first model that passes wins. If every model fails, a single
QuizGenerationError is raised; per-model errors are only logged.
"""

import logging
from collections.abc import Callable

from courseware.core.config import get_settings
from courseware.services.errors import (
    ConfigurationError,
    EmptyResponseError,
    IncompleteError,
    NotFoundError,
    ProviderError,
    QuizGenerationError,
)
from courseware.services.llm.base import LLMProvider
from courseware.services.llm.orchestrator import LLMOrchestrator, Succeeded, extract_json
from courseware.services.llm.registry import ModelChain, get_provider
from courseware.services.quiz.models import (
    DEFAULT_DIFFICULTY,
    DEFAULT_QUESTION_COUNT,
    QuizQuestion,
    QuizResult,
    clamp_question_count,
)
from courseware.services.quiz.normalize import normalize_questions
from courseware.services.quiz.prompts import compile_quiz_prompt
from courseware.services.repository import MaterialRepository

logger = logging.getLogger(__name__)

ProviderResolver = Callable[[str], tuple[LLMProvider, str]]


class QuizGenerator:
    """Generates validated multiple-choice quizzes for course topics."""

    def __init__(
        self,
        repository: MaterialRepository,
        chain: ModelChain,
        resolve_provider: ProviderResolver = get_provider,
        orchestrator: LLMOrchestrator | None = None,
    ):
        self.repository = repository
        self.chain = chain
        self.resolve_provider = resolve_provider
        self.orchestrator = orchestrator or LLMOrchestrator()

    def _bind_chain(self) -> dict[str, tuple[LLMProvider, str]]:
        """Resolve every model up front so configuration errors surface before any call."""
        if not len(self.chain):
            raise ConfigurationError("Quiz model chain is empty")
        return {model_id: self.resolve_provider(model_id) for model_id in self.chain}

    async def generate(
        self,
        topic_id: str,
        question_count: int = DEFAULT_QUESTION_COUNT,
        difficulty: str = DEFAULT_DIFFICULTY,
    ) -> QuizResult:
        """
        Generate exactly question_count questions for a topic.

        Raises:
            ConfigurationError: Chain empty, unknown model, or missing credential
            NotFoundError: The topic does not exist
            QuizGenerationError: Every model in the chain failed
        """
        settings = get_settings()
        count = clamp_question_count(question_count)

        topic = await self.repository.find_topic(topic_id)
        if topic is None:
            raise NotFoundError(f"Topic not found: {topic_id}")

        bindings = self._bind_chain()

        prompt = compile_quiz_prompt(
            topic,
            count,
            difficulty or DEFAULT_DIFFICULTY,
            max_excerpt_chars=settings.quiz_material_excerpt_chars,
        )

        async def attempt(model_id: str) -> list[QuizQuestion]:
            provider, api_model = bindings[model_id]
            try:
                content = await provider.generate(
                    prompt,
                    api_model,
                    max_output_tokens=settings.llm_max_output_tokens,
                    temperature=settings.llm_temperature,
                )
            except Exception as e:
                raise ProviderError(model_id, f"{type(e).__name__}: {e}") from e

            if not isinstance(content, str) or not content.strip():
                raise EmptyResponseError(model_id, "empty response")

            parsed = extract_json(model_id, content)
            questions = normalize_questions(parsed.get("questions"), topic.id, count)
            if len(questions) < count:
                raise IncompleteError(model_id, len(questions), count)
            return questions

        outcome = await self.orchestrator.run(self.chain.models, attempt)

        if isinstance(outcome, Succeeded):
            logger.info(
                "[Quiz] topic=%s questions=%d model=%s", topic.id, count, outcome.model_id
            )
            return QuizResult(
                topic_id=topic.id,
                questions=outcome.result,
                model_used=outcome.model_id,
            )

        logger.error(
            "[Quiz] topic=%s chain exhausted: %s",
            topic.id,
            "; ".join(str(failure.error) for failure in outcome.failures),
        )
        raise QuizGenerationError(attempted=len(outcome.failures))


def get_quiz_generator(repository: MaterialRepository) -> QuizGenerator:
    """Create a generator bound to the configured fallback chain."""
    return QuizGenerator(repository, ModelChain.from_settings())

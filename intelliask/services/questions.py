import logging
import time
from dataclasses import dataclass

from ..errors import GatewayFailure, MissingInput
from ..schemas import QuestionRecord
from . import slug as slug_codec
from .llm import FALLBACK_ANSWER

logger = logging.getLogger(__name__)


@dataclass
class AnswerResult:
    answer: str
    slug: str
    cached: bool


class QuestionService:
    """
    Generate-or-fetch orchestration over the registry, the answer store
    and the generator. The only component that reads or writes either store.

    Flow for both entry points:
    1) Work out the slug
    2) Cache hit -> return stored text, no external call
    3) Miss -> generate, write through, return

    A generator failure propagates and leaves the store untouched.
    A response without answer text (the fallback sentinel) is treated as
    a GatewayFailure too: never stored, never shown as a real answer.
    """

    def __init__(self, registry, store, generator):
        self.registry = registry
        self.store = store
        self.generator = generator

    def submit(self, question: str) -> AnswerResult:
        if not question or not question.strip():
            raise MissingInput("question required")
        if not slug_codec.encode(question):
            # e.g. "?!": nothing left to address a page by
            raise MissingInput("question has no letters or digits")

        slug = self.registry.register(question)
        return self._fetch_or_generate(slug, prompt=question)

    def lookup(self, slug: str) -> AnswerResult:
        if not slug or not slug.strip():
            raise MissingInput("slug required")

        # only the slug is known here, so a miss prompts with its decoded form
        return self._fetch_or_generate(slug, prompt=slug_codec.decode(slug))

    def list_questions(self) -> list[QuestionRecord]:
        return self.registry.all()

    def _fetch_or_generate(self, slug: str, prompt: str) -> AnswerResult:
        cached = self.store.get(slug)
        if cached is not None:
            logger.info(f"Cache HIT for slug={slug}")
            return AnswerResult(answer=cached, slug=slug, cached=True)

        logger.info(f"Cache MISS for slug={slug}, generating")
        t0 = time.time()
        answer = self.generator.generate(prompt)
        logger.info(f"Generation completed: slug={slug} length={len(answer)} seconds={time.time() - t0:.2f}")

        if answer == FALLBACK_ANSWER:
            logger.warning(f"No answer text from generator for slug={slug}")
            raise GatewayFailure("Gemini returned no answer text", detail=FALLBACK_ANSWER)

        self.store.put(slug, answer)

        return AnswerResult(answer=answer, slug=slug, cached=False)

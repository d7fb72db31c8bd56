import pytest

from intelliask.errors import GatewayFailure
from intelliask.services.questions import QuestionService
from intelliask.services.registry import QuestionRegistry
from intelliask.services.storage import MemoryStorage
from intelliask.services.store import AnswerStore


class StubGenerator:
    """Call-counting stand-in for the Gemini gateway."""

    def __init__(self, answer="Generated answer", error=None):
        self.answer = answer
        self.error = error
        self.prompts = []

    @property
    def calls(self):
        return len(self.prompts)

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def registry_storage():
    return MemoryStorage()


@pytest.fixture
def answer_storage():
    return MemoryStorage()


@pytest.fixture
def registry(registry_storage):
    return QuestionRegistry(registry_storage)


@pytest.fixture
def store(answer_storage):
    return AnswerStore(answer_storage)


@pytest.fixture
def generator():
    return StubGenerator()


@pytest.fixture
def failing_generator():
    return StubGenerator(error=GatewayFailure("Gemini returned HTTP 503", detail="overloaded"))


@pytest.fixture
def service(registry, store, generator):
    return QuestionService(registry, store, generator)

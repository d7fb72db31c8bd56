import logging

logger = logging.getLogger(__name__)


class AnswerStore:
    """
    Durable slug -> raw answer text mapping.

    Each answer is its own "<slug>.txt" unit in the storage backend.
    Every call goes back to storage; there is no in-memory layer.
    """

    def __init__(self, storage):
        self.storage = storage

    @staticmethod
    def _key(slug: str) -> str:
        return f"{slug}.txt"

    def has(self, slug: str) -> bool:
        return self.storage.exists(self._key(slug))

    def get(self, slug: str) -> str | None:
        return self.storage.read(self._key(slug))

    def put(self, slug: str, text: str) -> None:
        self.storage.write(self._key(slug), text)
        logger.info(f"Stored answer for slug={slug} length={len(text)}")

import json
import logging

from ..schemas import QuestionRecord
from . import slug as slug_codec

logger = logging.getLogger(__name__)

REGISTRY_KEY = "questions.json"


class QuestionRegistry:
    """
    Append-only, de-duplicated list of every question seen, keyed by slug.

    Persisted as one JSON snapshot: every register() reads the whole list,
    appends in memory and rewrites the file. Two concurrent first-time
    registrations of the same slug can therefore both append; the app
    assumes a single writer process.
    """

    def __init__(self, storage, key: str = REGISTRY_KEY):
        self.storage = storage
        self.key = key

    def all(self) -> list[QuestionRecord]:
        raw = self.storage.read(self.key)
        if raw is None:
            return []
        return [QuestionRecord(**item) for item in json.loads(raw)]

    def register(self, question: str) -> str:
        """
        Records the question under its slug unless that slug is already known.
        Returns the slug either way.
        """
        slug = slug_codec.encode(question)
        records = self.all()

        if not any(r.slug == slug for r in records):
            records.append(QuestionRecord(question=question, slug=slug))
            payload = [r.model_dump() for r in records]
            self.storage.write(self.key, json.dumps(payload, indent=2, ensure_ascii=False))
            logger.info(f"Registered new question slug={slug} total={len(records)}")

        return slug

from pydantic import BaseModel


class AskRequest(BaseModel):
    """
    Incoming request payload for the ask endpoint.

    question: free-text question typed by the user
    """
    question: str | None = None


class AskResponse(BaseModel):
    answer: str
    slug: str


class QuestionRecord(BaseModel):
    """
    One registry entry.

    question: the original text as first submitted
    slug: deterministic identifier derived from question
    """
    question: str
    slug: str


class QuestionPage(BaseModel):
    slug: str
    question: str
    answer: str
    html: str

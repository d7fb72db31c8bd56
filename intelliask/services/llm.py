import logging
import requests
from ..errors import ConfigError, GatewayFailure

logger = logging.getLogger(__name__)

# Returned when the endpoint answers 2xx but without candidate text
FALLBACK_ANSWER = "No answer available."


def extract_answer_text(data) -> str:
    """
    Pulls candidates[0].content.parts[0].text out of a generateContent response.
    Any other shape yields FALLBACK_ANSWER.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return FALLBACK_ANSWER

    if not isinstance(text, str) or not text:
        return FALLBACK_ANSWER
    return text


def _failure_detail(response) -> str:
    """
    Best-effort reason for a failed call: Gemini puts it in error.message.
    """
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text or f"HTTP {response.status_code}"


class GeminiGateway:
    """
    Calls the Gemini generateContent endpoint for a single prompt.

    The model is configuration, so one gateway class covers every model
    the deployment may point at. Prompts are sent as given; callers are
    responsible for trimming/truncating them.
    """

    def __init__(self, api_key: str, model: str, base_url: str, timeout: float = 60):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ConfigError("GEMINI_API_KEY is missing in .env file")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            r = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            raise GatewayFailure("Gemini generation request timed out") from None
        except requests.exceptions.RequestException as e:
            raise GatewayFailure("Gemini request failed", detail=str(e)) from e

        if not r.ok:
            detail = _failure_detail(r)
            logger.error(f"Gemini returned HTTP {r.status_code}: {detail}")
            raise GatewayFailure(f"Gemini returned HTTP {r.status_code}", detail=detail)

        try:
            data = r.json()
        except ValueError:
            logger.warning("Gemini returned a non-JSON body")
            return FALLBACK_ANSWER

        answer = extract_answer_text(data)
        if answer == FALLBACK_ANSWER:
            logger.warning(f"Unexpected Gemini response shape for model={self.model}")
        return answer

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from intelliask import main
from intelliask.errors import ConfigError
from intelliask.services.llm import FALLBACK_ANSWER
from intelliask.services.questions import QuestionService
from intelliask.services.ratelimit import FixedWindowRateLimiter
from conftest import StubGenerator


@pytest.fixture
def client(service):
    with patch.object(main, "question_service", service), \
         patch.object(main, "ask_limiter", FixedWindowRateLimiter(100, 900)):
        yield TestClient(main.app)


def _use_generator(registry, store, generator):
    return patch.object(main, "question_service", QuestionService(registry, store, generator))


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_ask_returns_answer_and_slug(client, generator):
    r = client.post("/ask", json={"question": "  What is Rust?  "})

    assert r.status_code == 200
    assert r.json() == {"answer": "Generated answer", "slug": "what-is-rust"}
    assert generator.prompts == ["What is Rust?"]


def test_ask_twice_calls_generator_once(client, generator):
    client.post("/ask", json={"question": "what is rust"})
    r = client.post("/ask", json={"question": "what is rust"})

    assert r.status_code == 200
    assert generator.calls == 1


def test_ask_truncates_long_questions(client, generator):
    client.post("/ask", json={"question": "a" * 800})
    assert len(generator.prompts[0]) == main.MAX_QUESTION_LENGTH


@pytest.mark.parametrize("body", [{"question": ""}, {"question": "   "}, {}])
def test_ask_blank_question_is_400(client, registry_storage, body):
    r = client.post("/ask", json=body)
    assert r.status_code == 400
    assert registry_storage.data == {}


def test_ask_gateway_failure_is_502_and_not_cached(client, registry, store, failing_generator):
    with _use_generator(registry, store, failing_generator):
        r = client.post("/ask", json={"question": "what is rust"})

    assert r.status_code == 502
    assert r.json()["detail"]["details"] == "overloaded"
    assert store.has("what-is-rust") is False


def test_ask_missing_key_is_500(client, registry, store):
    generator = StubGenerator(error=ConfigError("GEMINI_API_KEY is missing in .env file"))
    with _use_generator(registry, store, generator):
        r = client.post("/ask", json={"question": "what is rust"})
    assert r.status_code == 500


def test_ask_is_rate_limited(client):
    with patch.object(main, "ask_limiter", FixedWindowRateLimiter(2, 900)):
        codes = [client.post("/ask", json={"question": "q"}).status_code for _ in range(3)]
    assert codes == [200, 200, 429]


def test_question_page_renders_cached_answer(client, store, generator):
    store.put("what-is-rust", "**Rust** is\n* fast\n* safe")

    r = client.get("/question/what-is-rust")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "<title>what is rust</title>" in r.text
    assert "<ul><p><strong>Rust</strong> is</p><li>fast</li><li>safe</li></ul>" in r.text
    assert generator.calls == 0


def test_question_page_generates_on_miss(client, store, generator):
    r = client.get("/question/why-is-the-sky-blue")

    assert r.status_code == 200
    assert generator.prompts == ["why is the sky blue"]
    assert store.get("why-is-the-sky-blue") == "Generated answer"


def test_question_page_escapes_title(client, store):
    store.put("%3Cb%3E", "answer")
    r = client.get("/question/%253Cb%253E")
    assert "&lt;b&gt;" in r.text
    assert "<title><b></title>" not in r.text


def test_question_page_gateway_failure_is_500(client, registry, store, failing_generator):
    with _use_generator(registry, store, failing_generator):
        r = client.get("/question/what-is-rust")
    assert r.status_code == 500
    assert store.has("what-is-rust") is False


def test_question_json(client, store):
    store.put("what-is-rust", "**Rust**")
    r = client.get("/api/question/what-is-rust")
    assert r.status_code == 200
    assert r.json() == {
        "slug": "what-is-rust",
        "question": "what is rust",
        "answer": "**Rust**",
        "html": "<p><strong>Rust</strong></p>",
    }


def test_list_questions(client):
    client.post("/ask", json={"question": "Hello, World!"})
    client.post("/ask", json={"question": "hello world"})

    r = client.get("/api/questions")
    assert r.json() == [{"question": "Hello, World!", "slug": "hello-world"}]


def test_sitemap(client):
    client.post("/ask", json={"question": "what is rust"})

    r = client.get("/sitemap.xml")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    assert f"<loc>{main.PUBLIC_BASE_URL}/question/what-is-rust</loc>" in r.text


def test_security_headers(client):
    r = client.get("/health")
    assert "default-src 'self'" in r.headers["content-security-policy"]
    assert r.headers["x-content-type-options"] == "nosniff"


def test_rotating_forwarded_for_prefix_is_still_rate_limited(client):
    # only the rightmost entry is the one the proxy appended
    with patch.object(main, "ask_limiter", FixedWindowRateLimiter(2, 900)):
        codes = [
            client.post(
                "/ask",
                json={"question": "q"},
                headers={"X-Forwarded-For": f"10.0.0.{i}, 203.0.113.7"},
            ).status_code
            for i in range(5)
        ]
    assert codes == [200, 200, 429, 429, 429]


def test_forwarded_for_ignored_without_trusted_proxy(client):
    with patch.object(main, "TRUST_PROXY", False), \
         patch.object(main, "ask_limiter", FixedWindowRateLimiter(2, 900)):
        codes = [
            client.post("/ask", json={"question": "q"}, headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
            for i in range(3)
        ]
    assert codes == [200, 200, 429]


def test_question_page_without_answer_text_is_500(client, registry, store):
    with _use_generator(registry, store, StubGenerator(answer=FALLBACK_ANSWER)):
        r = client.get("/question/what-is-rust")
    assert r.status_code == 500
    assert "No answer available" not in r.text
    assert store.has("what-is-rust") is False


def test_ask_long_question_with_file_storage(client, tmp_path, generator):
    with patch.object(main, "question_service", main.build_question_service(str(tmp_path))):
        main.question_service.generator = generator
        r = client.post("/ask", json={"question": "why " * 70})
        slug = r.json()["slug"]
        page = client.get(f"/question/{slug}")

    assert r.status_code == 200
    assert page.status_code == 200
    assert generator.calls == 1

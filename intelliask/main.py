import html
import logging
from pathlib import Path
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from .config import (
    ALLOWED_ORIGINS,
    DATA_DIR,
    GEMINI_API_KEY,
    GEMINI_API_URL,
    GEMINI_MODEL,
    GEMINI_TIMEOUT,
    LOG_LEVEL,
    MAX_QUESTION_LENGTH,
    PUBLIC_BASE_URL,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW_SECONDS,
    STATIC_DIR,
    TRUST_PROXY,
)
from .errors import ConfigError, GatewayFailure, MissingInput
from .schemas import AskRequest, AskResponse, QuestionPage, QuestionRecord
from .services.formatter import format_answer
from .services.llm import GeminiGateway
from .services.questions import QuestionService
from .services.ratelimit import FixedWindowRateLimiter
from .services.registry import QuestionRegistry
from .services.sitemap import build_sitemap
from .services.slug import decode
from .services.storage import FileStorage
from .services.store import AnswerStore

logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


# ============================================================
# CORE WIRING
# ============================================================

def build_question_service(data_dir: str = DATA_DIR) -> QuestionService:
    """
    Wires the filesystem-backed registry and answer store to the Gemini gateway.

    Layout:
    <data_dir>/questions.json
    <data_dir>/answers/<slug>.txt
    """
    root = Path(data_dir)
    return QuestionService(
        registry=QuestionRegistry(FileStorage(root)),
        store=AnswerStore(FileStorage(root / "answers")),
        generator=GeminiGateway(
            api_key=GEMINI_API_KEY,
            model=GEMINI_MODEL,
            base_url=GEMINI_API_URL,
            timeout=GEMINI_TIMEOUT,
        ),
    )


question_service = build_question_service()
ask_limiter = FixedWindowRateLimiter(RATE_LIMIT_MAX, RATE_LIMIT_WINDOW_SECONDS)


# ============================================================
# FASTAPI APP INITIALIZATION
# ============================================================

app = FastAPI(title="IntelliAsk API")

# CORS: allows browser frontend to call backend APIs
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "img-src 'self' data:",
    "script-src 'self'",
    "style-src 'self' 'unsafe-inline'",
])


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    return response


def client_address(request: Request) -> str:
    """
    Behind one trusted proxy the real client is the entry that proxy appended,
    i.e. the rightmost X-Forwarded-For value. Anything left of it is client-supplied.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if TRUST_PROXY and forwarded:
        return forwarded.split(",")[-1].strip()
    return request.client.host if request.client else "unknown"


# ============================================================
# PAGE RENDERING
# ============================================================

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <meta name="description" content="{description}" />
  <style>
    body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; margin: 0; padding: 0; background-color: #f9f9f9; color: #333; }}
    .container {{ max-width: 800px; margin: 50px auto; padding: 20px; background: #fff; border-radius: 8px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1); }}
    h1 {{ color: #0077cc; font-size: 2rem; margin-bottom: 20px; }}
    p, ul {{ font-size: 1.2rem; margin-bottom: 15px; }}
    li {{ margin-bottom: 10px; }}
    strong {{ color: #0077cc; }}
    .disclaimer {{ font-size: 11px; margin-top: 20px; margin-bottom: 10px; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>{title}</h1>
    <div class="answer">{answer_html}</div>
    <p class="disclaimer">*Answers are generated automatically and may be inaccurate or out of date.</p>
  </div>
</body>
</html>
"""


def render_question_page(question: str, answer: str) -> str:
    return PAGE_TEMPLATE.format(
        title=html.escape(question),
        description=html.escape(answer[:150]),
        answer_html=format_answer(answer),
    )


# ============================================================
# ENDPOINTS
# ============================================================

@app.get("/health")
def health():
    """
    Very fast health check.
    """
    return {"status": "ok", "message": "Server is running"}


@app.post("/ask", response_model=AskResponse)
def ask(req: AskRequest, request: Request):
    """
    Main endpoint:
    1) Rate limit per client
    2) Trim + truncate the question
    3) Register it and return the cached or freshly generated answer
    """
    if not ask_limiter.allow(client_address(request)):
        raise HTTPException(status_code=429, detail="Too many requests from this IP, please try again later.")

    prompt = (req.question or "").strip()[:MAX_QUESTION_LENGTH]

    try:
        result = question_service.submit(prompt)
    except MissingInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e
    except GatewayFailure as e:
        logger.error(f"Gemini failed: {e} | {e.detail}")
        raise HTTPException(
            status_code=502,
            detail={"error": "Gemini API error", "details": e.detail},
        ) from e

    return AskResponse(answer=result.answer, slug=result.slug)


@app.get("/api/question/{slug}", response_model=QuestionPage)
def question_json(slug: str):
    """
    JSON view of a question page, for clients that render on their own.
    """
    try:
        result = question_service.lookup(slug)
    except (MissingInput, ValueError) as e:
        raise HTTPException(status_code=404, detail="question not found") from e
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except GatewayFailure as e:
        logger.error(f"Gemini failed for slug={slug}: {e.detail}")
        raise HTTPException(status_code=502, detail={"error": "Gemini API error", "details": e.detail}) from e

    return QuestionPage(
        slug=result.slug,
        question=decode(slug),
        answer=result.answer,
        html=format_answer(result.answer),
    )


@app.get("/question/{slug}", response_class=HTMLResponse)
def question_page(slug: str):
    """
    Shareable, crawlable page for one question. Generates on a cache miss.
    """
    try:
        result = question_service.lookup(slug)
    except (MissingInput, ValueError):
        return PlainTextResponse("Question not found.", status_code=404)
    except (ConfigError, GatewayFailure) as e:
        logger.error(f"Page generation failed for slug={slug}: {e}")
        return PlainTextResponse("Error while generating the answer.", status_code=500)

    return HTMLResponse(render_question_page(decode(slug), result.answer))


@app.get("/api/questions", response_model=list[QuestionRecord])
def list_questions():
    return question_service.list_questions()


@app.get("/sitemap.xml")
def sitemap():
    xml = build_sitemap(question_service.list_questions(), PUBLIC_BASE_URL)
    return Response(content=xml, media_type="application/xml")


# Static frontend, if shipped alongside; registered last so API routes win
if Path(STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

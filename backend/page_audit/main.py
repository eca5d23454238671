from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from page_audit.config import get_settings
from page_audit.errors import PageAuditError
from page_audit.llm import get_llm_client
from page_audit.locator import IssueCategory, IssueRef, locate_issue
from page_audit.models import BoundingBox, FullAnalysis, PageAnalysis
from page_audit.pipeline import analyze_website
from page_audit.solutions import generate_solution

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: report whether model analysis is available
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set; analyses will use heuristics only")
    yield


app = FastAPI(title="Page Audit API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error bodies: every failure is a flat {"error": message}
# ---------------------------------------------------------------------------

@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    url: str = ""


class SolutionRequest(BaseModel):
    issue: str = ""


class SolutionResponse(BaseModel):
    solution: str


class LocateRequest(BaseModel):
    page: PageAnalysis
    issue: str
    category: IssueCategory
    index: int = 0


class LocateResponse(BaseModel):
    location: BoundingBox | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/analyze", response_model=FullAnalysis, response_model_by_alias=True)
async def analyze_endpoint(request: AnalyzeRequest, client=Depends(get_llm_client)):
    """Capture and audit a single page."""
    url = request.url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    if not url.startswith(("http://", "https://")):
        raise HTTPException(
            status_code=400,
            detail="Invalid URL format. URL must start with http:// or https://",
        )

    try:
        return await analyze_website(url, client=client)
    except PageAuditError as e:
        logger.error("Analysis failed for %s: %s", url, e)
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception("Analysis error for %s", url)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to analyze website")


@app.post("/api/generate-solution", response_model=SolutionResponse)
async def generate_solution_endpoint(request: SolutionRequest, client=Depends(get_llm_client)):
    """Suggest a fix for one issue. Always answers, falling back to static advice."""
    issue = request.issue.strip()
    if not issue:
        raise HTTPException(status_code=400, detail="Issue is required")
    return SolutionResponse(solution=await generate_solution(issue, client))


@app.post("/api/locate-issue", response_model=LocateResponse)
async def locate_issue_endpoint(request: LocateRequest):
    """Box on the page's screenshot for an issue, or null if nothing was located."""
    ref = IssueRef(category=request.category, index=request.index)
    return LocateResponse(location=locate_issue(request.page, request.issue, ref))

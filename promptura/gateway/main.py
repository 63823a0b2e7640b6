"""
Promptura Gateway - FastAPI application

Exposes the template engine (optimize, recommend, score, token estimates)
and the version manager (history, promotion, branching, diffs) to the UI.
The caller's identity comes from the auth layer as the opaque X-User-Id
header and only scopes which versions are visible.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional, List, Dict, Any

from fastapi import FastAPI, HTTPException, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptura.config import Settings
from promptura.engine.template_engine import TemplateEngine
from promptura.errors import InvalidOperationError, NotFoundError
from promptura.gateway.models import (
    BranchVersionRequest,
    ComparisonRequest,
    ComparisonResponse,
    CreateVersionRequest,
    DiffRequest,
    DiffResponse,
    OptimizeRequest,
    RecommendResponse,
    RewriteRequest,
    TextRequest,
    TokenEstimateResponse,
    VariationsRequest,
    VariationsResponse,
)
from promptura.models.optimization import OptimizationResult, QualityReport
from promptura.models.prompt_version import PromptComparison, PromptVersion, VersionHistory
from promptura.models.technique import available_techniques
from promptura.observability.tracer import LangFuseTracer
from promptura.router.router import get_available_models
from promptura.versioning.manager import VersionManager
from promptura.versioning.redis_store import RedisVersionStore
from promptura.versioning.store import InMemoryVersionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    tracer = LangFuseTracer(settings)
    await tracer.initialize()

    if settings.version_store == "redis":
        store = RedisVersionStore(settings)
        await store.connect()
    else:
        store = InMemoryVersionStore()

    app.state.engine = TemplateEngine.from_settings(settings, tracer=tracer)
    app.state.versions = VersionManager(store)
    if not settings.has_remote_credentials:
        logger.warning("TOGETHER_API_KEY not set; all optimizations will use fallback prompts")
    yield
    await app.state.engine.close()
    tracer.flush()
    if isinstance(store, RedisVersionStore):
        await store.disconnect()


app = FastAPI(
    title="Promptura",
    description="Prompt optimization and version history",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _engine(request: Request) -> TemplateEngine:
    return request.app.state.engine


def _versions(request: Request) -> VersionManager:
    return request.app.state.versions


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(InvalidOperationError)
async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.get("/health")
async def health(request: Request):
    """Health check"""
    engine = _engine(request)
    return {
        "status": "healthy",
        "remote": "configured" if engine.client.has_credentials else "fallback-only",
        "rate_limit_remaining": engine.rate_limiter.remaining(),
        "version": "0.1.0",
    }


@app.get("/v1/techniques")
async def list_techniques(complexity: str = "advanced") -> Dict[str, Any]:
    """Techniques available at a complexity level"""
    if complexity not in ("simple", "intermediate", "advanced"):
        raise HTTPException(status_code=400, detail=f"Unknown complexity '{complexity}'")
    techniques = available_techniques(complexity)
    return {"techniques": [t.model_dump() for t in techniques.values()]}


@app.get("/v1/models")
async def list_models() -> Dict[str, Any]:
    """Target models the optimizer can tailor prompts for"""
    return {"object": "list", "data": get_available_models()}


@app.post("/v1/optimize", response_model=OptimizationResult)
async def optimize(body: OptimizeRequest, request: Request):
    """Optimize a prompt; always returns a usable prompt"""
    return await _engine(request).generate(body.prompt, body.technique, body.config, body.target_model)


@app.post("/v1/optimize/variations", response_model=VariationsResponse)
async def optimize_variations(body: VariationsRequest, request: Request):
    """Generate two variations for A/B testing"""
    variation_a, variation_b = await _engine(request).generate_variations(
        body.prompt, body.technique_a, body.technique_b, body.config, body.target_model
    )
    return VariationsResponse(variation_a=variation_a, variation_b=variation_b)


@app.post("/v1/rewrite", response_model=OptimizationResult)
async def rewrite(body: RewriteRequest, request: Request):
    """Rewrite a prompt for clarity, brevity, creativity or specificity"""
    return await _engine(request).auto_rewrite(body.prompt, body.rewrite_type)


@app.post("/v1/recommend", response_model=RecommendResponse)
async def recommend(body: TextRequest, request: Request):
    """Recommend a technique for the prompt"""
    return RecommendResponse(technique=_engine(request).recommend(body.text))


@app.post("/v1/score", response_model=QualityReport)
async def score(body: TextRequest, request: Request):
    """Heuristic quality score"""
    return _engine(request).score(body.text)


@app.post("/v1/tokens", response_model=TokenEstimateResponse)
async def tokens(body: TextRequest, request: Request):
    """Estimated token count"""
    return TokenEstimateResponse(tokens=_engine(request).estimate_tokens(body.text))


@app.get("/v1/prompts/{prompt_id}/versions", response_model=VersionHistory)
async def version_history(
    prompt_id: str,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Version history of a saved prompt"""
    return await _versions(request).get_history(prompt_id, user_id=user_id)


@app.post("/v1/prompts/{prompt_id}/versions", response_model=PromptVersion, status_code=201)
async def create_version(
    prompt_id: str,
    body: CreateVersionRequest,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Save a new current version"""
    return await _versions(request).create_version(
        prompt_id,
        body.title,
        body.content,
        body.change_description,
        body.parent_version_id,
        user_id=user_id,
    )


@app.post("/v1/versions/diff", response_model=DiffResponse)
async def diff_versions(
    body: DiffRequest,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Positional line diff between two versions"""
    versions = _versions(request)
    version_a = await versions.get_version(body.version_a_id, user_id=user_id)
    version_b = await versions.get_version(body.version_b_id, user_id=user_id)
    return DiffResponse(changes=versions.diff(version_a, version_b))


@app.get("/v1/versions/{version_id}", response_model=PromptVersion)
async def get_version(
    version_id: str,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Fetch one version"""
    return await _versions(request).get_version(version_id, user_id=user_id)


@app.delete("/v1/versions/{version_id}", status_code=204)
async def delete_version(
    version_id: str,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Delete a non-current version"""
    await _versions(request).delete_version(version_id, user_id=user_id)


@app.post("/v1/versions/{version_id}/current", response_model=PromptVersion)
async def set_current_version(
    version_id: str,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Make a version the current one"""
    return await _versions(request).set_current_version(version_id, user_id=user_id)


@app.post("/v1/versions/{version_id}/branch", response_model=PromptVersion, status_code=201)
async def branch_version(
    version_id: str,
    body: BranchVersionRequest,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Create a new version branched from an existing one"""
    return await _versions(request).branch_from_version(
        version_id, body.title, body.content, body.change_description, user_id=user_id
    )


@app.post("/v1/comparisons", response_model=ComparisonResponse, status_code=201)
async def create_comparison(
    body: ComparisonRequest,
    request: Request,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """Record a comparison between two versions and return their diff"""
    versions = _versions(request)
    comparison = await versions.compare_versions(
        body.version_a_id, body.version_b_id, body.notes, user_id=user_id
    )
    version_a = await versions.get_version(body.version_a_id, user_id=user_id)
    version_b = await versions.get_version(body.version_b_id, user_id=user_id)
    return ComparisonResponse(comparison=comparison, changes=versions.diff(version_a, version_b))


@app.get("/v1/comparisons", response_model=List[PromptComparison])
async def list_comparisons(
    request: Request,
    limit: int = 20,
    user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    """The caller's recent comparisons"""
    return await _versions(request).get_comparisons(limit, user_id=user_id)


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "promptura.gateway.main:app",
        host=settings.gateway_host,
        port=settings.gateway_port,
        reload=True,
    )

from __future__ import annotations

"""
FastAPI application for the Next Business Idea service.

- POST /api/ideas/generate: profile in, scored ideas out (relevance order)
- POST /api/ideas/save: keep a generated (or client-supplied) idea as a favorite
- GET/DELETE /api/ideas/saved[...]: browse and drop favorites
- GET /api/ideas/catalog: the raw templates the generator draws from

Routes are thin: all work happens behind the providers in
:mod:`nextidea.integrations`.  Unexpected failures are logged with the
traceback and answered with a ``{"success": false, "error": ...}`` body.
"""

from collections import OrderedDict
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from .catalog_build import load_catalog
from .config import (
    CORS_ORIGINS,
    RECENT_CACHE_SIZE,
    RESULT_DEFAULT_COUNT,
    RESULT_MAX_COUNT,
    SAVED_LIST_LIMIT,
    SAVED_LIST_MAX,
    configure_logging,
)
from .integrations import get_idea_generator, get_idea_repository, get_scoring_service
from .mapping import attach_scores
from .models import Idea, IdeaScore, IdeaTemplate, IdeaWithScore, UserInputs
from .retrieval import get_idea_catalog

# =============================================================================
# Schemas
# =============================================================================

class HealthResponse(BaseModel):
    status: str


class GenerateRequest(UserInputs):
    count: int = Field(default=RESULT_DEFAULT_COUNT, ge=1, le=RESULT_MAX_COUNT)


class GenerateResponse(BaseModel):
    success: bool = True
    ideas: List[IdeaWithScore]


class SaveIdeaRequest(BaseModel):
    idea_id: str = Field(..., min_length=1)
    idea: Optional[IdeaWithScore] = None


class IdeaResponse(BaseModel):
    success: bool = True
    idea: IdeaWithScore


class IdeaListResponse(BaseModel):
    success: bool = True
    ideas: List[IdeaWithScore]


class CatalogResponse(BaseModel):
    success: bool = True
    templates: List[IdeaTemplate]


class DeleteResponse(BaseModel):
    success: bool = True


# =============================================================================
# Recently generated ideas (so the client can save by id)
# =============================================================================

_recent_results: "OrderedDict[str, IdeaWithScore]" = OrderedDict()


def _remember(ideas: List[IdeaWithScore]) -> None:
    for item in ideas:
        _recent_results[item.id] = item
        _recent_results.move_to_end(item.id)
    while len(_recent_results) > max(RECENT_CACHE_SIZE, 0):
        _recent_results.popitem(last=False)


def clear_recent_results() -> None:
    _recent_results.clear()


def _split(item: IdeaWithScore) -> tuple[Idea, IdeaScore]:
    data = item.model_dump(exclude={"score"})
    return Idea(**data), item.score


def _join(idea: Idea, score: IdeaScore) -> IdeaWithScore:
    return attach_scores([idea], [score])[0]


def _failure(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": message})


# =============================================================================
# FastAPI app + startup
# =============================================================================

app = FastAPI(title="Next Business Idea")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_event() -> None:
    configure_logging()
    logger.info("Starting app warmup...")
    try:
        catalog_df = load_catalog()
        logger.info("Loaded idea catalog with {} templates", len(catalog_df))
    except Exception as e:
        logger.warning("Catalog warmup failed: {}", e)
    logger.info("Warmup complete.")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/api/ideas/generate", response_model=GenerateResponse)
def generate_ideas(req: GenerateRequest):
    try:
        user_inputs = UserInputs(**req.model_dump(exclude={"count"}))
        ideas = get_idea_generator().generate_ideas(user_inputs, req.count)
        scores = get_scoring_service().score_ideas(ideas, user_inputs)
        scored = attach_scores(ideas, scores)
        _remember(scored)
        return GenerateResponse(ideas=scored)
    except Exception:
        logger.exception("Error generating ideas")
        return _failure("Failed to generate ideas")


@app.post("/api/ideas/save", response_model=IdeaResponse)
def save_idea(req: SaveIdeaRequest):
    if req.idea is not None and req.idea.id != req.idea_id:
        raise HTTPException(status_code=422, detail="idea_id does not match idea.id")

    item = req.idea or _recent_results.get(req.idea_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Unknown idea id {req.idea_id}")

    try:
        idea, score = _split(item)
        get_idea_repository().save(idea, score)
        logger.info("Saved idea {} ({})", idea.id, idea.title)
        return IdeaResponse(idea=item)
    except Exception:
        logger.exception("Error saving idea {}", req.idea_id)
        return _failure("Failed to save idea")


@app.get("/api/ideas/saved", response_model=IdeaListResponse)
def list_saved_ideas(limit: int = Query(default=SAVED_LIST_LIMIT, ge=1, le=SAVED_LIST_MAX)):
    try:
        saved = get_idea_repository().find_all(limit)
        return IdeaListResponse(ideas=[_join(idea, score) for idea, score in saved])
    except Exception:
        logger.exception("Error fetching saved ideas")
        return _failure("Failed to fetch saved ideas")


@app.get("/api/ideas/saved/{idea_id}", response_model=IdeaResponse)
def get_saved_idea(idea_id: str):
    try:
        found = get_idea_repository().find_by_id(idea_id)
    except Exception:
        logger.exception("Error fetching saved idea {}", idea_id)
        return _failure("Failed to fetch saved idea")
    if found is None:
        raise HTTPException(status_code=404, detail=f"Saved idea {idea_id} not found")
    return IdeaResponse(idea=_join(*found))


@app.delete("/api/ideas/saved/{idea_id}", response_model=DeleteResponse)
def delete_saved_idea(idea_id: str):
    try:
        get_idea_repository().delete(idea_id)
        logger.info("Deleted saved idea {}", idea_id)
        return DeleteResponse()
    except Exception:
        logger.exception("Error deleting saved idea {}", idea_id)
        return _failure("Failed to delete saved idea")


@app.get("/api/ideas/catalog", response_model=CatalogResponse)
def idea_catalog():
    try:
        return CatalogResponse(templates=get_idea_catalog())
    except Exception:
        logger.exception("Error loading idea catalog")
        return _failure("Failed to load idea catalog")

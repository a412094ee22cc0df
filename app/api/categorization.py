"""
Transaction categorization API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from app.calculations.categorization import (
    CATEGORIES,
    SUB_CATEGORIES,
    CategorizationEngine,
)

router = APIRouter()


def get_categorization_engine(request: Request) -> CategorizationEngine:
    """Dependency returning the engine created with the application."""
    return request.app.state.categorization_engine


class SuggestRequest(BaseModel):
    description: str = Field(min_length=1)
    amount: float = 0.0


class SuggestionResponse(BaseModel):
    category: str
    subcategory: str
    confidence: float


class CorrectionRequest(BaseModel):
    """A user's correction of a suggested category."""

    description: str = Field(min_length=1)
    original_category: str
    original_subcategory: str
    corrected_category: str
    corrected_subcategory: str


class SimilarRequest(BaseModel):
    description: str = Field(min_length=1)
    candidates: List[str]


@router.get("/categories")
async def list_categories():
    """List categories and their subcategories."""
    return {"categories": CATEGORIES, "subcategories": SUB_CATEGORIES}


@router.post("/suggest", response_model=SuggestionResponse)
async def suggest_category(
    request: SuggestRequest,
    engine: CategorizationEngine = Depends(get_categorization_engine),
):
    """Suggest a category for a transaction description."""
    suggestion = engine.suggest(request.description, request.amount)
    return SuggestionResponse(
        category=suggestion.category,
        subcategory=suggestion.subcategory,
        confidence=suggestion.confidence,
    )


@router.post("/learn")
async def learn_correction(
    request: CorrectionRequest,
    engine: CategorizationEngine = Depends(get_categorization_engine),
):
    """Record a correction so similar transactions are categorized the same way."""
    if request.corrected_category not in SUB_CATEGORIES:
        raise HTTPException(status_code=400, detail="Unknown category")

    try:
        learned = engine.learn(
            request.description,
            (request.original_category, request.original_subcategory),
            (request.corrected_category, request.corrected_subcategory),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if learned is None:
        return {"learned": False}

    return {
        "learned": True,
        "pattern": learned.pattern,
        "category": learned.category,
        "subcategory": learned.subcategory,
        "confidence": learned.confidence,
    }


@router.post("/similar")
async def find_similar(
    request: SimilarRequest,
    engine: CategorizationEngine = Depends(get_categorization_engine),
):
    """Find candidate descriptions similar to the given one."""
    matches = engine.find_similar(request.description, request.candidates)
    return {"matches": matches, "total": len(matches)}

"""Dish extraction routes"""

from fastapi import APIRouter
from typing import List

from domain.schemas import DishEntryResponse, DishExtractionRequest
from services.dish_extractor import extract_dishes

router = APIRouter(prefix="/dishes", tags=["Dishes"])


@router.post("/extract", response_model=List[DishEntryResponse])
def extract(payload: DishExtractionRequest) -> List[DishEntryResponse]:
    """Preview the dish entries an audit would send for classification."""
    return [DishEntryResponse.model_validate(e) for e in extract_dishes(payload.meal_sections)]

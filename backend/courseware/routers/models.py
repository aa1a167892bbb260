"""
Models Router

Exposes the quiz fallback chain, in the order models are tried.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from courseware.services.llm.registry import ModelChain, describe_chain


router = APIRouter()


class ModelInfo(BaseModel):
    id: str
    position: int
    display_name: str
    tier: str
    description: str


@router.get("", response_model=list[ModelInfo])
async def get_model_chain():
    """Return the configured quiz models in fallback order."""
    return describe_chain(ModelChain.from_settings())

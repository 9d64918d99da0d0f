from fastapi import APIRouter, Depends
from promptrouter.models.catalog import MODEL_CATALOG
from promptrouter.models.schemas import ChatRequest, ModelDescriptor, RoutingDecision
from promptrouter.core.dependencies import get_model_router
from typing import List
import logging

router = APIRouter()
log = logging.getLogger(__name__)

@router.post("/classify", response_model=RoutingDecision)
async def classify_prompt(request: ChatRequest, model_router=Depends(get_model_router)):
    """
    Picks a model for the prompt without generating a completion.
    A failed classification is reported as a fallback decision, not as an error.
    """
    log.info(f"Processing classification request with prompt length: {len(request.prompt)}")
    decision = await model_router.select(request)
    if decision.fallback:
        log.info(f"Classification fell back to '{decision.model_id}': {decision.reason}")
    else:
        log.info(f"Prompt classified for '{decision.model_id}'")
    return decision

@router.get("/models", response_model=List[ModelDescriptor])
async def get_models():
    """
    Returns the model catalog in routing order; the first entry is the default.
    """
    return list(MODEL_CATALOG)

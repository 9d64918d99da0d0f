import json
from typing import Optional, Sequence, Tuple

from promptrouter.models.schemas import ModelDescriptor

GEMINI_MODEL_ID = "gemini-2.0-flash"
DEEPSEEK_MODEL_ID = "deepseek-chat"

# Order matters: the first entry is the default backend used whenever
# classification fails or names something outside the catalog.
MODEL_CATALOG: Tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id=GEMINI_MODEL_ID,
        label="Gemini 2.0 Flash",
        description="Performs best for fact checking and general answers. It is not preferred for any coding related task",
    ),
    ModelDescriptor(
        id=DEEPSEEK_MODEL_ID,
        label="deepseek-chat",
        description="Works best for tasks related to general coding but may not perform well for tasks requiring deeper knowledge or complex tasks",
    ),
)

DEFAULT_MODEL = MODEL_CATALOG[0]


def serialize_catalog(catalog: Sequence[ModelDescriptor] = MODEL_CATALOG) -> str:
    """Compact JSON listing of model names and specialties, embedded in the classification prompt."""
    return json.dumps(
        [{"name": model.id, "description": model.description} for model in catalog],
        separators=(",", ":"),
    )


def find_model(model_id: str, catalog: Sequence[ModelDescriptor] = MODEL_CATALOG) -> Optional[ModelDescriptor]:
    """Return the first catalog entry whose id equals `model_id` exactly."""
    for model in catalog:
        if model.id == model_id:
            return model
    return None

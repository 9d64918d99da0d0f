from typing import Optional

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field


class ChatRequest(PydanticBaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="The prompt to route and answer")


class ChatResponse(PydanticBaseModel):
    response: Optional[str] = Field(
        default=None, description="Generated text, absent when the backend returned no usable content"
    )
    model: str = Field(..., description="Human-readable label of the backend that produced the response")


class ModelDescriptor(PydanticBaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Backend identifier the classifier must answer with")
    label: str = Field(..., description="Label reported in ChatResponse.model")
    description: str = Field(..., description="Specialty text shown to the classifier")


class RoutingDecision(PydanticBaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    fallback: bool = Field(default=False, description="True when the default backend was substituted")
    reason: Optional[str] = Field(default=None, description="Why the fallback happened")

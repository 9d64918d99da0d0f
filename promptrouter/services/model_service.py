import logging
from typing import Mapping, Optional, Protocol, Sequence

from promptrouter.models.catalog import MODEL_CATALOG, find_model, serialize_catalog
from promptrouter.models.schemas import ChatRequest, ChatResponse, ModelDescriptor, RoutingDecision
from promptrouter.services.backends import ChatBackend, GeminiBackend

log = logging.getLogger(__name__)

PROMPT_SEPARATOR = "---------------------------------------"

CLASSIFICATION_INSTRUCTION = """
    FORGET WHAT I SAID BEFORE, I want you to analyze the prompt that I gave you and return ONLY THE NAME of the model which will
    give me the best result for the given prompt. As all the AI models have their different specialties, some AI models tend to perform
    certain tasks better than others. Therefore, I want you to ONLY RETURN THE NAME OF THE AI MODEL which should give me the best output as per their qualities.

    Here are the available models and their specialties:
    {catalog}

    IMPORTANT: Return ONLY the model name, nothing else. Do not include any reasoning or additional text.
"""


class ClassificationError(Exception):
    """The classifier could not name a catalog model for the prompt."""


class PromptClassifier(Protocol):
    async def classify(self, prompt: str, catalog: Sequence[ModelDescriptor]) -> str: ...


def build_classification_prompt(prompt: str, catalog: Sequence[ModelDescriptor] = MODEL_CATALOG) -> str:
    instruction = CLASSIFICATION_INSTRUCTION.format(catalog=serialize_catalog(catalog))
    return f'"{prompt}" {PROMPT_SEPARATOR} {instruction}'


def select_model_for_answer(answer: Optional[str], catalog: Sequence[ModelDescriptor] = MODEL_CATALOG) -> Optional[ModelDescriptor]:
    """
    Match the classifier's raw answer against the catalog.
    Surrounding whitespace is ignored; anything else must match a model id exactly.
    """
    if answer is None:
        return None
    return find_model(answer.strip(), catalog)


class LLMPromptClassifier:
    """Asks a fixed LLM backend which catalog model suits the prompt best."""

    def __init__(self, backend: GeminiBackend):
        self.backend = backend

    async def classify(self, prompt: str, catalog: Sequence[ModelDescriptor] = MODEL_CATALOG) -> str:
        composite_prompt = build_classification_prompt(prompt, catalog)
        try:
            answer = await self.backend.generate_text(composite_prompt)
        except Exception as e:
            raise ClassificationError(f"Classification call failed: {e}") from e

        log.info(f"Chosen model: {answer.strip() if answer else answer}")
        model = select_model_for_answer(answer, catalog)
        if model is None:
            raise ClassificationError(f"Unrecognized model name from classifier: {answer!r}")
        return model.id


class ModelRouter:
    """
    Classifies a prompt, then hands it to exactly one backend.
    Any failure while classifying falls back to the first catalog entry; failures of the
    chosen backend are not caught here.
    """

    def __init__(
        self,
        classifier: PromptClassifier,
        backends: Mapping[str, ChatBackend],
        catalog: Sequence[ModelDescriptor] = MODEL_CATALOG,
    ):
        if not catalog:
            raise ValueError("Model catalog must not be empty")
        missing = [model.id for model in catalog if model.id not in backends]
        if missing:
            raise ValueError(f"No backend registered for catalog models: {missing}")
        self.classifier = classifier
        self.backends = dict(backends)
        self.catalog = tuple(catalog)

    @property
    def default_model(self) -> ModelDescriptor:
        return self.catalog[0]

    async def select(self, request: ChatRequest) -> RoutingDecision:
        try:
            model_id = await self.classifier.classify(request.prompt, self.catalog)
            if find_model(model_id, self.catalog) is None:
                raise ClassificationError(f"Classifier returned a model outside the catalog: {model_id!r}")
        except Exception as e:
            log.warning(
                f"An error occurred while selecting the model, defaulting to {self.default_model.id}: {e}"
            )
            return RoutingDecision(model_id=self.default_model.id, fallback=True, reason=str(e))

        log.info(f"Selected model: {model_id}")
        return RoutingDecision(model_id=model_id)

    async def route(self, request: ChatRequest) -> ChatResponse:
        decision = await self.select(request)
        backend = self.backends[decision.model_id]
        log.info(f"Dispatching prompt (length {len(request.prompt)}) to {decision.model_id}")
        return await backend.invoke(request)

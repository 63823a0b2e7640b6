"""
Model routing table

Maps the user-facing model names shown in the UI to the identifiers the
completion provider actually serves. Several names are proxies: the
provider does not host that family, so a comparable open model stands in.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Any


@dataclass(frozen=True)
class ModelRoute:
    """Route from a display name to a provider model identifier"""
    name: str
    identifier: str
    direct: bool  # False when the identifier is a stand-in for another family


DEFAULT_ROUTE = "general"

MODEL_ROUTES: Dict[str, ModelRoute] = {
    route.name: route
    for route in [
        ModelRoute("GPT-4", "mistralai/Mistral-7B-Instruct-v0.2", direct=False),
        ModelRoute("Claude 3", "NousResearch/Nous-Hermes-2-Mixtral-8x7B-DPO", direct=False),
        ModelRoute("DeepSeek", "deepseek-ai/deepseek-coder-33b-instruct", direct=True),
        ModelRoute("Gemini", "google/gemma-7b-it", direct=False),
        ModelRoute("Grok", "mistralai/Mixtral-8x7B-Instruct-v0.1", direct=False),
        ModelRoute("Perplexity", "togethercomputer/RedPajama-INCITE-7B-Instruct", direct=False),
        ModelRoute("Mistral", "mistralai/Mistral-7B-Instruct-v0.2", direct=True),
        ModelRoute("Llama 2", "meta-llama/Llama-2-70b-chat-hf", direct=True),
        ModelRoute("PaLM 2", "google/gemma-7b-it", direct=False),
        ModelRoute("Cohere Command", "mistralai/Mistral-7B-Instruct-v0.2", direct=False),
        ModelRoute(DEFAULT_ROUTE, "mistralai/Mistral-7B-Instruct-v0.2", direct=True),
    ]
}


def resolve_model_identifier(target_model: Optional[str] = None) -> str:
    """Provider identifier for a display name; unknown names use the default"""
    route = MODEL_ROUTES.get(target_model or DEFAULT_ROUTE, MODEL_ROUTES[DEFAULT_ROUTE])
    return route.identifier


def get_available_models() -> List[Dict[str, Any]]:
    """Selectable target models"""
    return [
        {
            "id": route.name,
            "identifier": route.identifier,
            "direct": route.direct,
        }
        for route in MODEL_ROUTES.values()
        if route.name != DEFAULT_ROUTE
    ]

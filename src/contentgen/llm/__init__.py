"""LLM provider adapters and the fallback orchestrator.

Design goals:
- Keep provider-specific request/response shapes isolated in one client each.
- Provide a single `generate(prompt, settings)` interface for all providers.
- Normalize loosely formatted model output into one validated record shape.
"""

from .factory import PROVIDERS, build_provider
from .orchestrator import FallbackOrchestrator, normalize_model_hint, prioritize_providers
from .types import GeneratedContent, GenerationRequest, GenerationSettings

__all__ = [
    "PROVIDERS",
    "FallbackOrchestrator",
    "GeneratedContent",
    "GenerationRequest",
    "GenerationSettings",
    "build_provider",
    "normalize_model_hint",
    "prioritize_providers",
]

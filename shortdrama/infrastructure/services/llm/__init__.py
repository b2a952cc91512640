from .fake_llm import FakeLLMService
from .google_llm_service import GoogleLLMService

__all__ = ["FakeLLMService", "GoogleLLMService"]

from ai_reviewer.llm.client import LLMClient
from ai_reviewer.llm.prompts import build_review_prompt
from ai_reviewer.llm.schemas import ModelSuggestion, ReviewPayload

__all__ = ["LLMClient", "build_review_prompt", "ModelSuggestion", "ReviewPayload"]

"""Oracle client used by the review agents."""
from .base import LLMClient, load_api_key
from .constants import API_KEY_ENV_VARS, LLMModels, LLMTypes, TaskLLMConfigs

__all__ = ["LLMClient", "LLMModels", "LLMTypes", "TaskLLMConfigs", "API_KEY_ENV_VARS", "load_api_key"]

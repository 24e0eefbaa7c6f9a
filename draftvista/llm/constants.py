from enum import Enum
from dataclasses import dataclass
from typing import Optional


class LLMTypes(Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    TOGETHERAI = "togetherai"


class LLMModels(Enum):
    # OpenAI models
    GPT_4O_MINI = "gpt-4o-mini"

    # Gemini models
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GEMINI_2_5_FLASH_LITE = "gemini-2.5-flash-lite"

    # Together AI models
    LLAMA_3_3_70B = "meta-llama/Llama-3.3-70B-Instruct-Turbo-Free"


@dataclass
class TaskLLMConfig:
    """LLM configuration for a specific task"""
    temperature: float
    max_tokens: Optional[int]
    top_p: Optional[float] = None
    top_k: Optional[int] = None


class TaskLLMConfigs:
    """LLM configurations for different tasks"""

    # Both review templates share one generation budget
    MANUSCRIPT_REVIEW = TaskLLMConfig(
        temperature=0.7,
        max_tokens=8192,
        top_p=0.95,
        top_k=40,
    )


# Environment variable holding each provider's key
API_KEY_ENV_VARS = {
    LLMTypes.OPENAI: "OPENAI_API_KEY",
    LLMTypes.GEMINI: "GOOGLE_API_KEY",
    LLMTypes.TOGETHERAI: "TOGETHER_API_KEY",
}

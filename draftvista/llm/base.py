import logging
import os
from typing import Optional

import openai
from dotenv import load_dotenv
from google import genai
from google.genai import types
from together import Together

from ..errors import ConfigurationError
from .constants import API_KEY_ENV_VARS, LLMTypes

logger = logging.getLogger(__name__)

# Chat-completions providers ignore top_k unless listed here
TOP_K_PROVIDERS = {LLMTypes.GEMINI, LLMTypes.TOGETHERAI}


def load_api_key(model_type: LLMTypes) -> Optional[str]:
    """Read the provider key from the environment, after merging a local .env file."""
    load_dotenv()
    env_var = API_KEY_ENV_VARS.get(model_type)
    return os.getenv(env_var) if env_var else None


def provider_for_model(model_name: str) -> LLMTypes:
    """Guess the provider from a model id; reviews go to Gemini unless the name says otherwise."""
    lowered = model_name.lower()
    if "gpt" in lowered or lowered.startswith("o1"):
        return LLMTypes.OPENAI
    if any(x in lowered for x in ("llama", "mistral", "mixtral", "qwen")):
        return LLMTypes.TOGETHERAI
    return LLMTypes.GEMINI


class LLMClient:
    """
    Text-in/text-out client for the review oracle.

    One prompt goes in, the model's markdown comes back as a string (or None when the
    provider produced no text part). Provider errors propagate unchanged so the
    review agents can decide whether to retry, fall back or report them.
    """

    def __init__(self, model_name: str, model_type: Optional[LLMTypes] = None, api_key: Optional[str] = None):
        """
        Args:
            model_name: Model id, e.g. "gemini-2.5-flash" or "gpt-4o-mini"
            model_type: Provider; inferred from ``model_name`` when omitted
            api_key: Provider key; read from the environment when omitted

        Raises:
            ConfigurationError: no key was found, or the provider SDK rejected it
        """
        self.model_name = model_name
        self.model_type = model_type or provider_for_model(model_name)

        api_key = api_key or load_api_key(self.model_type)
        if not api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV_VARS[self.model_type]} environment variable is required "
                f"to use {self.model_type.value} models"
            )

        try:
            self._init_client(api_key)
        except Exception as e:
            raise ConfigurationError(f"Failed to initialize AI service: {e}") from e
        logger.info("%s client initialized for model %s", self.model_type.value, self.model_name)

    def _init_client(self, api_key: str):
        if self.model_type == LLMTypes.GEMINI:
            self.client = genai.Client(api_key=api_key)
        elif self.model_type == LLMTypes.OPENAI:
            self.client = openai.OpenAI(api_key=api_key)
        elif self.model_type == LLMTypes.TOGETHERAI:
            self.client = Together(api_key=api_key)
        else:
            raise ConfigurationError(f"Unsupported model type: {self.model_type}")

    def generate(self, prompt: str, system: Optional[str] = None, temperature: float = 0.2,
                 max_tokens: Optional[int] = None, top_p: Optional[float] = None,
                 top_k: Optional[int] = None) -> Optional[str]:
        """
        Send one user prompt and return the raw text of the answer.

        ``top_k`` is dropped for OpenAI, which does not support it.
        """
        sampling = {"temperature": temperature}
        if max_tokens is not None:
            sampling["max_tokens"] = max_tokens
        if top_p is not None:
            sampling["top_p"] = top_p
        if top_k is not None and self.model_type in TOP_K_PROVIDERS:
            sampling["top_k"] = top_k

        if self.model_type == LLMTypes.GEMINI:
            return self._generate_gemini(prompt, system, sampling)
        return self._generate_chat(prompt, system, sampling)

    def _generate_gemini(self, prompt: str, system: Optional[str], sampling: dict) -> Optional[str]:
        if "max_tokens" in sampling:
            sampling["max_output_tokens"] = sampling.pop("max_tokens")
        if system:
            sampling["system_instruction"] = system

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=[{"role": "user", "parts": [{"text": prompt}]}],
            config=types.GenerateContentConfig(**sampling),
        )
        return response.text

    def _generate_chat(self, prompt: str, system: Optional[str], sampling: dict) -> Optional[str]:
        """OpenAI and Together AI share the chat-completions shape."""
        messages = [{"role": "user", "content": prompt}]
        if system:
            messages.insert(0, {"role": "system", "content": system})

        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            **sampling,
        )
        return response.choices[0].message.content

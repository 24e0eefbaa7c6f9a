import logging
import time
from typing import Callable, Optional

from draftvista.config import Config
from draftvista.errors import AnalysisError, ConfigurationError
from draftvista.llm.constants import TaskLLMConfigs
from draftvista.parsing.response import build_mock_response, parse_llm_response
from draftvista.schemas import AnalysisResult, AnalysisType, JournalInfo

logger = logging.getLogger(__name__)

# Errors that mean the oracle could not be reached; these end in a mock result
TRANSIENT_MARKERS = ("unavailable", "connection", "timeout", "econnrefused")

# (category, substrings, user-facing message); checked in order, first hit wins
ERROR_CATEGORIES = (
    ("model-not-found", ("404", "not found"),
     "The AI model is currently unavailable. Please try again later."),
    ("quota-exceeded", ("quota", "exceeded"),
     "API quota exceeded. Please check your API key or try again later."),
    ("invalid-api-key", ("api key", "authentication"),
     "Invalid API key. Please check your Google AI API key configuration."),
    ("content-policy-violation", ("content policy",),
     "The content was blocked by the AI service. Please try with different content."),
    ("model-unavailable", ("model",),
     "The selected AI model is not available. Please contact support."),
    ("rate-limited", ("rate limit",),
     "Rate limit exceeded. Please wait a few minutes before trying again."),
    ("request-timeout", ("timed out",),
     "Request timed out. The server took too long to respond. Please try again."),
)


def is_transient(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def classify_error(error: Exception, failure_prefix: str = "Analysis failed") -> AnalysisError:
    """Map a final oracle error to a user-facing ``AnalysisError`` by substring match."""
    message = str(error)
    lowered = message.lower()
    for category, markers, user_message in ERROR_CATEGORIES:
        if any(marker in lowered for marker in markers):
            return AnalysisError(user_message, category)
    return AnalysisError(f"{failure_prefix}: {message}", "analysis-failed")


class Agent:
    """Sends one review prompt to the oracle and parses the markdown answer.

    Every oracle error, including an empty answer, is retried ``config.max_retries``
    times with a fixed ``retry_delay`` between attempts. When the budget is spent,
    unreachable-service errors produce the mock result and anything else is raised
    as a categorised ``AnalysisError``.
    """
    name: str = "Agent"
    analysis_type: AnalysisType = AnalysisType.PRE_SUBMISSION
    failure_prefix: str = "Analysis failed"

    def __init__(self, llm=None, config: Config = None, sleep: Callable[[float], None] = time.sleep):
        self.config = config or Config()
        self.llm = llm
        self.sleep = sleep

    @property
    def retry_delay(self) -> float:
        raise NotImplementedError

    def build_prompt(self, manuscript_text: str, journal_info: JournalInfo,
                     reviewer_comments: Optional[str] = None) -> str:
        raise NotImplementedError

    def analyze(self, manuscript_text: str, journal_info: JournalInfo,
                reviewer_comments: Optional[str] = None) -> AnalysisResult:
        if self.llm is None:
            raise ConfigurationError("AI model is not properly initialized")

        prompt = self.build_prompt(manuscript_text, journal_info, reviewer_comments)
        retries = self.config.max_retries
        while True:
            try:
                logger.info("Sending %s request to the AI model", self.analysis_type.value)
                text = self._generate(prompt)
                logger.info("Received %s response from the AI model", self.analysis_type.value)
                return parse_llm_response(text, self.analysis_type)
            except Exception as e:
                if retries > 0:
                    logger.warning("API error in %s analysis: %s. Retrying... (%d attempts remaining)",
                                   self.analysis_type.value, e, retries)
                    retries -= 1
                    self.sleep(self.retry_delay)
                    continue
                return self._give_up(e)

    def _generate(self, prompt: str) -> str:
        cfg = TaskLLMConfigs.MANUSCRIPT_REVIEW
        text = self.llm.generate(prompt, temperature=cfg.temperature, max_tokens=cfg.max_tokens,
                                 top_p=cfg.top_p, top_k=cfg.top_k)
        if text is None or not isinstance(text, str):
            raise AnalysisError("Invalid response format from AI model")
        if not text.strip():
            raise AnalysisError("Received empty response from the AI model")
        return text

    def _give_up(self, error: Exception) -> AnalysisResult:
        logger.error("LLM %s analysis error: %s", self.analysis_type.value, error)
        if is_transient(error):
            logger.warning("Falling back to mock response for %s", self.analysis_type.value)
            return build_mock_response(self.analysis_type)
        raise classify_error(error, self.failure_prefix) from error

"""AI study tutor client.

Wraps the configured chat model. Failures never propagate: the caller always
gets a reply string, which is a fixed apology when the model is unavailable.
"""

import logging
from typing import Any, Callable, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from config import get_default_llm

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "I'm sorry, I couldn't generate a response right now."
ERROR_REPLY_FALLBACK = (
    "There was an error communicating with the AI. Please check your connection."
)

SYSTEM_INSTRUCTION = (
    "You are an expert AI Study Tutor.\n"
    "Your goal is to help students understand complex topics, summarize modules, "
    "and test their knowledge.\n"
    "Be encouraging, clear, and concise."
)

_tutor_client_instance: Optional["TutorClient"] = None


def get_tutor_client() -> "TutorClient":
    """Return a singleton TutorClient instance."""
    global _tutor_client_instance
    if _tutor_client_instance is None:
        _tutor_client_instance = TutorClient()
    return _tutor_client_instance


class TutorClient:
    """Asks the chat model for study help."""

    def __init__(self, llm_factory: Callable[[], Any] = get_default_llm):
        """Initialize TutorClient.

        Args:
            llm_factory: Builds the chat model on first use, so a missing API
                key only affects tutor requests.
        """
        self._llm_factory = llm_factory
        self._llm = None

    def _get_llm(self) -> Any:
        if self._llm is None:
            self._llm = self._llm_factory()
        return self._llm

    @staticmethod
    def build_system_instruction(module_context: Optional[str] = None) -> str:
        if module_context:
            return (
                f"{SYSTEM_INSTRUCTION}\n"
                f"Context about the current study module: {module_context}"
            )
        return SYSTEM_INSTRUCTION

    def get_study_help(self, prompt: str, module_context: Optional[str] = None) -> str:
        """Answer a student's question.

        Args:
            prompt: The student's message.
            module_context: Optional module content to ground the answer.

        Returns:
            The model's reply, or a fallback apology on any failure.
        """
        messages = [
            SystemMessage(content=self.build_system_instruction(module_context)),
            HumanMessage(content=prompt),
        ]
        try:
            response = self._get_llm().invoke(messages)
        except Exception:
            logger.exception("Tutor request failed")
            return ERROR_REPLY_FALLBACK

        text = response.content if isinstance(response.content, str) else ""
        return text or EMPTY_REPLY_FALLBACK

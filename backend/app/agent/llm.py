"""LLM provider configuration and the text-generation client."""

from typing import Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from app.core.config import Settings
from app.core.exceptions import GenerationServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)


def get_llm(settings: Settings) -> ChatOpenAI:
    """Get configured LLM instance.

    One attempt per request: the client's own retries are disabled.
    """
    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.OPENAI_TEMPERATURE,
        "max_retries": 0,
    }

    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL
    if settings.OPENAI_TIMEOUT is not None:
        kwargs["timeout"] = settings.OPENAI_TIMEOUT

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(**kwargs)


class TextGenerator(Protocol):
    """Anything that turns a prompt into raw reply text."""

    async def generate(self, prompt: str) -> str: ...


class ChatModelGenerator:
    """Send a prompt as the only message to a chat model and return its text."""

    def __init__(self, llm: BaseChatModel) -> None:
        self.llm = llm

    async def generate(self, prompt: str) -> str:
        try:
            resp = await self.llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error("Text generation call failed", error=str(e))
            raise GenerationServiceError(f"Text generation failed: {e}") from e

        content = resp.content
        if not isinstance(content, str):
            # Some providers return a list of content blocks
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content

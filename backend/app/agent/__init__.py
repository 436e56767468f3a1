"""Text-generation client and reply parsing."""

from app.agent.llm import ChatModelGenerator, TextGenerator, get_llm
from app.agent.llm_utils import Parsed, Unparseable, extract_json_object

__all__ = [
    "ChatModelGenerator",
    "TextGenerator",
    "get_llm",
    "Parsed",
    "Unparseable",
    "extract_json_object",
]

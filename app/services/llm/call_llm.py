from typing import Any, Dict, List, Optional, Protocol, Union

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from app.config import OFFER_COPY_MODEL, OFFER_COPY_TEMPERATURE


class TextGenerator(Protocol):
    """Anything that can turn role/content messages into generated text"""

    async def invoke(self, messages: List[Dict[str, str]], **kwargs) -> str:
        ...


def to_langchain_messages(messages: List[Dict[str, str]]) -> List[BaseMessage]:
    # Convert the role/content dict format to LangChain messages
    return [
        SystemMessage(content=msg["content"]) if msg["role"] == "system"
        else HumanMessage(content=msg["content"]) if msg["role"] == "user"
        else AIMessage(content=msg["content"])
        for msg in messages
    ]


def message_text(content: Union[str, List[Union[str, Dict[str, Any]]]]) -> str:
    """Plain text of a reply, joining text blocks when the content is a block list"""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class LLMService:
    def __init__(self, llm: Optional[BaseChatModel] = None):
        # One attempt per call: callers own the deadline and never retry
        self.llm = llm if llm is not None else ChatOpenAI(
            model=OFFER_COPY_MODEL,
            temperature=OFFER_COPY_TEMPERATURE,
            max_retries=0,
        )

    async def invoke(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Invoke the LLM and return the raw text of its reply.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys
            **kwargs: Additional arguments to pass to the LLM

        Returns:
            The reply content as plain text (not parsed or validated)
        """
        response = await self.llm.ainvoke(to_langchain_messages(messages), **kwargs)
        return message_text(response.content)


_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    """FastAPI dependency returning the shared LLMService (built on first use)"""
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service

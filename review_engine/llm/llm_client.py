"""
Chat model client supporting both OpenAI (cloud) and Ollama (local).
"""
import logging
from typing import Dict, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from config.settings import Settings as settings
from review_engine.exceptions import GenerationFailedError, ServiceUnavailableError
from review_engine.models import GenerationOptions

logger = logging.getLogger(__name__)

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class LLMClient:
    """
    Manages the chat model connection with selection between OpenAI and Ollama.

    A client built for OpenAI without an API key stays inert: it can be
    constructed and passed around, but every call raises ServiceUnavailableError.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        use_openai: Optional[bool] = None,
        max_retries: Optional[int] = None,
        llm: Optional[BaseChatModel] = None
    ):
        """
        Initialize LLM client.

        Args:
            model: Model name (defaults to settings)
            api_key: OpenAI API key (defaults to settings)
            use_openai: Select OpenAI instead of Ollama (defaults to settings)
            max_retries: Number of provider retry attempts
            llm: Already-constructed chat model, used as-is
        """
        self.use_openai = settings.USE_OPENAI if use_openai is None else use_openai
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.max_retries = settings.LLM_MAX_RETRIES if max_retries is None else max_retries

        if self.use_openai:
            self.model = model or settings.OPENAI_MODEL
        else:
            self.model = model or settings.OLLAMA_MODEL

        if llm is not None:
            self.llm = llm
        elif self.use_openai and not self.api_key:
            self.llm = None
            logger.warning("OPENAI_API_KEY not set; AI generation is disabled")
        elif self.use_openai:
            self.llm = self._create_openai_llm()
            logger.info(f"Initialized OpenAI LLM: {self.model}")
        else:
            self.llm = self._create_ollama_llm()
            logger.info(f"Initialized Ollama LLM: {self.model}")

    @property
    def is_available(self) -> bool:
        return self.llm is not None

    def _create_openai_llm(self) -> ChatOpenAI:
        """Create OpenAI chat model instance."""
        return ChatOpenAI(
            model=self.model,
            temperature=settings.DEFAULT_TEMPERATURE,
            api_key=SecretStr(self.api_key),
            max_retries=self.max_retries,
            timeout=settings.LLM_TIMEOUT
        )

    def _create_ollama_llm(self) -> ChatOllama:
        """Create Ollama chat model instance."""
        return ChatOllama(
            model=self.model,
            temperature=settings.DEFAULT_TEMPERATURE,
            num_ctx=settings.OLLAMA_NUM_CTX,
            keep_alive=settings.OLLAMA_KEEP_ALIVE,
            base_url=settings.OLLAMA_BASE_URL
        )

    def _bind_options(self, options: GenerationOptions):
        """Attach per-call sampling parameters to the model."""
        if self.use_openai:
            params = {
                "temperature": options.temperature,
                "max_tokens": options.max_tokens,
                "top_p": options.top_p,
                "frequency_penalty": options.frequency_penalty,
                "presence_penalty": options.presence_penalty,
            }
            if options.model:
                params["model"] = options.model
            return self.llm.bind(**params)

        # Ollama takes sampling parameters as a single options mapping
        return self.llm.bind(options={
            "temperature": options.temperature,
            "num_predict": options.max_tokens,
            "top_p": options.top_p,
            "frequency_penalty": options.frequency_penalty,
            "presence_penalty": options.presence_penalty,
            "num_ctx": settings.OLLAMA_NUM_CTX,
        })

    @staticmethod
    def to_messages(messages: List[Dict[str, str]]) -> List[BaseMessage]:
        """Convert {role, content} dicts into LangChain messages."""
        converted = []
        for message in messages:
            message_type = _MESSAGE_TYPES.get(message.get("role", "user"))
            if message_type is None:
                raise ValueError(f"Unsupported message role: {message.get('role')}")
            converted.append(message_type(content=message.get("content", "")))
        return converted

    async def generate_completion(
        self,
        messages: List[Dict[str, str]],
        options: Optional[GenerationOptions] = None
    ) -> str:
        """
        Send a chat completion request and return the response text.

        Args:
            messages: List of {"role": ..., "content": ...} dicts
            options: Sampling parameters (defaults to GenerationOptions())

        Returns:
            Non-empty response text

        Raises:
            ServiceUnavailableError: If no model is configured
            GenerationFailedError: If the provider errors or returns no content
        """
        if not self.is_available:
            raise ServiceUnavailableError()

        options = options or GenerationOptions()
        try:
            response = await self._bind_options(options).ainvoke(self.to_messages(messages))
        except Exception as e:
            logger.error(f"Error during LLM invocation: {e}")
            raise GenerationFailedError(
                f"Failed to generate AI response: {e}",
                details={"model": options.model or self.model}
            ) from e

        content = getattr(response, "content", response)
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        if not content or not str(content).strip():
            raise GenerationFailedError("No response from AI service")

        return str(content)

    async def generate_response(self, prompt: str, context: Optional[str] = None) -> str:
        """Single-turn helper used by the assistant features."""
        content = f"Context: {context}\n\nQuestion: {prompt}" if context else prompt
        return await self.generate_completion([{"role": "user", "content": content}])


def create_llm_client(**kwargs) -> LLMClient:
    """Factory function to create an LLM client."""
    return LLMClient(**kwargs)

"""
Unit tests for the chat and embedding clients.
"""
import pytest
from unittest.mock import AsyncMock, Mock
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from review_engine.exceptions import (
    EmbeddingFailedError,
    GenerationFailedError,
    ServiceUnavailableError
)
from review_engine.llm.embeddings import EmbeddingClient
from review_engine.llm.llm_client import LLMClient, create_llm_client
from review_engine.models import GenerationOptions


def make_chat_model(content="A review"):
    """Chat model fake whose bound runnable answers with `content`."""
    bound = Mock()
    bound.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    llm = Mock()
    llm.bind.return_value = bound
    return llm


def test_openai_without_key_is_unavailable():
    client = create_llm_client(use_openai=True, api_key="")

    assert not client.is_available
    assert client.llm is None


@pytest.mark.asyncio
async def test_unavailable_client_raises_service_unavailable():
    client = LLMClient(use_openai=True, api_key="")

    with pytest.raises(ServiceUnavailableError) as exc_info:
        await client.generate_completion([{"role": "user", "content": "hi"}])

    assert exc_info.value.error_code == "AI_SERVICE_UNAVAILABLE"
    assert isinstance(exc_info.value, GenerationFailedError)


@pytest.mark.asyncio
async def test_openai_binds_sampling_parameters():
    llm = make_chat_model()
    client = LLMClient(model="gpt-4", use_openai=True, api_key="sk-test", llm=llm)

    result = await client.generate_completion(
        [{"role": "system", "content": "rules"}, {"role": "user", "content": "go"}],
        GenerationOptions(temperature=0.2, max_tokens=2500, model="gpt-4o")
    )

    assert result == "A review"
    llm.bind.assert_called_once_with(
        temperature=0.2,
        max_tokens=2500,
        top_p=1.0,
        frequency_penalty=0.0,
        presence_penalty=0.0,
        model="gpt-4o"
    )
    messages = llm.bind.return_value.ainvoke.call_args.args[0]
    assert isinstance(messages[0], SystemMessage)
    assert isinstance(messages[1], HumanMessage)


@pytest.mark.asyncio
async def test_ollama_binds_options_mapping():
    llm = make_chat_model()
    client = LLMClient(model="llama3.2", use_openai=False, llm=llm)

    await client.generate_completion([{"role": "user", "content": "go"}])

    options = llm.bind.call_args.kwargs["options"]
    assert options["num_predict"] == 2000
    assert options["temperature"] == 0.7
    assert "num_ctx" in options


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   \n"])
async def test_empty_response_fails(content):
    client = LLMClient(use_openai=False, llm=make_chat_model(content))

    with pytest.raises(GenerationFailedError) as exc_info:
        await client.generate_completion([{"role": "user", "content": "go"}])

    assert exc_info.value.message == "No response from AI service"


@pytest.mark.asyncio
async def test_provider_error_is_wrapped():
    llm = make_chat_model()
    llm.bind.return_value.ainvoke.side_effect = RuntimeError("rate limited")
    client = LLMClient(model="gpt-4", use_openai=True, api_key="sk-test", llm=llm)

    with pytest.raises(GenerationFailedError) as exc_info:
        await client.generate_completion([{"role": "user", "content": "go"}])

    assert "rate limited" in exc_info.value.message
    assert exc_info.value.details == {"model": "gpt-4"}


@pytest.mark.asyncio
async def test_generate_response_prefixes_context():
    llm = make_chat_model("Answer")
    client = LLMClient(use_openai=False, llm=llm)

    assert await client.generate_response("Summarize", "[1, 2]") == "Answer"

    message = llm.bind.return_value.ainvoke.call_args.args[0][0]
    assert message.content == "Context: [1, 2]\n\nQuestion: Summarize"


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        LLMClient.to_messages([{"role": "tool", "content": "x"}])


def make_embedding_model(query=None, documents=None):
    embeddings = Mock()
    embeddings.aembed_query = AsyncMock(return_value=query)
    embeddings.aembed_documents = AsyncMock(return_value=documents)
    return embeddings


@pytest.mark.asyncio
async def test_embedding_without_key_raises_service_unavailable():
    client = EmbeddingClient(use_openai=True, api_key="")

    with pytest.raises(ServiceUnavailableError):
        await client.generate_embedding("text")


@pytest.mark.asyncio
async def test_generate_embedding():
    client = EmbeddingClient(use_openai=False, embeddings=make_embedding_model(query=[0.1, 0.2]))

    assert await client.generate_embedding("text") == [0.1, 0.2]


@pytest.mark.asyncio
async def test_embedding_provider_error():
    model = make_embedding_model()
    model.aembed_query.side_effect = RuntimeError("quota exceeded")
    client = EmbeddingClient(use_openai=False, embeddings=model)

    with pytest.raises(EmbeddingFailedError) as exc_info:
        await client.generate_embedding("text")

    assert exc_info.value.error_code == "EMBEDDING_FAILED"


@pytest.mark.asyncio
async def test_empty_embedding_fails():
    client = EmbeddingClient(use_openai=False, embeddings=make_embedding_model(query=[]))

    with pytest.raises(EmbeddingFailedError):
        await client.generate_embedding("text")


@pytest.mark.asyncio
async def test_batch_count_mismatch_fails():
    model = make_embedding_model(documents=[[0.1, 0.2]])
    client = EmbeddingClient(use_openai=False, embeddings=model)

    with pytest.raises(EmbeddingFailedError) as exc_info:
        await client.generate_batch_embeddings(["a", "b"])

    assert exc_info.value.details == {"requested": 2, "received": 1}


@pytest.mark.asyncio
async def test_batch_of_nothing_skips_provider():
    model = make_embedding_model()
    client = EmbeddingClient(use_openai=False, embeddings=model)

    assert await client.generate_batch_embeddings([]) == []
    model.aembed_documents.assert_not_called()


def test_zero_retries_is_kept():
    client = LLMClient(use_openai=False, max_retries=0, llm=make_chat_model())

    assert client.max_retries == 0

import json

import httpx
import pytest

from contentgen.llm.errors import ProviderError
from contentgen.llm.gemini_client import SAFETY_SETTINGS, GeminiLLM
from contentgen.llm.groq_client import GroqLLM
from contentgen.llm.rapidapi_client import RapidAPILLM

GOOD_JSON = json.dumps(
    {"title": "Tip", "body": "Drink water every morning.", "tags": ["health"], "mediaUrl": ""}
)


# ----------------------------------------------------------------------
# groq
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_groq_request_shape_and_parse(mock_http, chat_completion, settings):
    client = mock_http(lambda req: httpx.Response(200, json=chat_completion(GOOD_JSON)))
    llm = GroqLLM("gsk-secret", client)

    result = await llm.generate("Write a tip", settings(ai_temperature=40))

    assert result.source == "json"
    assert result.record["title"] == "Tip"

    (req,) = client.seen
    assert str(req.url) == "https://api.groq.com/openai/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer gsk-secret"
    sent = json.loads(req.content)
    assert sent["model"] == "llama3-8b-8192"
    assert sent["temperature"] == pytest.approx(0.4)
    assert sent["max_tokens"] == 1500
    assert sent["messages"][0]["role"] == "system"
    assert "casual tone" in sent["messages"][0]["content"]
    assert "50% creativity level" in sent["messages"][0]["content"]
    assert "target audience: general" in sent["messages"][0]["content"]
    assert '"mediaUrl": "string"' in sent["messages"][0]["content"]
    assert sent["messages"][1] == {"role": "user", "content": "Write a tip"}


@pytest.mark.asyncio
async def test_groq_default_temperature(mock_http, chat_completion, settings):
    client = mock_http(lambda req: httpx.Response(200, json=chat_completion(GOOD_JSON)))

    await GroqLLM("k", client).generate("p", settings(ai_temperature=None))

    assert json.loads(client.seen[0].content)["temperature"] == pytest.approx(0.7)


@pytest.mark.asyncio
async def test_groq_error_embeds_provider_message(mock_http, settings):
    client = mock_http(
        lambda req: httpx.Response(401, json={"error": {"message": "Invalid API Key"}})
    )

    with pytest.raises(ProviderError, match="^Groq API error: Invalid API Key$"):
        await GroqLLM("bad", client).generate("p", settings())

    # SDK retries are off; one request only
    assert len(client.seen) == 1


@pytest.mark.asyncio
async def test_groq_unparseable_error_uses_generic_message(mock_http, settings):
    client = mock_http(lambda req: httpx.Response(503, text="<html>down</html>"))

    with pytest.raises(ProviderError, match="^Groq API error: API request failed$"):
        await GroqLLM("k", client).generate("p", settings())


@pytest.mark.asyncio
async def test_groq_empty_content(mock_http, chat_completion, settings):
    client = mock_http(lambda req: httpx.Response(200, json=chat_completion("")))

    with pytest.raises(ProviderError, match="Groq API returned no content"):
        await GroqLLM("k", client).generate("p", settings())


# ----------------------------------------------------------------------
# gemini
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_gemini_request_shape_and_safety(mock_http, gemini_body, settings):
    client = mock_http(lambda req: httpx.Response(200, json=gemini_body(GOOD_JSON)))

    result = await GeminiLLM("AIza-secret", client).generate("Write a tip", settings())

    assert result.record["body"] == "Drink water every morning."
    (req,) = client.seen
    assert req.url.host == "generativelanguage.googleapis.com"
    assert "/models/gemini-2.0-flash-exp" in req.url.path
    assert req.url.path.endswith("generateContent")
    assert req.url.params["key"] == "AIza-secret"
    sent = json.loads(req.content)
    text = sent["contents"][0]["parts"][0]["text"]
    assert text.startswith("Write a tip\n\n")
    assert "50% creativity," in text
    assert sent["generationConfig"] == {
        "temperature": pytest.approx(0.7),
        "maxOutputTokens": 1500,
        "topP": 0.8,
        "topK": 40,
    }
    assert sent["safetySettings"] == SAFETY_SETTINGS
    assert {s["category"] for s in SAFETY_SETTINGS} == {
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
    }
    assert all(s["threshold"] == "BLOCK_MEDIUM_AND_ABOVE" for s in SAFETY_SETTINGS)


@pytest.mark.asyncio
async def test_gemini_error_message(mock_http, settings):
    client = mock_http(
        lambda req: httpx.Response(400, json={"error": {"message": "API key not valid"}})
    )

    with pytest.raises(ProviderError, match="^Gemini API error: API key not valid$"):
        await GeminiLLM("k", client).generate("p", settings())


@pytest.mark.asyncio
async def test_gemini_no_candidates(mock_http, settings):
    client = mock_http(lambda req: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(ProviderError, match="Gemini API returned no content"):
        await GeminiLLM("k", client).generate("p", settings())


@pytest.mark.asyncio
async def test_gemini_transport_error_does_not_leak_key(mock_http, settings):
    def handler(req):
        raise httpx.ConnectError("connection refused", request=req)

    client = mock_http(handler)

    with pytest.raises(ProviderError) as exc_info:
        await GeminiLLM("AIza-secret", client).generate("p", settings())

    assert "AIza-secret" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_gemini_prose_wrapped_json(mock_http, gemini_body, settings):
    client = mock_http(
        lambda req: httpx.Response(200, json=gemini_body(f"Here you go:\n{GOOD_JSON}\nThanks"))
    )

    result = await GeminiLLM("k", client).generate("p", settings())

    assert result.source == "embedded"
    assert result.record["title"] == "Tip"


# ----------------------------------------------------------------------
# rapidapi
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_rapidapi_request_shape(mock_http, settings):
    client = mock_http(
        lambda req: httpx.Response(200, json={"status": True, "result": GOOD_JSON})
    )

    result = await RapidAPILLM("rapid-secret", client).generate("Write a tip", settings())

    assert result.record["tags"] == ["health"]
    (req,) = client.seen
    assert str(req.url) == "https://chatgpt-42.p.rapidapi.com/gpt4"
    assert req.headers["x-rapidapi-key"] == "rapid-secret"
    assert req.headers["x-rapidapi-host"] == "chatgpt-42.p.rapidapi.com"
    sent = json.loads(req.content)
    assert sent["web_access"] is False
    assert sent["messages"][0]["role"] == "user"
    assert sent["messages"][0]["content"].startswith("Write a tip\n\n")


@pytest.mark.asyncio
async def test_rapidapi_error_message(mock_http, settings):
    client = mock_http(lambda req: httpx.Response(429, json={"message": "quota exceeded"}))

    with pytest.raises(ProviderError, match="^RapidAPI error: quota exceeded$"):
        await RapidAPILLM("k", client).generate("p", settings())


@pytest.mark.asyncio
async def test_rapidapi_error_without_body(mock_http, settings):
    client = mock_http(lambda req: httpx.Response(500))

    with pytest.raises(ProviderError, match="^RapidAPI error: API request failed$"):
        await RapidAPILLM("k", client).generate("p", settings())


@pytest.mark.parametrize(
    "body",
    [{"status": False, "result": GOOD_JSON}, {"status": True}, {"status": True, "result": ""}],
)
@pytest.mark.asyncio
async def test_rapidapi_invalid_response(mock_http, settings, body):
    client = mock_http(lambda req: httpx.Response(200, json=body))

    with pytest.raises(ProviderError, match="Invalid response from RapidAPI"):
        await RapidAPILLM("k", client).generate("p", settings())


@pytest.mark.asyncio
async def test_rapidapi_sends_no_output_cap(mock_http, settings):
    from contentgen.llm import gemini_client, groq_client, rapidapi_client

    client = mock_http(
        lambda req: httpx.Response(200, json={"status": True, "result": GOOD_JSON})
    )

    await RapidAPILLM("k", client).generate("p", settings())

    assert rapidapi_client.DEFAULT_CONFIG.max_output_tokens is None
    assert groq_client.DEFAULT_CONFIG.max_output_tokens == 1500
    assert gemini_client.DEFAULT_CONFIG.max_output_tokens == 1500
    assert set(json.loads(client.seen[0].content)) == {"messages", "web_access"}

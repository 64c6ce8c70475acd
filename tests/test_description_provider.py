"""Vertex AI 설명 생성 클라이언트 테스트 (httpx.MockTransport)"""
import json

import httpx
import pytest

from domain.exceptions import ConfigurationError, InvalidInputError, ProviderError
from infrastructure.ai.vertex_description_provider import (
    VertexDescriptionProvider, build_prompt, extract_text, parse_description_results,
)


def gemini_response(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_provider(handler, **kwargs):
    options = dict(api_key="test-key", project_id="demo-project", location="asia-northeast3",
                   model="gemini-1.5-flash", transport=httpx.MockTransport(handler))
    options.update(kwargs)
    return VertexDescriptionProvider(**options)


class TestResponseParsing:
    def test_prompt_joins_names(self):
        prompt = build_prompt(["신라면", "초코파이"])
        assert "신라면 | 초코파이" in prompt
        assert '[{"name": "...", "description": "..."}]' in prompt

    def test_extract_text_fallbacks(self):
        assert extract_text(gemini_response("[]")) == "[]"
        assert extract_text({"candidates": [{"output_text": "a"}]}) == "a"
        assert extract_text({"candidates": [{"text": "b"}]}) == "b"
        assert extract_text({"candidates": []}) is None
        assert extract_text({"candidates": [{"content": {"parts": []}}]}) is None
        assert extract_text(None) is None

    def test_parse_results(self):
        results = parse_description_results('[{"name": "a", "description": "A"}]')
        assert [(r.name, r.description) for r in results] == [("a", "A")]

    @pytest.mark.parametrize("text, code", [
        ("not json", ProviderError.INVALID_JSON),
        ('{"name": "a"}', ProviderError.INVALID_FORMAT),
        ('["a"]', ProviderError.INVALID_FORMAT),
        ('[{"name": "a"}]', ProviderError.INVALID_FORMAT),
    ])
    def test_parse_invalid(self, text, code):
        with pytest.raises(ProviderError) as exc_info:
            parse_description_results(text)
        assert exc_info.value.code == code


class TestVertexDescriptionProvider:
    @pytest.mark.asyncio
    async def test_request_and_results(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=gemini_response(json.dumps([
                {"name": "신라면", "description": "매콤한 라면"},
                {"name": "초코파이", "description": "달콤한 파이"},
            ], ensure_ascii=False)))

        results = await make_provider(handler).get_descriptions(["신라면", "초코파이"])

        assert [r.description for r in results] == ["매콤한 라면", "달콤한 파이"]
        request = seen[0]
        assert request.method == "POST"
        assert request.url.host == "asia-northeast3-aiplatform.googleapis.com"
        assert request.url.path == ("/v1/projects/demo-project/locations/asia-northeast3"
                                    "/publishers/google/models/gemini-1.5-flash:generateContent")
        assert request.url.params["key"] == "test-key"
        body = json.loads(request.content)
        assert body["generationConfig"] == {"responseMimeType": "application/json"}
        assert "신라면 | 초코파이" in body["contents"][0]["parts"][0]["text"]

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("요청이 전송되면 안 된다")

        with pytest.raises(ConfigurationError):
            await make_provider(handler, api_key="").get_descriptions(["a"])
        with pytest.raises(ConfigurationError):
            await make_provider(handler, project_id="").get_descriptions(["a"])

    @pytest.mark.asyncio
    async def test_empty_names(self):
        with pytest.raises(InvalidInputError):
            await make_provider(lambda request: httpx.Response(200)).get_descriptions([])

    @pytest.mark.asyncio
    async def test_http_error_carries_status(self):
        provider = make_provider(lambda request: httpx.Response(500, text="internal"))
        with pytest.raises(ProviderError) as exc_info:
            await provider.get_descriptions(["a"])
        assert exc_info.value.code == "HTTP_500"
        assert "500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(ProviderError) as exc_info:
            await provider.get_descriptions(["a"])
        assert exc_info.value.code == ProviderError.NO_RESPONSE

    @pytest.mark.asyncio
    async def test_body_not_json(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderError) as exc_info:
            await provider.get_descriptions(["a"])
        assert exc_info.value.code == ProviderError.INVALID_JSON

    @pytest.mark.asyncio
    async def test_model_text_wrong_shape(self):
        provider = make_provider(lambda request: httpx.Response(200, json=gemini_response('{"a": 1}')))
        with pytest.raises(ProviderError) as exc_info:
            await provider.get_descriptions(["a"])
        assert exc_info.value.code == ProviderError.INVALID_FORMAT

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderError) as exc_info:
            await make_provider(handler).get_descriptions(["a"])
        assert exc_info.value.code == ProviderError.TIMEOUT

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(ProviderError) as exc_info:
            await make_provider(handler).get_descriptions(["a"])
        assert exc_info.value.code == ProviderError.NETWORK_ERROR

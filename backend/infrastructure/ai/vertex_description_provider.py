"""Vertex AI (Gemini) 상품 설명 생성 클라이언트"""
import json
from typing import Any, List, Optional

import httpx
from loguru import logger

from config import settings
from domain.entities.description import DescriptionResult
from domain.exceptions import ConfigurationError, InvalidInputError, ProviderError
from application.ports.description_provider import DescriptionProviderPort

PROMPT_TEMPLATE = """당신은 마트 상품 콘텐츠 관리 전문가입니다.
임무: 아래 상품들의 상세 설명을 작성하되, 반드시 다음 구조를 그대로 따르세요.

[도입 문단: 3-4문장으로 상품의 맛, 특징, 사용 경험을 매력적으로 소개]

- 성분: [상품명으로 가장 합리적인 성분을 추론하여 구체적으로 나열]

- 원산지: [브랜드로 국가를 추론, 국내 상품이면 대한민국]

- 사용 방법: [예: 개봉 후 바로 섭취, 조리 후 섭취 등]

- 보관 방법: [예: 직사광선을 피해 서늘하고 건조한 곳에 보관]

- 안전 주의사항: [예: 유통기한이 지나거나 변질된 경우 섭취 금지, 알레르기 주의]

[마무리: 1-2문장으로 품질을 강조하고 자연스럽게 구매를 권유]

기술 요구사항:
1. 필수: 각 결과의 "name" 필드에는 입력 상품명을 글자 하나 바꾸지 말고 그대로 넣으세요.
2. 입력 순서와 개수에 맞춰 결과를 반환하세요.
3. 각 항목 앞의 하이픈(-)을 유지하고, 별표(**)는 절대 사용하지 마세요.
4. [{{"name": "...", "description": "..."}}] 형식의 JSON 배열만 반환하세요.

설명을 작성할 상품 목록: {names}"""


def build_prompt(names: List[str]) -> str:
    return PROMPT_TEMPLATE.format(names=" | ".join(names))


def extract_text(payload: Any) -> Optional[str]:
    """generateContent 응답에서 모델 텍스트 추출"""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    candidate = candidates[0]
    try:
        text = candidate["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    text = text or candidate.get("output_text") or candidate.get("text")
    return text if isinstance(text, str) and text.strip() else None


def parse_description_results(text: str) -> List[DescriptionResult]:
    """모델 텍스트를 [{name, description}] 배열로 검증/변환"""
    try:
        data = json.loads(text.strip())
    except ValueError as e:
        raise ProviderError("AI 응답을 JSON으로 해석할 수 없습니다.", ProviderError.INVALID_JSON) from e

    if not isinstance(data, list):
        raise ProviderError("AI가 올바르지 않은 형식을 반환했습니다.", ProviderError.INVALID_FORMAT)

    results = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ProviderError(f"AI 응답 {index}번 항목이 객체가 아닙니다.", ProviderError.INVALID_FORMAT)
        name = item.get("name")
        description = item.get("description")
        if not isinstance(name, str) or not isinstance(description, str):
            raise ProviderError(f"AI 응답 {index}번 항목에 name/description 문자열이 없습니다.",
                                ProviderError.INVALID_FORMAT)
        results.append(DescriptionResult(name=name, description=description))
    return results


class VertexDescriptionProvider(DescriptionProviderPort):
    """
    상품명 목록을 하나의 프롬프트로 묶어 Gemini generateContent를 한 번 호출한다.
    재시도는 하지 않는다 (호출자 책임).
    """

    def __init__(self, api_key: Optional[str] = None, project_id: Optional[str] = None,
                 location: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key if api_key is not None else settings.VERTEX_AI_API_KEY
        self.project_id = project_id if project_id is not None else settings.VERTEX_AI_PROJECT_ID
        self.location = location if location is not None else settings.VERTEX_AI_LOCATION
        self.model = model or settings.VERTEX_AI_MODEL
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT
        self._transport = transport

    def _endpoint(self) -> str:
        return (f"https://{self.location}-aiplatform.googleapis.com/v1/projects/"
                f"{self.project_id}/locations/{self.location}"
                f"/publishers/google/models/{self.model}:generateContent")

    def _check_config(self) -> None:
        if not self.api_key:
            raise ConfigurationError("VERTEX_AI_API_KEY가 설정되지 않았습니다.")
        if not self.project_id or not self.location:
            raise ConfigurationError("VERTEX_AI_PROJECT_ID 또는 VERTEX_AI_LOCATION이 설정되지 않았습니다.")

    async def get_descriptions(self, names: List[str]) -> List[DescriptionResult]:
        self._check_config()
        if not names:
            raise InvalidInputError()

        body = {
            "contents": [{"parts": [{"text": build_prompt(names)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self._endpoint(), params={"key": self.api_key}, json=body)
        except httpx.TimeoutException as e:
            logger.error(f"Vertex AI 시간 초과 ({self.timeout}초): {len(names)}건")
            raise ProviderError("AI 응답 시간이 초과되었습니다.", ProviderError.TIMEOUT) from e
        except httpx.RequestError as e:
            logger.error(f"Vertex AI 연결 실패: {e}")
            raise ProviderError(f"AI 서버에 연결할 수 없습니다: {e}", ProviderError.NETWORK_ERROR) from e

        if not response.is_success:
            logger.error(f"Vertex AI 요청 실패: HTTP {response.status_code} - {response.text[:200]}")
            raise ProviderError(
                f"Vertex AI 요청 실패 (status {response.status_code}): {response.text[:500]}",
                ProviderError.http_code(response.status_code),
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError("Vertex AI 응답이 JSON이 아닙니다.", ProviderError.INVALID_JSON) from e

        text = extract_text(payload)
        if text is None:
            raise ProviderError("AI가 데이터를 반환하지 않았습니다.", ProviderError.NO_RESPONSE)

        results = parse_description_results(text)
        logger.debug(f"Vertex AI 설명 생성: 요청 {len(names)}건, 응답 {len(results)}건")
        return results

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import requests

from .config import EngineConfig
from .errors import RequestFailure
from .logger import setup_logger
from .types import GenerationResult, GroundingSource

logger = setup_logger(__name__)

Document = Tuple[str, str]  # (mime_type, base64_data)


def user_turn(text: str, documents: Optional[Sequence[Document]] = None) -> Dict[str, object]:
    parts: List[Dict[str, object]] = []
    for mime_type, data in documents or []:
        parts.append({"inlineData": {"mimeType": mime_type, "data": data}})
    parts.append({"text": text})
    return {"role": "user", "parts": parts}


def model_turn(text: str) -> Dict[str, object]:
    return {"role": "model", "parts": [{"text": text}]}


def _candidate_text(candidate: Dict[str, object]) -> str:
    content = candidate.get("content") or {}
    parts = (content.get("parts") or []) if isinstance(content, dict) else []
    chunks: List[str] = []
    for part in parts:
        if not isinstance(part, dict) or part.get("thought"):
            continue
        txt = part.get("text")
        if isinstance(txt, str):
            chunks.append(txt)
    return "".join(chunks)


def _candidate_sources(candidate: Dict[str, object]) -> List[GroundingSource]:
    meta = candidate.get("groundingMetadata") or {}
    chunks = (meta.get("groundingChunks") or []) if isinstance(meta, dict) else []
    out: List[GroundingSource] = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not isinstance(web, dict):
            continue
        out.append(
            GroundingSource(
                title=str(web.get("title") or "Unknown Source"),
                uri=str(web.get("uri") or "#"),
            )
        )
    return out


def parse_generation(data: Dict[str, object]) -> GenerationResult:
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        feedback = data.get("promptFeedback") or {}
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            logger.warning("Prompt blocked by the API: %s", feedback.get("blockReason"))
        return GenerationResult(text="")
    first = candidates[0]
    return GenerationResult(
        text=_candidate_text(first),
        sources=_candidate_sources(first),
        finish_reason=str(first.get("finishReason") or ""),
    )


class GenAIClient:
    """Thin wrapper over the Gemini REST endpoints.

    One instance per browser session, kept in ``st.session_state`` and released
    with it; the wrapped ``requests.Session`` is only there for connection reuse.
    The API key travels in the ``x-goog-api-key`` header, never in the URL.
    Every failure surfaces as ``RequestFailure``.
    """

    def __init__(self, config: EngineConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def _post(self, url: str, body: Dict[str, object], timeout: Optional[float] = None) -> Dict[str, object]:
        if not self.config.api_key:
            raise RequestFailure("API key is not configured")
        try:
            resp = self.session.post(
                url,
                headers={"x-goog-api-key": self.config.api_key},
                json=body,
                timeout=timeout or self.config.request_timeout,
            )
        except requests.RequestException as exc:
            raise RequestFailure(f"Request to generative API failed: {exc}") from exc

        if resp.status_code >= 400:
            detail = (resp.text or "")[:400]
            raise RequestFailure(f"Generative API returned HTTP {resp.status_code}: {detail}", status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise RequestFailure("Generative API returned a non-JSON body", status_code=resp.status_code) from exc
        if not isinstance(data, dict):
            raise RequestFailure("Generative API returned an unexpected body", status_code=resp.status_code)
        return data

    def build_request(
        self,
        prompt: str,
        system: Optional[str] = None,
        json_mode: bool = False,
        grounded: bool = False,
        thinking: bool = False,
        documents: Optional[Sequence[Document]] = None,
        history: Optional[Sequence[Dict[str, object]]] = None,
    ) -> Dict[str, object]:
        contents = list(history or [])
        contents.append(user_turn(prompt, documents))
        body: Dict[str, object] = {"contents": contents}
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if grounded:
            body["tools"] = [{"google_search": {}}]
        generation_config: Dict[str, object] = {}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        if thinking and self.config.thinking_budget > 0:
            generation_config["thinkingConfig"] = {"thinkingBudget": int(self.config.thinking_budget)}
        if generation_config:
            body["generationConfig"] = generation_config
        return body

    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        json_mode: bool = False,
        grounded: bool = False,
        thinking: bool = False,
        documents: Optional[Sequence[Document]] = None,
        history: Optional[Sequence[Dict[str, object]]] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        model_name = model or self.config.reasoning_model
        body = self.build_request(
            prompt,
            system=system,
            json_mode=json_mode,
            grounded=grounded,
            thinking=thinking,
            documents=documents,
            history=history,
        )
        url = f"{self.config.api_base}/models/{model_name}:generateContent"
        logger.info(
            "generateContent model=%s json=%s grounded=%s docs=%d turns=%d",
            model_name,
            json_mode,
            grounded,
            len(documents or []),
            len(body["contents"]),
        )
        result = parse_generation(self._post(url, body, timeout=timeout))
        logger.debug("generateContent finish=%s chars=%d sources=%d", result.finish_reason, len(result.text), len(result.sources))
        return result

    def generate_image(
        self,
        prompt: str,
        model: Optional[str] = None,
        aspect_ratio: str = "4:3",
        timeout: Optional[float] = None,
    ) -> str:
        """Return a ``data:`` URI for the first generated image, or ``""`` when none came back."""
        model_name = model or self.config.image_model
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
                "outputMimeType": "image/jpeg",
            },
        }
        url = f"{self.config.api_base}/models/{model_name}:predict"
        logger.info("predict model=%s aspect=%s", model_name, aspect_ratio)
        data = self._post(url, body, timeout=timeout)
        predictions = data.get("predictions") or []
        if not predictions or not isinstance(predictions[0], dict):
            logger.warning("Image generation returned no predictions")
            return ""
        b64 = str(predictions[0].get("bytesBase64Encoded") or "")
        if not b64:
            return ""
        mime = str(predictions[0].get("mimeType") or "image/jpeg")
        return f"data:{mime};base64,{b64}"

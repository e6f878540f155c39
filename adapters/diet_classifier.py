"""Classifier adapter: asks a chat model which dishes conflict with a client profile.
"""

from typing import Any, List, Optional, Protocol, Sequence
import json
import logging
import re

from openai import APIStatusError, OpenAI, OpenAIError
from pydantic import ValidationError

from app.config import Settings, settings as default_settings
from app.exceptions import DietAuditError, ServiceValidationError, UpstreamAPIError
from domain.schemas import AuditResult, ClientProfile, EnrichedDish
from adapters.audit_prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger("dietaudit.classifier")

CLASSIFIER_ENDPOINT = "chat.completions"


class DietClassifier(Protocol):
    def classify(self, profile: ClientProfile, dishes: Sequence[EnrichedDish]) -> AuditResult:
        ...


def parse_audit_result(raw: Optional[str]) -> AuditResult:
    """
    Parse model output into AuditResult.

    Tolerates code fences, surrounding prose, and a bare array in place of
    the {"conflicts": [...]} object.

    Raises:
        ServiceValidationError: when no JSON can be found or it has the wrong shape
    """
    cleaned = (raw or "").strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned)
        cleaned = re.sub(r"\s*```$", "", cleaned)

    try:
        payload: Any = json.loads(cleaned)
    except ValueError:
        block = re.search(r"\{[\s\S]*\}|\[[\s\S]*\]", cleaned)
        if not block:
            raise ServiceValidationError(
                "Classifier did not return JSON", field="conflicts"
            )
        try:
            payload = json.loads(block.group(0))
        except ValueError as exc:
            raise ServiceValidationError(
                "Classifier returned malformed JSON", field="conflicts"
            ) from exc

    if isinstance(payload, list):
        payload = {"conflicts": payload}
    if not isinstance(payload, dict) or "conflicts" not in payload:
        raise ServiceValidationError(
            "Classifier reply has no conflicts list", field="conflicts"
        )

    try:
        return AuditResult.model_validate(payload)
    except ValidationError as exc:
        errors = exc.errors()
        loc = ".".join(str(p) for p in errors[0]["loc"]) if errors else "conflicts"
        raise ServiceValidationError(
            f"Classifier reply failed validation at {loc}", field=loc or "conflicts"
        ) from exc


class OpenAIDietClassifier:
    """Chat-completions classifier (OpenAI, or Gemini through its OpenAI-compatible API)."""

    def __init__(self, config: Optional[Settings] = None, client: Optional[OpenAI] = None):
        self.config = config or default_settings
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            api_key, base_url = self.config.classifier_credentials()
            if not api_key:
                raise DietAuditError(
                    f"No API key configured for AI provider '{self.config.ai_provider.value}'"
                )
            self._client = OpenAI(api_key=api_key, base_url=base_url)
        return self._client

    def classify(self, profile: ClientProfile, dishes: Sequence[EnrichedDish]) -> AuditResult:
        """Run one classification call for all dishes of an audit.

        Raises:
            UpstreamAPIError: the provider rejected the call or could not be reached
            ServiceValidationError: the reply does not match AuditResult
        """
        messages: List[dict] = [
            {"role": "system", "content": build_system_prompt(profile)},
            {"role": "user", "content": build_user_prompt(dishes)},
        ]
        logger.debug(f"System prompt:\n{messages[0]['content']}")
        logger.debug(f"User prompt:\n{messages[1]['content']}")

        try:
            completion = self.client.chat.completions.create(
                model=self.config.ai_model,
                temperature=self.config.ai_temperature,
                response_format={"type": "json_object"},
                messages=messages,
            )
        except APIStatusError as exc:
            logger.error(f"Classifier call rejected with {exc.status_code}: {exc}")
            raise UpstreamAPIError(
                f"Classifier request failed: {exc.message}",
                exc.status_code,
                CLASSIFIER_ENDPOINT,
            ) from exc
        except OpenAIError as exc:
            logger.error(f"Classifier call failed: {exc}")
            raise UpstreamAPIError(
                f"Classifier request failed: {exc}", 0, CLASSIFIER_ENDPOINT
            ) from exc

        content = completion.choices[0].message.content if completion.choices else None
        result = parse_audit_result(content)
        logger.info(f"Classifier flagged {len(result.conflicts)} conflicts")
        return result

"""
Client profile mappers.
Handles transformation of loosely shaped upstream client payloads into ClientProfile.
"""

import json
import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from app.exceptions import ServiceValidationError
from domain.enums import DietPreference
from domain.schemas.client_schemas import ClientProfile

logger = logging.getLogger("dietaudit.mappers.client")

SAFETY_FIELDS = ("allergies", "medical_conditions", "food_aversions")


def _first(raw: Mapping[str, Any], keys: Iterable[str], default: Any = None) -> Any:
    """Return the first truthy value among ``keys``"""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return default


def parse_list_field(value: Any, field: str) -> list[str]:
    """
    Coerce an upstream list-ish value into a list of strings.

    Accepts arrays (objects are reduced through name/label/value),
    comma-separated strings and single scalars. Anything else (for example a
    nested mapping) is rejected rather than defaulted, because these lists
    decide what gets flagged.
    """
    if value is None or value == "" or value == []:
        return []

    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if isinstance(item, str):
                items.append(item.strip())
            elif isinstance(item, Mapping):
                picked = item.get("name") or item.get("label") or item.get("value")
                items.append(str(picked if picked else json.dumps(item)).strip())
            elif item is not None:
                items.append(str(item).strip())
        return [i for i in items if i]

    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return [str(value)]

    raise ServiceValidationError(
        f"Client profile field '{field}' has unsupported type {type(value).__name__}",
        field=field,
    )


def parse_diet_preference(raw: Optional[Any]) -> DietPreference:
    """Normalize free-text eating habits; unknown or missing values mean Veg"""
    text = str(raw or "").lower().strip()
    if "non" in text:
        return DietPreference.NON_VEG
    if "egg" in text:
        return DietPreference.EGGETARIAN
    if "vegan" in text:
        return DietPreference.VEGAN
    return DietPreference.VEG


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0


def unwrap_client_payload(response: Any) -> Optional[Mapping[str, Any]]:
    """Drill through the envelopes the client endpoint has been seen to use"""
    if isinstance(response, list):
        raw = response[0] if response else None
    elif isinstance(response, Mapping):
        data = response.get("data")
        if isinstance(data, list):
            raw = data[0] if data else None
        else:
            raw = data or response
    else:
        raw = None

    if not isinstance(raw, Mapping):
        return None

    extra_weight = raw.get("weight") if isinstance(raw.get("weight"), Mapping) else {}
    extra_program = (
        raw.get("program_details") if isinstance(raw.get("program_details"), Mapping) else {}
    )

    if isinstance(raw.get("client"), Mapping):
        raw = raw["client"]
    if isinstance(raw.get("client_details"), Mapping):
        raw = {**raw["client_details"], **extra_weight, **extra_program}
    if isinstance(raw.get("result"), Mapping):
        raw = raw["result"]

    return raw or None


class ClientMapper:
    """Mapper for client profile payloads."""

    @staticmethod
    def to_profile(raw: Mapping[str, Any], user_id: str = "") -> ClientProfile:
        """
        Map an upstream client record onto ClientProfile.

        Field naming varies between upstream deployments, so every field is
        looked up under several names. Restriction lists go through
        parse_list_field, which raises instead of guessing.

        Raises:
            ServiceValidationError: when the mapped record fails validation
        """
        name = str(raw.get("name") or "")
        first_name = raw.get("first_name") or raw.get("firstName") or (name.split(" ")[0] if name else "")
        last_name = raw.get("last_name") or raw.get("lastName") or " ".join(name.split(" ")[1:])

        mapped = {
            "user_id": str(raw.get("user_id") or raw.get("userId") or raw.get("id") or user_id),
            "first_name": first_name,
            "last_name": last_name,
            "email": raw.get("email") or raw.get("emailAddress") or "",
            "mobile_number": str(raw.get("mobile_number") or raw.get("mobileNumber") or raw.get("phone") or ""),
            "age": int(_number(raw.get("age"))),
            "gender": raw.get("gender") or "Unknown",
            "allergies": parse_list_field(
                _first(raw, ("allergies", "allergy_list", "allergy")), "allergies"
            ),
            "medical_conditions": parse_list_field(
                _first(
                    raw,
                    (
                        "medical_issues",
                        "medical_conditions",
                        "medicalIssues",
                        "conditions",
                        "medical_history",
                    ),
                ),
                "medical_conditions",
            ),
            "food_aversions": parse_list_field(
                _first(raw, ("aversions", "food_aversions", "foodAversions", "dislikes")),
                "food_aversions",
            ),
            "diet_preference": parse_diet_preference(
                _first(
                    raw,
                    (
                        "eating_habit",
                        "food_preference",
                        "diet_preference",
                        "foodPreference",
                        "diet_type",
                        "preference",
                        "diet",
                        "food_type",
                    ),
                )
            ),
            "current_weight": _number(raw.get("current_weight") or raw.get("currentWeight")),
            "target_weight": _number(
                raw.get("target_weight") or raw.get("targetWeight") or raw.get("weight_goal")
            ),
            "program_start_weight": _number(
                raw.get("program_start_weight") or raw.get("programStartWeight")
            ),
            "assessment_start_weight": _number(
                raw.get("assessment_start_weight") or raw.get("assessmentStartWeight")
            ),
        }

        try:
            return ClientProfile.model_validate(mapped)
        except ValidationError as exc:
            first_error = exc.errors()[0] if exc.errors() else {}
            field = ".".join(str(p) for p in first_error.get("loc", ())) or "client_profile"
            logger.error(f"Client profile validation failed on {field}: {exc}")
            raise ServiceValidationError(
                f"Client profile validation failed: {first_error.get('msg', 'invalid payload')}",
                field=field,
            ) from exc

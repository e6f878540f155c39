"""Audit service - orchestrates one diet-plan safety audit end to end."""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Protocol, Sequence

from adapters.diet_classifier import DietClassifier
from app.exceptions import DietAuditError, ServiceValidationError, UpstreamAPIError
from domain.enums import AuditErrorCode
from domain.schemas import (
    AuditRequest,
    AuditResponse,
    AuditResult,
    ClientProfile,
    HighlightRecord,
    UpdatedSection,
)
from services.base_service import BaseService
from services.dish_extractor import extract_dishes, unique_short_names
from services.enrichment_service import EnrichmentService
from services.highlight_injector import highlight_slots
from services.pattern_builder import is_usable


class ProfileSource(Protocol):
    def fetch_client_profile(self, user_id: str) -> ClientProfile:
        ...


class AuditService(BaseService):
    """
    Runs the audit pipeline for one request.

    Steps:
    1. Extract dish entries from every meal slot
    2. Fetch the client profile and enrich dish names, concurrently
    3. One classifier call with the dish names and known ingredients
    4. Highlight flagged dishes inside a copy of each slot's markup

    The extraction and highlighting steps hold no shared state; the only
    shared object is the enrichment cache, which is lock-guarded.
    """

    def __init__(
        self,
        profiles: ProfileSource,
        classifier: DietClassifier,
        enrichment: EnrichmentService,
    ):
        super().__init__("dietaudit.audit")
        self.profiles = profiles
        self.classifier = classifier
        self.enrichment = enrichment

    def run_audit(self, request: AuditRequest) -> AuditResponse:
        """
        Audit a diet plan and return a structured result.

        Never raises: upstream failures map to API_ERROR, payload shape
        failures to VALIDATION_ERROR and anything else to INTERNAL_ERROR,
        with no partial result attached.
        """
        started = time.perf_counter()
        self.log_info(
            "Audit started",
            user_id=request.user_id,
            template_id=request.template_id,
            template_name=request.template_name,
            sections=len(request.meal_sections),
        )
        try:
            response = self._run(request)
        except UpstreamAPIError as exc:
            self.log_error("Audit failed upstream", endpoint=exc.endpoint, status=exc.status_code)
            return AuditResponse.failure(
                AuditErrorCode.API_ERROR,
                exc.message,
                f"{exc.endpoint} returned {exc.status_code}",
            )
        except ServiceValidationError as exc:
            self.log_error("Audit failed validation", field=exc.field)
            return AuditResponse.failure(
                AuditErrorCode.VALIDATION_ERROR, exc.message, f"Field: {exc.field}"
            )
        except DietAuditError as exc:
            self.log_error("Audit failed", error=exc.message)
            return AuditResponse.failure(AuditErrorCode.INTERNAL_ERROR, exc.message)
        except Exception as exc:
            self.logger.exception("Audit pipeline failed unexpectedly")
            return AuditResponse.failure(
                AuditErrorCode.INTERNAL_ERROR,
                str(exc) or "Unknown error occurred",
                type(exc).__name__,
            )

        self.log_info(
            "Audit complete",
            conflicts=response.conflict_count,
            highlights=len(response.highlights),
            elapsed=f"{time.perf_counter() - started:.3f}s",
        )
        return response

    def _run(self, request: AuditRequest) -> AuditResponse:
        slots = request.meal_sections
        if not slots:
            self.log_warning("No meal sections provided, nothing to audit")
            return AuditResponse.empty()

        entries = extract_dishes(slots)
        if not entries:
            self.log_warning("No dishes extracted, skipping classification")
            return AuditResponse.empty()
        names = unique_short_names(entries)

        step = time.perf_counter()
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="audit") as pool:
            profile_future = pool.submit(self.profiles.fetch_client_profile, request.user_id)
            dishes_future = pool.submit(self.enrichment.enrich_dishes, names)
            profile = profile_future.result()
            dishes = dishes_future.result()
        self.log_info("Profile and enrichment ready", elapsed=f"{time.perf_counter() - step:.3f}s")

        if request.client_override is not None:
            self.log_info("Applying manual client overrides")
            profile = request.client_override.apply(profile)

        self.log_info(
            "Client restrictions",
            allergies=profile.allergies or "None",
            aversions=profile.food_aversions or "None",
            medical=profile.medical_conditions or "None",
            diet=profile.diet_preference.value,
        )

        step = time.perf_counter()
        classified = self.classifier.classify(profile, dishes)
        self.log_info(
            "Classification done",
            conflicts=len(classified.conflicts),
            elapsed=f"{time.perf_counter() - step:.3f}s",
        )

        conflicts = [c for c in classified.conflicts if is_usable(c)]
        dropped = len(classified.conflicts) - len(conflicts)
        if dropped:
            self.log_warning("Discarded conflicts with unusable dish names", count=dropped)
        for conflict in conflicts:
            self.log_info(
                f"Conflict: {conflict.dish_name} -> {conflict.conflicting_ingredient}",
                type=conflict.conflict_type.value,
            )

        injections = highlight_slots(slots, conflicts)
        highlights: List[HighlightRecord] = [
            HighlightRecord.model_validate(trace)
            for injection in injections
            for trace in injection.traces
        ]
        unmatched = self._unmatched(conflicts, highlights)
        if unmatched:
            self.log_info("Conflicts without a marker in the markup", dishes=unmatched)

        return AuditResponse(
            success=True,
            conflict_count=len(conflicts),
            audit_result=AuditResult(conflicts=conflicts),
            updated_sections=[
                UpdatedSection(title=i.title, replaced_content=i.html) for i in injections
            ],
            highlights=highlights,
        )

    @staticmethod
    def _unmatched(conflicts: Sequence, highlights: Sequence[HighlightRecord]) -> List[str]:
        marked = {h.dish_name for h in highlights}
        return [c.dish_name for c in conflicts if c.dish_name not in marked]

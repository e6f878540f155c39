"""HTTP adapter for the nutrition platform (client profiles, templates, recipes).
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

import requests

from app.config import Settings, settings as default_settings
from app.exceptions import ServiceValidationError, UpstreamAPIError
from domain.mappers import ClientMapper
from domain.mappers.client_mapper import unwrap_client_payload
from domain.schemas import ClientProfile, EnrichedDish

logger = logging.getLogger("dietaudit.upstream")


class PlatformClient:
    """Thin requests-based client; every failure surfaces as UpstreamAPIError."""

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or default_settings
        self._session = session

    # ------------------ Connection ------------------
    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self):
        """Close the underlying HTTP session."""
        if self._session is not None:
            self._session.close()
            logger.info("Upstream HTTP session closed")
        self._session = None

    def _headers(self, source: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_token}",
        }
        if source:
            headers["Source"] = source
        return headers

    def request_json(
        self,
        method: str,
        url: str,
        *,
        source: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Perform a request and decode its JSON body.

        Raises:
            UpstreamAPIError: on transport failure (status 0), non-2xx status
                or a body that is not JSON
        """
        logger.info(f"{method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(source),
                params=params,
                json=json_body,
                timeout=timeout or self.config.upstream_timeout_sec,
            )
        except requests.RequestException as exc:
            logger.error(f"Network error for {url}: {exc}")
            raise UpstreamAPIError(f"Network request failed: {exc}", 0, url) from exc

        if not response.ok:
            body = response.text
            logger.error(f"Error {response.status_code} for {url}: {body[:500]}")
            raise UpstreamAPIError(
                f"API request failed: {response.reason}",
                response.status_code,
                url,
                body,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamAPIError(
                "API returned a non-JSON body", response.status_code, url, response.text
            ) from exc

    # ------------------ Client profiles ------------------
    def fetch_client_profile(self, user_id: str) -> ClientProfile:
        """Fetch and validate a client profile by platform user id.

        Raises:
            ServiceValidationError: empty user id, or a payload that fails validation
            UpstreamAPIError: request failure or an empty payload
        """
        if not user_id or not str(user_id).strip():
            raise ServiceValidationError("User ID is required", field="user_id")

        url = self.config.client_url
        response = self.request_json(
            "GET",
            url,
            source=self.config.client_header_source,
            params={"user_id": user_id},
        )

        raw = unwrap_client_payload(response)
        if not raw:
            raise UpstreamAPIError(
                "API returned empty data for client profile", 200, url, str(response)[:500]
            )

        logger.debug(f"Resolved client object keys: {sorted(raw.keys())}")
        return ClientMapper.to_profile(raw, user_id=str(user_id))

    # ------------------ Templates ------------------
    def fetch_templates(self, limit: int = 50, search: str = "", page: int = 1) -> Any:
        """Raw template listing; shaping is done by TemplateService"""
        # Search is also applied locally, the endpoint has been seen to ignore it
        effective_limit = 1000 if search else limit
        return self.request_json(
            "GET",
            self.config.template_url,
            source=self.config.template_header_source,
            params={"search": search, "page": page, "limit": effective_limit},
        )

    # ------------------ Recipe enrichment ------------------
    def batch_search_recipes(self, names: List[str], timeout: Optional[float] = None) -> List[EnrichedDish]:
        """
        Look up ingredient lists for a batch of dish names in one call.

        Order of the reply is not guaranteed and unmatched names are simply
        absent. Items without a name or ingredient list are skipped.
        """
        if not names:
            return []

        response = self.request_json(
            "POST",
            self.config.recipe_batch_url,
            json_body={"queries": list(names)},
            timeout=timeout or self.config.enrichment_timeout_sec,
        )

        if isinstance(response, list):
            items = response
        elif isinstance(response, Mapping):
            items = response.get("results") or response.get("data") or []
        else:
            items = []
        if not isinstance(items, list):
            raise ServiceValidationError("Recipe batch reply is not a list", field="results")

        dishes = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            name = item.get("name") or item.get("dish_name") or item.get("query")
            ingredients = item.get("ingredients") or item.get("ingredient_list") or []
            if not name or not isinstance(ingredients, list) or not ingredients:
                continue
            dishes.append(
                EnrichedDish(name=str(name), ingredients=[str(i) for i in ingredients if i])
            )
        return dishes

import logging
from typing import Any

import requests

from wikibase_forms.models.entity_patch import EntityPatch
from wikibase_forms.models.errors import SessionExpiredError, SubmissionError
from wikibase_forms.models.internal_representation.entity_ids import validate_item_id

logger = logging.getLogger(__name__)


class SubmissionClient:
    """Talks to the proxy that holds the wiki session and CSRF token.

    Submissions are not retried: a write that timed out may still have
    been applied by the wiki.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_entity(self, patch: EntityPatch, session_id: str) -> dict[str, Any]:
        logger.info("Submitting new entity")
        return self._post("/api/create-entity", patch, session_id)

    def update_entity(self, item_id: str, patch: EntityPatch, session_id: str) -> dict[str, Any]:
        item_id = validate_item_id(item_id)
        logger.info(f"Submitting update for {item_id}")
        return self._post(f"/api/update-entity/{item_id}", patch, session_id)

    def _post(self, path: str, patch: EntityPatch, session_id: str) -> dict[str, Any]:
        try:
            response = self.session.post(
                f"{self.base_url}{path}",
                json={"entity": patch.to_wikibase()},
                headers={"X-Session-ID": session_id},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Submission proxy unreachable: {e}")
            raise SubmissionError(f"Submission proxy unreachable: {e}") from e

        if response.status_code == 401:
            logger.warning("Submission rejected: session expired")
            raise SessionExpiredError()

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not 200 <= response.status_code < 300:
            message = data.get("error") if isinstance(data, dict) else None
            message = message or f"Submission failed with HTTP {response.status_code}"
            logger.error(f"Submission failed: {response.status_code} {message}")
            raise SubmissionError(message, status=response.status_code)

        return data

    def close(self) -> None:
        self.session.close()

import logging
import time
from typing import Any

import requests

from wikibase_forms.models.errors import QueryError
from wikibase_forms.models.sparql import Binding, Row

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = {429, 502, 503, 504}


def parse_bindings(data: Any) -> list[Row]:
    """Turn a SPARQL JSON result document into rows of bindings.

    Raises QueryError(malformed=True) when the document is not the tabular
    ``results.bindings`` shape.
    """
    try:
        bindings = data["results"]["bindings"]
    except (KeyError, TypeError):
        raise QueryError("SPARQL response has no results.bindings", malformed=True)
    if not isinstance(bindings, list):
        raise QueryError("SPARQL results.bindings is not a list", malformed=True)

    rows = []
    for raw_row in bindings:
        if not isinstance(raw_row, dict):
            raise QueryError("SPARQL binding row is not an object", malformed=True)
        row: Row = {}
        for variable, cell in raw_row.items():
            if not isinstance(cell, dict) or "value" not in cell:
                raise QueryError(
                    f"SPARQL binding for ?{variable} has no value", malformed=True
                )
            row[variable] = Binding(
                value=str(cell["value"]),
                is_entity_reference=cell.get("type") == "uri",
                datatype=cell.get("datatype"),
                language=cell.get("xml:lang"),
            )
        rows.append(row)
    return rows


class SparqlClient:
    """Executes queries against a Wikibase query service endpoint.

    Transient failures (connection errors, timeouts, 429/502/503/504) are
    retried ``max_retries`` times with exponential backoff. Any other non-2xx
    answer fails immediately with QueryError.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        max_retries: int = 2,
        backoff_factor: float = 0.5,
        user_agent: str = "WikibaseFormGenerator/1.0",
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/sparql-results+json, application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "User-Agent": user_agent,
        }

    def execute(self, query: str) -> list[Row]:
        response = self._post(query)

        if not 200 <= response.status_code < 300:
            logger.error(f"SPARQL query failed: {response.status_code} {response.text[:200]}")
            raise QueryError(
                f"SPARQL query failed: {response.status_code}",
                status=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            raise QueryError(
                "SPARQL response is not JSON",
                status=response.status_code,
                body=response.text,
                malformed=True,
            )

        rows = parse_bindings(data)
        logger.debug(f"SPARQL query returned {len(rows)} rows")
        return rows

    def _post(self, query: str) -> requests.Response:
        attempt = 0
        while True:
            try:
                response = self.session.post(
                    self.endpoint,
                    data={"query": query},
                    headers=self.headers,
                    timeout=self.timeout,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= self.max_retries:
                    raise QueryError(f"SPARQL endpoint unreachable: {e}") from e
                logger.warning(f"SPARQL request failed ({e}), retrying")
            else:
                if response.status_code not in TRANSIENT_STATUS_CODES or attempt >= self.max_retries:
                    return response
                logger.warning(f"SPARQL endpoint answered {response.status_code}, retrying")

            time.sleep(self.backoff_factor * 2**attempt)
            attempt += 1

    def close(self) -> None:
        self.session.close()

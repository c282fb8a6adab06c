import logging
import re

from wikibase_forms.models.internal_representation.datatypes import Datatype, datatype_from_uri
from wikibase_forms.models.internal_representation.entity_ids import entity_id_from_uri
from wikibase_forms.models.snapshot import (
    ExistingItemSnapshot,
    ItemValue,
    QualifierSnapshot,
    StatementSnapshot,
)
from wikibase_forms.models.sparql import Binding, Row

logger = logging.getLogger(__name__)


RDF_STATEMENT_ID = re.compile(r"^([QPL]\d+)-")


def statement_id_from_uri(uri: str) -> str | None:
    """Statement id as the API expects it from a statement node URI.

    The RDF export writes Q827$GUID as Q827-GUID, so the first dash after the
    entity id goes back to a dollar sign: .../statement/Q827-GUID -> Q827$GUID
    """
    if "/statement/" not in uri:
        return None
    return RDF_STATEMENT_ID.sub(r"\1$", uri.split("/statement/")[-1], count=1)


def _snapshot_value(
    datatype: Datatype, value: Binding, label: Binding | None
) -> ItemValue | str:
    if datatype.is_entity:
        return ItemValue(id=entity_id_from_uri(value.value), label=label.value if label else None)
    return value.value


def normalize_item_data(item_rows: list[Row], label_rows: list[Row]) -> ExistingItemSnapshot:
    """Nest the flat statement dump of an item into per-property statements.

    Rows are grouped by statement URI, never by property and value: one
    statement with several qualifiers arrives as several rows and must come
    out as a single StatementSnapshot.
    """
    label = ""
    description = ""
    if label_rows:
        first = label_rows[0]
        label = first["label"].value if "label" in first else ""
        description = first["description"].value if "description" in first else ""

    statements: dict[str, dict] = {}
    for row in item_rows:
        statement_uri = row["statement"].value
        if statement_uri not in statements:
            datatype = datatype_from_uri(row["datatype"].value)
            statements[statement_uri] = {
                "property_id": entity_id_from_uri(row["property"].value),
                "datatype": datatype,
                "value": _snapshot_value(datatype, row["value"], row.get("valueLabel")),
                "qualifiers": {},
                "statement_id": statement_id_from_uri(statement_uri),
            }

        if "qualifier" in row and "qualifierValue" in row:
            qualifier_datatype = datatype_from_uri(row["qualifierDatatype"].value)
            qualifier_id = entity_id_from_uri(row["qualifier"].value)
            statements[statement_uri]["qualifiers"][qualifier_id] = QualifierSnapshot(
                value=_snapshot_value(
                    qualifier_datatype, row["qualifierValue"], row.get("qualifierValueLabel")
                ),
                datatype=qualifier_datatype,
            )

    properties: dict[str, list[StatementSnapshot]] = {}
    for statement in statements.values():
        properties.setdefault(statement["property_id"], []).append(
            StatementSnapshot(
                value=statement["value"],
                datatype=statement["datatype"],
                qualifiers=statement["qualifiers"] or None,
                statement_id=statement["statement_id"],
            )
        )

    logger.debug(
        f"Normalized {len(item_rows)} rows into {len(statements)} statements "
        f"on {len(properties)} properties"
    )
    return ExistingItemSnapshot(label=label, description=description, properties=properties)

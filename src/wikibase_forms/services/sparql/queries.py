"""SPARQL query builders for the form generator pipeline.

Every builder is a pure function of the configuration and the ids passed in.
Ids are validated against ``^[QP]\\d+$`` before they are interpolated, so a
malformed id raises InvalidEntityIdError instead of producing a broken (or
injected) query.
"""

from wikibase_forms.models.config.forms_config import FormsConfig
from wikibase_forms.models.internal_representation.entity_ids import validate_entity_id

LABEL_LANGUAGE = "en"


def _prefixes(config: FormsConfig) -> str:
    base = config.wikibase.url
    return f"""PREFIX wd: <{base}/entity/>
PREFIX wdt: <{base}/prop/direct/>
PREFIX p: <{base}/prop/>
PREFIX ps: <{base}/prop/statement/>
PREFIX pq: <{base}/prop/qualifier/>
PREFIX wikibase: <http://wikiba.se/ontology#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
PREFIX schema: <http://schema.org/>"""


def _label(subject: str, variable: str, predicate: str = "rdfs:label") -> str:
    return (
        f"OPTIONAL {{ {subject} {predicate} {variable} . "
        f'FILTER(LANG({variable}) = "{LABEL_LANGUAGE}") }}'
    )


def instance_of_query(config: FormsConfig, item_id: str) -> str:
    """Type of an item and the type's label."""
    item_id = validate_entity_id(item_id)
    return f"""{_prefixes(config)}

SELECT ?instanceOf ?instanceOfLabel
WHERE {{
  wd:{item_id} wdt:{config.instance_of} ?instanceOf .
  {_label("?instanceOf", "?instanceOfLabel")}
}}
LIMIT 1
"""


def exemplar_properties_query(config: FormsConfig, exemplar_id: str) -> str:
    """Every property used in a statement on the exemplar, with its datatype."""
    exemplar_id = validate_entity_id(exemplar_id)
    return f"""{_prefixes(config)}

SELECT DISTINCT ?property ?propertyLabel ?propertyDescription ?datatype
WHERE {{
  wd:{exemplar_id} ?claimPredicate ?statement .
  ?property wikibase:claim ?claimPredicate .
  ?property wikibase:propertyType ?datatype .
  {_label("?property", "?propertyLabel")}
  {_label("?property", "?propertyDescription", "schema:description")}
}}
ORDER BY ?propertyLabel
"""


def property_qualifiers_query(config: FormsConfig, exemplar_id: str, property_id: str) -> str:
    """Main value (with its type) crossed with every qualifier, per exemplar statement."""
    exemplar_id = validate_entity_id(exemplar_id)
    property_id = validate_entity_id(property_id)
    return f"""{_prefixes(config)}

SELECT DISTINCT ?mainValue ?mainValueLabel ?mainValueType ?qualifier ?qualifierLabel ?qualifierDatatype
WHERE {{
  wd:{exemplar_id} p:{property_id} ?statement .
  ?statement ps:{property_id} ?mainValue .
  ?statement ?qualifierPredicate ?qualifierValue .
  ?qualifier wikibase:qualifier ?qualifierPredicate .
  ?qualifier wikibase:propertyType ?qualifierDatatype .
  OPTIONAL {{ ?mainValue wdt:{config.instance_of} ?mainValueType . }}
  {_label("?mainValue", "?mainValueLabel")}
  {_label("?qualifier", "?qualifierLabel")}
}}
ORDER BY ?mainValueLabel ?qualifierLabel
"""


def property_values_query(
    config: FormsConfig, property_id: str, type_value: str, exemplar_id: str
) -> str:
    """Every entity sharing a type with a value already used for the property.

    Seed values are the exemplar's own values plus those of items of the same
    type. The seeds are offered themselves, along with every entity that is an
    instance of one of the seeds' types.
    """
    property_id = validate_entity_id(property_id)
    type_value = validate_entity_id(type_value)
    exemplar_id = validate_entity_id(exemplar_id)
    instance_of = config.instance_of
    seed = (
        f"{{ wd:{exemplar_id} wdt:{property_id} ?seed . }} UNION "
        f"{{ ?item wdt:{instance_of} wd:{type_value} . ?item wdt:{property_id} ?seed . }}\n"
        f"    FILTER(isIRI(?seed))"
    )
    return f"""{_prefixes(config)}

SELECT DISTINCT ?value ?valueLabel ?valueType
WHERE {{
  {{
    {seed}
    BIND(?seed AS ?value)
    OPTIONAL {{ ?value wdt:{instance_of} ?valueType . }}
  }}
  UNION
  {{
    {seed}
    ?seed wdt:{instance_of} ?valueType .
    ?value wdt:{instance_of} ?valueType .
  }}
  {_label("?value", "?valueLabel")}
}}
ORDER BY ?valueLabel
"""


def qualifier_values_query(config: FormsConfig, qualifier_id: str) -> str:
    """Every entity sharing a type with any value ever used for the qualifier."""
    qualifier_id = validate_entity_id(qualifier_id)
    instance_of = config.instance_of
    seed = f"?statement pq:{qualifier_id} ?seed .\n    FILTER(isIRI(?seed))"
    return f"""{_prefixes(config)}

SELECT DISTINCT ?value ?valueLabel ?valueType
WHERE {{
  {{
    {seed}
    BIND(?seed AS ?value)
    OPTIONAL {{ ?value wdt:{instance_of} ?valueType . }}
  }}
  UNION
  {{
    {seed}
    ?seed wdt:{instance_of} ?valueType .
    ?value wdt:{instance_of} ?valueType .
  }}
  {_label("?value", "?valueLabel")}
}}
ORDER BY ?valueLabel
"""


def item_data_query(config: FormsConfig, item_id: str) -> str:
    """Full statement and qualifier dump of an item, for edit mode."""
    item_id = validate_entity_id(item_id)
    return f"""{_prefixes(config)}

SELECT ?property ?propertyLabel ?statement ?value ?valueLabel ?datatype
       ?qualifier ?qualifierLabel ?qualifierValue ?qualifierValueLabel ?qualifierDatatype
WHERE {{
  wd:{item_id} ?claimPredicate ?statement .
  ?property wikibase:claim ?claimPredicate .
  ?property wikibase:statementProperty ?statementPredicate .
  ?property wikibase:propertyType ?datatype .
  ?statement ?statementPredicate ?value .
  {_label("?property", "?propertyLabel")}
  {_label("?value", "?valueLabel")}
  OPTIONAL {{
    ?statement ?qualifierPredicate ?qualifierValue .
    ?qualifier wikibase:qualifier ?qualifierPredicate .
    ?qualifier wikibase:propertyType ?qualifierDatatype .
    {_label("?qualifier", "?qualifierLabel")}
    {_label("?qualifierValue", "?qualifierValueLabel")}
  }}
}}
ORDER BY ?propertyLabel ?statement
"""


def label_description_query(config: FormsConfig, item_id: str) -> str:
    item_id = validate_entity_id(item_id)
    return f"""{_prefixes(config)}

SELECT ?label ?description
WHERE {{
  {_label(f"wd:{item_id}", "?label")}
  {_label(f"wd:{item_id}", "?description", "schema:description")}
}}
LIMIT 1
"""


def entity_label_query(config: FormsConfig, entity_id: str) -> str:
    entity_id = validate_entity_id(entity_id)
    return f"""{_prefixes(config)}

SELECT ?label
WHERE {{
  wd:{entity_id} rdfs:label ?label .
  FILTER(LANG(?label) = "{LABEL_LANGUAGE}")
}}
LIMIT 1
"""

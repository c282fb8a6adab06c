from wikibase_forms.services.sparql.client import SparqlClient, parse_bindings
from wikibase_forms.services.sparql.queries import (
    entity_label_query,
    exemplar_properties_query,
    instance_of_query,
    item_data_query,
    label_description_query,
    property_qualifiers_query,
    property_values_query,
    qualifier_values_query,
)

__all__ = [
    "SparqlClient",
    "parse_bindings",
    "entity_label_query",
    "exemplar_properties_query",
    "instance_of_query",
    "item_data_query",
    "label_description_query",
    "property_qualifiers_query",
    "property_values_query",
    "qualifier_values_query",
]

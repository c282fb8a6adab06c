import pytest
from pydantic import ValidationError

from wikibase_forms.models.entity_patch import Claim, EntityPatch, LanguageValue, Snak
from wikibase_forms.models.internal_representation.datatypes import Datatype, RenderedKind
from wikibase_forms.models.schema import (
    PropertyDescriptor,
    QualifierDescriptor,
    Schema,
    ValueOption,
)


def _ship_type() -> PropertyDescriptor:
    return PropertyDescriptor(
        id="P93",
        label="ship type",
        datatype=Datatype.WIKIBASE_ITEM,
        rendered_kind=RenderedKind.MULTISELECT,
        values=[
            ValueOption(id="Q7", label="frigate", types=["Q1"]),
            ValueOption(id="Q8", label="brig", types=["Q1"]),
            ValueOption(id="Q9", label="raft"),
        ],
        qualifiers=[
            QualifierDescriptor(id="P201", label="start time", datatype=Datatype.TIME),
            QualifierDescriptor(id="P202", label="note", datatype=Datatype.STRING),
        ],
        qualifier_map={"Q1": frozenset({"P201"}), "Q9": frozenset({"P202"})},
    )


def test_default_basic_fields():
    schema = Schema()
    assert [(f.id, f.label, f.required) for f in schema.basic] == [
        ("label", "Name", True),
        ("description", "Description", False),
    ]
    assert schema.basic[1].rendered_kind == RenderedKind.TEXTAREA


def test_schema_rejects_duplicate_properties():
    prop = PropertyDescriptor(
        id="P5", label="name", datatype=Datatype.STRING, rendered_kind=RenderedKind.TEXT
    )
    with pytest.raises(ValidationError):
        Schema(properties=[prop, prop])


def test_qualifier_map_must_reference_known_qualifiers():
    with pytest.raises(ValidationError):
        PropertyDescriptor(
            id="P93",
            label="ship type",
            datatype=Datatype.WIKIBASE_ITEM,
            rendered_kind=RenderedKind.ITEM_INPUT,
            qualifiers=[QualifierDescriptor(id="P201", label="start", datatype=Datatype.TIME)],
            qualifier_map={"Q1": frozenset({"P999"})},
        )


def test_qualifiers_for_uses_value_types():
    """Test that a value never seen on the exemplar gets its type's qualifiers"""
    prop = _ship_type()
    assert prop.qualifiers_for("Q8") == ["P201"]
    assert prop.qualifiers_for("Q9") == ["P202"]
    assert prop.qualifiers_for("Q404") == []
    assert prop.qualifiers_for("Q404", value_types=["Q1"]) == ["P201"]
    assert prop.qualifiers_for("") == []


def test_entity_patch_serialization():
    patch = EntityPatch(
        labels={"en": LanguageValue(language="en", value="Site A")},
        claims={
            "P1": [
                Claim(
                    mainsnak=Snak(
                        property="P1",
                        datavalue={"value": "x", "type": "string"},
                    )
                ),
                Claim.removal("Q827$abc"),
            ]
        },
    )

    data = patch.to_wikibase()

    assert data["labels"] == {"en": {"language": "en", "value": "Site A"}}
    assert "descriptions" not in data
    assert data["claims"]["P1"][0] == {
        "mainsnak": {
            "snaktype": "value",
            "property": "P1",
            "datavalue": {"value": "x", "type": "string"},
        },
        "type": "statement",
        "rank": "normal",
    }
    assert data["claims"]["P1"][1] == {"id": "Q827$abc", "remove": ""}
    assert patch.removed_statement_ids("P1") == ["Q827$abc"]
    assert len(patch.added_claims("P1")) == 1

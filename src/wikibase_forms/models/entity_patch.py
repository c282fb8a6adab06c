from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Snak(BaseModel):
    snaktype: str = "value"
    property: str
    datavalue: Dict[str, Any]

    model_config = ConfigDict(frozen=True)


class Claim(BaseModel):
    """A statement as sent to wbeditentity.

    A claim carrying ``id`` and ``remove`` (and no mainsnak) asks the wiki to
    delete that existing statement; a claim with ``id`` and a mainsnak keeps
    the existing statement.
    """

    mainsnak: Optional[Snak] = None
    type: str = "statement"
    rank: str = "normal"
    qualifiers: Optional[Dict[str, List[Snak]]] = None
    id: Optional[str] = None
    remove: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def removal(cls, statement_id: str) -> "Claim":
        return cls(id=statement_id, remove="")

    @property
    def is_removal(self) -> bool:
        return self.remove is not None

    def to_wikibase(self) -> Dict[str, Any]:
        if self.is_removal:
            return {"id": self.id, "remove": ""}
        return self.model_dump(exclude_none=True)


class LanguageValue(BaseModel):
    language: str
    value: str

    model_config = ConfigDict(frozen=True)


class EntityPatch(BaseModel):
    labels: Dict[str, LanguageValue] = Field(default_factory=dict)
    descriptions: Dict[str, LanguageValue] = Field(default_factory=dict)
    claims: Dict[str, List[Claim]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def to_wikibase(self) -> Dict[str, Any]:
        """Entity data in the shape wbeditentity expects"""
        data: Dict[str, Any] = {}
        if self.labels:
            data["labels"] = {lang: v.model_dump() for lang, v in self.labels.items()}
        if self.descriptions:
            data["descriptions"] = {
                lang: v.model_dump() for lang, v in self.descriptions.items()
            }
        data["claims"] = {
            property_id: [claim.to_wikibase() for claim in claims]
            for property_id, claims in self.claims.items()
        }
        return data

    def added_claims(self, property_id: str) -> List[Claim]:
        return [c for c in self.claims.get(property_id, []) if not c.is_removal]

    def removed_statement_ids(self, property_id: str) -> List[str]:
        return [c.id for c in self.claims.get(property_id, []) if c.is_removal and c.id]

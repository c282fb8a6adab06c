from pydantic import BaseModel, ConfigDict


class Binding(BaseModel):
    """One cell of a SPARQL JSON result row"""

    value: str
    is_entity_reference: bool = False
    datatype: str | None = None
    language: str | None = None

    model_config = ConfigDict(frozen=True)


Row = dict[str, Binding]

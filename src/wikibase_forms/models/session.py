from pydantic import BaseModel, ConfigDict, Field

from wikibase_forms.models.form import FormDescription
from wikibase_forms.models.schema import FormMode, Schema
from wikibase_forms.models.snapshot import ExistingItemSnapshot


class FormSession(BaseModel):
    """State of one open form, threaded explicitly through every call"""

    mode: FormMode
    entity_type: str
    exemplar_id: str
    item_id: str | None = None
    type_value: str
    type_label: str | None = None
    form_schema: Schema = Field(..., alias="schema")
    existing_snapshot: ExistingItemSnapshot | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_create(self) -> bool:
        return self.mode == FormMode.CREATE


class GeneratedForm(BaseModel):
    """A freshly generated form: its session, what to render and the token to submit with"""

    session: FormSession
    form: FormDescription
    token: str | None = None

    model_config = ConfigDict(frozen=True)

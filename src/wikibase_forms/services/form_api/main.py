import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from wikibase_forms.models.config.forms_config import FormsConfig, load_forms_config
from wikibase_forms.models.config.settings import settings
from wikibase_forms.models.errors import (
    FormGeneratorError,
    FormSessionNotFoundError,
    FormValidationError,
    InvalidEntityIdError,
    QueryError,
    SchemaGenerationError,
    SessionExpiredError,
    SubmissionError,
)
from wikibase_forms.models.session import GeneratedForm
from wikibase_forms.services.data_collector import collect_form_data
from wikibase_forms.services.entity_builder import build_entity
from wikibase_forms.services.form_generator import FormGenerator
from wikibase_forms.services.form_handlers import get_form_handler
from wikibase_forms.services.form_renderer import render_session
from wikibase_forms.services.schema_cache import SchemaCache
from wikibase_forms.services.session_store import SessionStore
from wikibase_forms.services.sparql.client import SparqlClient
from wikibase_forms.services.submission import SubmissionClient

logger = logging.getLogger(__name__)


class Clients(BaseModel):
    config: FormsConfig
    generator: FormGenerator | None = None
    submission: SubmissionClient | None = None
    sessions: SessionStore = Field(default_factory=SessionStore)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @classmethod
    def from_settings(cls, config: FormsConfig) -> "Clients":
        sparql = SparqlClient(
            config.sparql_endpoint,
            timeout=settings.sparql_timeout,
            max_retries=settings.sparql_max_retries,
            backoff_factor=settings.sparql_backoff_factor,
            user_agent=settings.user_agent,
        )
        return cls(
            config=config,
            generator=FormGenerator(sparql, config, SchemaCache(ttl=settings.schema_cache_ttl)),
            submission=SubmissionClient(settings.submission_proxy_url, timeout=settings.sparql_timeout),
            sessions=SessionStore(ttl=settings.form_session_ttl),
        )


class SubmitRequest(BaseModel):
    token: str
    values: Dict[str, Any] = Field(default_factory=dict)


class SubmitResponse(BaseModel):
    success: bool = True
    item_id: str | None = None
    result: Dict[str, Any] = Field(default_factory=dict)


def to_http_exception(e: FormGeneratorError) -> HTTPException:
    if isinstance(e, InvalidEntityIdError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, FormSessionNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, FormValidationError):
        return HTTPException(status_code=422, detail={"errors": e.errors})
    if isinstance(e, SessionExpiredError):
        return HTTPException(status_code=401, detail=e.message)
    if isinstance(e, SubmissionError):
        return HTTPException(status_code=502, detail=e.message)
    if isinstance(e, SchemaGenerationError):
        return HTTPException(status_code=502, detail={"error": str(e), "retryable": e.retryable})
    if isinstance(e, QueryError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


# noinspection PyShadowingNames,PyUnresolvedReferences
@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.state.clients = Clients.from_settings(load_forms_config(settings.forms_config_path))
    yield
    app.state.clients.generator.client.close()
    app.state.clients.submission.close()
    app.state.clients.generator = None
    app.state.clients.submission = None


app = FastAPI(lifespan=lifespan)


def _generator() -> FormGenerator:
    generator = app.state.clients.generator
    if generator is None:
        raise HTTPException(status_code=503, detail="Form generator not initialized")
    return generator


def _with_token(generated: GeneratedForm) -> GeneratedForm:
    token = app.state.clients.sessions.put(generated.session)
    return generated.model_copy(update={"token": token})


# noinspection PyUnresolvedReferences
@app.get("/health")
def health_check():
    clients = app.state.clients
    return {
        "status": "ok",
        "sparql": "configured" if clients.generator else "disconnected",
        "submission": "configured" if clients.submission else "disconnected",
    }


# noinspection PyUnresolvedReferences
@app.get("/forms/{entity_type}/create", response_model=GeneratedForm)
def create_form(entity_type: str):
    try:
        return _with_token(_generator().generate_create_form(entity_type))
    except FormGeneratorError as e:
        logger.error(f"Create form for {entity_type} failed: {e}")
        raise to_http_exception(e)


# noinspection PyUnresolvedReferences
@app.get("/forms/items/{item_id}/edit", response_model=GeneratedForm)
def edit_form(item_id: str):
    try:
        return _with_token(_generator().generate_edit_form(item_id))
    except FormGeneratorError as e:
        logger.error(f"Edit form for {item_id} failed: {e}")
        raise to_http_exception(e)


# noinspection PyUnresolvedReferences
@app.post("/forms/submit", response_model=SubmitResponse)
def submit_form(request: SubmitRequest, x_session_id: str | None = Header(default=None)):
    clients = app.state.clients
    if not x_session_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if clients.submission is None:
        raise HTTPException(status_code=503, detail="Submission client not initialized")

    try:
        session = clients.sessions.get(request.token)
    except FormSessionNotFoundError as e:
        raise to_http_exception(e)

    handler = get_form_handler(session.entity_type)
    try:
        form_data = collect_form_data(render_session(session), request.values)
        patch = build_entity(form_data, session, clients.config.instance_of, handler)
        if session.is_create:
            result = clients.submission.create_entity(patch, x_session_id)
        else:
            result = clients.submission.update_entity(session.item_id or "", patch, x_session_id)
    except FormGeneratorError as e:
        logger.error(f"Submission of {session.mode.value} form failed: {e}")
        raise to_http_exception(e)

    clients.sessions.discard(request.token)
    entity = result.get("entity") if isinstance(result.get("entity"), dict) else {}
    return SubmitResponse(item_id=entity.get("id") or session.item_id, result=result)


# noinspection PyUnresolvedReferences
@app.post("/forms/schema/refresh")
def refresh_schema():
    _generator().refresh_schema()
    return {"status": "ok"}


# noinspection PyUnresolvedReferences
@app.get("/entities/{entity_id}/label")
def entity_label(entity_id: str):
    try:
        label = _generator().lookup_entity_label(entity_id)
    except FormGeneratorError as e:
        raise to_http_exception(e)
    return {"id": entity_id, "label": label}

import pytest

from tests.fakes import FakeResponse, FakeSession, connection_error
from wikibase_forms.models.entity_patch import EntityPatch, LanguageValue
from wikibase_forms.models.errors import InvalidEntityIdError, SessionExpiredError, SubmissionError
from wikibase_forms.services.submission import SubmissionClient

PATCH = EntityPatch(labels={"en": LanguageValue(language="en", value="Site A")})


def test_create_entity_posts_patch_with_session_header():
    session = FakeSession(FakeResponse(200, {"success": True, "entity": {"id": "Q900"}}))
    client = SubmissionClient("http://proxy:3000/", session=session)

    result = client.create_entity(PATCH, "abc123")

    assert result["entity"]["id"] == "Q900"
    call = session.calls[0]
    assert call["url"] == "http://proxy:3000/api/create-entity"
    assert call["headers"] == {"X-Session-ID": "abc123"}
    assert call["json"] == {"entity": PATCH.to_wikibase()}


def test_update_entity_url():
    session = FakeSession(FakeResponse(200, {"success": True}))
    SubmissionClient("http://proxy:3000", session=session).update_entity("Q827", PATCH, "abc")
    assert session.calls[0]["url"] == "http://proxy:3000/api/update-entity/Q827"


def test_update_entity_rejects_malformed_id():
    client = SubmissionClient("http://proxy:3000", session=FakeSession())
    with pytest.raises(InvalidEntityIdError):
        client.update_entity("../login", PATCH, "abc")


def test_401_is_session_expired():
    session = FakeSession(FakeResponse(401, {"error": "Not authenticated"}))
    with pytest.raises(SessionExpiredError) as exc_info:
        SubmissionClient("http://proxy:3000", session=session).create_entity(PATCH, "old")
    assert exc_info.value.status == 401
    assert exc_info.value.message == "Session expired, please re-authenticate"


def test_proxy_error_message_is_surfaced_verbatim():
    session = FakeSession(FakeResponse(400, {"error": "Label and description must differ"}))
    with pytest.raises(SubmissionError) as exc_info:
        SubmissionClient("http://proxy:3000", session=session).create_entity(PATCH, "abc")
    assert exc_info.value.message == "Label and description must differ"
    assert exc_info.value.status == 400
    assert not isinstance(exc_info.value, SessionExpiredError)


def test_submissions_are_not_retried():
    session = FakeSession(connection_error(), FakeResponse(200, {}))
    with pytest.raises(SubmissionError):
        SubmissionClient("http://proxy:3000", session=session).create_entity(PATCH, "abc")
    assert len(session.calls) == 1


def test_error_without_json_body():
    session = FakeSession(FakeResponse(500, payload=None, text="boom"))
    with pytest.raises(SubmissionError, match="HTTP 500"):
        SubmissionClient("http://proxy:3000", session=session).create_entity(PATCH, "abc")

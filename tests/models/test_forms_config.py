import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from wikibase_forms.models.config.forms_config import FormsConfig, load_forms_config


def test_load_forms_config(tmp_path):
    path = tmp_path / "exemplars.json"
    path.write_text(
        json.dumps(
            {
                "wikibase": {
                    "url": "https://example.wikibase.cloud/",
                    "sparqlEndpoint": "https://example.wikibase.cloud/query/sparql",
                },
                "properties": {"instanceOf": "P1"},
                "exemplars": {"Ship": {"id": "Q507", "label": "Ship", "icon": "ship"}},
            }
        )
    )

    config = load_forms_config(path)

    assert config.wikibase.url == "https://example.wikibase.cloud"
    assert config.sparql_endpoint == "https://example.wikibase.cloud/query/sparql"
    assert config.instance_of == "P1"
    assert config.exemplars["Ship"].id == "Q507"


def test_config_rejects_malformed_exemplar_id():
    with pytest.raises(ValidationError):
        FormsConfig.model_validate(
            {
                "wikibase": {"url": "https://x", "sparqlEndpoint": "https://x/sparql"},
                "properties": {"instanceOf": "P1"},
                "exemplars": {"Ship": {"id": "Ship"}},
            }
        )


def test_config_requires_instance_of():
    with pytest.raises(ValidationError):
        FormsConfig.model_validate(
            {
                "wikibase": {"url": "https://x", "sparqlEndpoint": "https://x/sparql"},
                "properties": {},
            }
        )


def test_shipped_example_config_loads():
    config = load_forms_config(Path(__file__).parents[2] / "config" / "exemplars.json")
    assert "Human" in config.exemplars
    assert config.instance_of == "P1"

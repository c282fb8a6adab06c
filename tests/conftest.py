import logging
import os

import pytest

from tests.fakes import MockSparqlClient, make_config
from wikibase_forms.models.config.forms_config import FormsConfig


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for all test sessions"""
    log_level_str = os.getenv("TEST_LOG_LEVEL", "INFO")
    log_level = logging.DEBUG if log_level_str == 'DEBUG' else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        force=True
    )


@pytest.fixture
def config() -> FormsConfig:
    """Configuration with P1 as type property and a few exemplars"""
    return make_config(Ship="Q507", Human="Q3", Archaeological_Site="Q827")


@pytest.fixture
def sparql() -> MockSparqlClient:
    return MockSparqlClient()

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    forms_config_path: str = "config/exemplars.json"
    submission_proxy_url: str = "http://localhost:3000"
    sparql_timeout: float = 30.0
    sparql_max_retries: int = 2
    sparql_backoff_factor: float = 0.5
    schema_cache_ttl: float = 3600.0
    form_session_ttl: float = 3600.0
    log_level: str = "INFO"
    user_agent: str = "WikibaseFormGenerator/1.0"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# noinspection PyArgumentList
settings = Settings()

logger.debug("=== Settings Debug ===")
logger.debug(f"Forms config path: {settings.forms_config_path}")
logger.debug(f"Submission proxy URL: {settings.submission_proxy_url}")
logger.debug(f"SPARQL timeout: {settings.sparql_timeout}")
logger.debug(f"SPARQL max retries: {settings.sparql_max_retries}")
logger.debug(f"Schema cache TTL: {settings.schema_cache_ttl}")
logger.debug(f"Form session TTL: {settings.form_session_ttl}")
logger.debug(f"Log level: {settings.log_level}")
logger.debug("=== End Settings Debug ===")

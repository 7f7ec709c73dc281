# core/config_validator.py

from typing import List
from core.config import (
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ENCRYPTION_KEY,
    DEFAULT_JWT_SECRET,
    settings,
)
from core.logging_config import logger


def is_production() -> bool:
    return settings.ENV.strip().lower() in ("production", "prod")


def validate_required_config() -> List[str]:
    """
    Settings that must not keep their development defaults in production.
    Returns the names of the offending variables.
    """
    problems = []

    if not is_production():
        return problems

    if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
        problems.append("JWT_SECRET_KEY")
    if settings.ADMIN_PASSWORD == DEFAULT_ADMIN_PASSWORD:
        problems.append("ADMIN_PASSWORD")

    return problems


def validate_optional_config() -> List[str]:
    """
    Recommended configuration (warnings only).
    """
    warnings = []

    if settings.ENCRYPTION_KEY == DEFAULT_ENCRYPTION_KEY:
        warnings.append("ENCRYPTION_KEY uses the built-in passphrase")

    if not settings.GEMINI_API_KEY:
        warnings.append("GEMINI_API_KEY not set, AI analysis and drafting are disabled")

    endpoint = settings.SHEETS_ENDPOINT_URL
    if endpoint and not endpoint.lower().startswith("https://"):
        warnings.append("SHEETS_ENDPOINT_URL is not https")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError if a production deployment keeps a default secret.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Default values not allowed in production: {', '.join(missing_required)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    for warning in missing_optional:
        logger.warning(f"Configuration: {warning}")

    backend = "remote sheets" if settings.SHEETS_ENDPOINT_URL else f"local file {settings.LOCAL_STORE_PATH}"
    logger.info(f"Configuration validation passed (store: {backend})")

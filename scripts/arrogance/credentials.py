"""
Service account discovery and validation.

Lookup order:
    1. $FIREBASE_SERVICE_ACCOUNT
    2. ~/.config/arrogance/service-account.json
    3. ./service-account.json
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from arrogance.config import (
    CONFIG_DIR,
    GOOGLE_CREDENTIALS_ENV,
    SERVICE_ACCOUNT_ENV,
    SERVICE_ACCOUNT_FILENAME,
)
from arrogance.errors import CredentialError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("type", "project_id", "private_key_id", "private_key", "client_email")


def candidate_paths(home: Path | None = None, cwd: Path | None = None) -> list[Path]:
    """Default locations searched when no environment override is set."""
    home = home if home is not None else Path.home()
    cwd = cwd if cwd is not None else Path.cwd()
    return [
        home / CONFIG_DIR / SERVICE_ACCOUNT_FILENAME,
        cwd / SERVICE_ACCOUNT_FILENAME,
    ]


def resolve_service_account_path(
    environ: dict[str, str] | None = None,
    home: Path | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the service account path, or raise CredentialError."""
    environ = environ if environ is not None else dict(os.environ)

    override = environ.get(SERVICE_ACCOUNT_ENV)
    if override:
        return Path(override)

    for path in candidate_paths(home, cwd):
        if path.is_file():
            logger.info("Found service account at: %s", path)
            return path
        logger.info("No service account found at: %s", path)

    raise CredentialError("no service account file found")


def validate_service_account(path: Path) -> dict:
    """Check the file is a readable service account and return its contents."""
    try:
        content = path.read_text()
    except OSError as e:
        raise CredentialError(f"could not read service account file: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CredentialError(f"service account file is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CredentialError("service account file is not a JSON object")

    for name in REQUIRED_FIELDS:
        if name not in data:
            raise CredentialError(f"service account file is missing required field: {name}")

    if data["type"] != "service_account":
        raise CredentialError(f"file is not a service account (type: {data['type']})")

    logger.info("Service account validated. Project ID: %s", data["project_id"])
    return data


def activate(path: Path) -> None:
    """Export the path for the Firebase Admin SDK."""
    os.environ[SERVICE_ACCOUNT_ENV] = str(path)
    os.environ[GOOGLE_CREDENTIALS_ENV] = str(path)


def check_service_account(
    environ: dict[str, str] | None = None,
    home: Path | None = None,
    cwd: Path | None = None,
) -> tuple[Path, dict]:
    """Resolve and validate in one step."""
    path = resolve_service_account_path(environ, home, cwd)
    return path, validate_service_account(path)

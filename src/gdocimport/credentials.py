"""Google API access token acquisition using google-auth.

Resolution order:
1. ``google_access_token`` setting (used as is)
2. ``google_credentials_file`` service-account key
3. Application Default Credentials
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport import requests as google_requests
from google.oauth2 import service_account
from loguru import logger

from gdocimport.errors import AuthError

if TYPE_CHECKING:
    from gdocimport.config import Settings

SCOPES = [
    "https://www.googleapis.com/auth/documents.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]


def get_access_token(settings: Settings) -> str:
    """Return a fresh OAuth2 access token for the Docs API.

    Raises:
        AuthError: If no credentials are available or they cannot be refreshed
    """
    if settings.google_access_token:
        return settings.google_access_token

    try:
        if settings.google_credentials_file:
            logger.debug("Using service account {}", settings.google_credentials_file)
            credentials = service_account.Credentials.from_service_account_file(
                str(settings.google_credentials_file), scopes=SCOPES
            )
        else:
            credentials, _ = google.auth.default(scopes=SCOPES)
        credentials.refresh(google_requests.Request())
    except (DefaultCredentialsError, RefreshError) as e:
        raise AuthError(f"Could not obtain Google credentials: {e}") from e
    except (OSError, ValueError) as e:
        raise AuthError(f"Invalid credentials file: {e}") from e

    token: str | None = credentials.token
    if not token:
        raise AuthError("Credentials refresh returned no access token")
    return token

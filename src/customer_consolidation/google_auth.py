"""Google API credentials and service construction.

Two modes:
- service account: `google_credentials_file` is a service-account key,
  optionally impersonating `google_delegated_user` (domain-wide delegation,
  required for Gmail);
- user OAuth: `google_token_file` holds an authorized-user token; when it is
  missing or cannot be refreshed, `google_credentials_file` is used as OAuth
  client secrets to run the local browser flow once and save the token.
"""

import json
import logging
from pathlib import Path
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from customer_consolidation.errors import CredentialMissingError
from customer_consolidation.models.settings import SyncSettings

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/gmail.readonly",
]


def _is_service_account_file(path: Path) -> bool:
    try:
        return json.loads(path.read_text()).get("type") == "service_account"
    except (OSError, ValueError):
        return False


def load_credentials(settings: SyncSettings, scopes: list[str] = SCOPES) -> Any:
    """Resolve Google credentials from settings; raises CredentialMissingError when none are usable."""
    creds_file = settings.google_credentials_file
    token_file = settings.google_token_file

    if creds_file and Path(creds_file).exists() and _is_service_account_file(Path(creds_file)):
        creds = service_account.Credentials.from_service_account_file(str(creds_file), scopes=scopes)
        if settings.google_delegated_user:
            creds = creds.with_subject(settings.google_delegated_user)
        return creds

    creds = None
    if token_file and Path(token_file).exists():
        creds = Credentials.from_authorized_user_file(str(token_file), scopes)

    if creds and creds.valid:
        return creds
    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
        Path(token_file).write_text(creds.to_json())
        return creds

    if not creds_file or not Path(creds_file).exists():
        raise CredentialMissingError(
            "No usable Google credentials: set GOOGLE_CREDENTIALS_FILE (service account or "
            "OAuth client secrets) and optionally GOOGLE_TOKEN_FILE"
        )

    flow = InstalledAppFlow.from_client_secrets_file(str(creds_file), scopes)
    creds = flow.run_local_server(port=0)
    if token_file:
        Path(token_file).parent.mkdir(parents=True, exist_ok=True)
        Path(token_file).write_text(creds.to_json())
        logger.info("Saved Google token to %s", token_file)
    return creds


def build_service(api: str, version: str, credentials: Any) -> Any:
    """googleapiclient resource for one API, e.g. ('docs', 'v1')."""
    return build(api, version, credentials=credentials, cache_discovery=False)

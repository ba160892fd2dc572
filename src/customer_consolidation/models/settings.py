"""Runtime settings, loaded once at start-up and injected into the orchestrator."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_FIREFLIES_ENDPOINT = "https://api.fireflies.ai/graphql"

# Environment variable -> settings field. Environment wins over the YAML file.
ENV_OVERRIDES = {
    "FIREFLIES_API_KEY": "fireflies_api_key",
    "CONSOLIDATION_SPREADSHEET_ID": "spreadsheet_id",
    "GOOGLE_CREDENTIALS_FILE": "google_credentials_file",
    "GOOGLE_TOKEN_FILE": "google_token_file",
}


class SyncSettings(BaseModel):
    """Settings for one consolidation deployment."""

    fireflies_api_key: Optional[str] = None
    fireflies_endpoint: str = DEFAULT_FIREFLIES_ENDPOINT
    transcript_limit: int = Field(default=50, ge=1)
    mail_max_threads: int = Field(default=50, ge=1)
    lookback_days: int = Field(default=30, ge=1, description="Window used when a row has no cursor")

    tracker_backend: Literal["sheets", "csv"] = "sheets"
    spreadsheet_id: Optional[str] = None
    sheet_name: str = "Opportunity Tracker"
    tracker_path: Optional[Path] = Field(default=None, description="CSV tracker path (csv backend)")

    google_credentials_file: Optional[Path] = Field(
        default=None,
        description="Service-account JSON, or OAuth client secrets when a token file is used",
    )
    google_token_file: Optional[Path] = None
    google_delegated_user: Optional[str] = None

    run_db_path: Path = Path("consolidation.db")

    schedule_hour: int = Field(default=8, ge=0, le=23)
    schedule_interval_days: int = Field(default=1, ge=1)

    @classmethod
    def from_yaml(cls, path: Optional[str | Path] = None, env: Optional[dict[str, str]] = None) -> "SyncSettings":
        """Load settings from YAML (nested sections or flat keys), then apply env overrides."""
        data: dict = {}
        if path is not None:
            data = yaml.safe_load(Path(path).read_text()) or {}
        fireflies = data.get("fireflies", {})
        google = data.get("google", {})
        tracker = data.get("tracker", {})
        schedule = data.get("schedule", {})

        def _get(key: str, nested: dict, nested_key: Optional[str] = None):
            return nested.get(nested_key or key, data.get(key))

        flat = {
            "fireflies_api_key": _get("fireflies_api_key", fireflies, "api_key"),
            "fireflies_endpoint": _get("fireflies_endpoint", fireflies, "endpoint"),
            "transcript_limit": _get("transcript_limit", fireflies, "limit"),
            "mail_max_threads": _get("mail_max_threads", google, "max_threads"),
            "lookback_days": data.get("lookback_days"),
            "tracker_backend": _get("tracker_backend", tracker, "backend"),
            "spreadsheet_id": _get("spreadsheet_id", tracker),
            "sheet_name": _get("sheet_name", tracker),
            "tracker_path": _get("tracker_path", tracker, "path"),
            "google_credentials_file": _get("google_credentials_file", google, "credentials_file"),
            "google_token_file": _get("google_token_file", google, "token_file"),
            "google_delegated_user": _get("google_delegated_user", google, "delegated_user"),
            "run_db_path": data.get("run_db_path"),
            "schedule_hour": _get("schedule_hour", schedule, "hour"),
            "schedule_interval_days": _get("schedule_interval_days", schedule, "interval_days"),
        }

        environ = os.environ if env is None else env
        for var, field in ENV_OVERRIDES.items():
            if environ.get(var):
                flat[field] = environ[var]

        return cls.model_validate({k: v for k, v in flat.items() if v is not None})

from __future__ import annotations

import os

from pydantic import BaseModel, Field

_ENV_FIELDS = {
    "CANVAS_BASE_URL": "base_url",
    "CANVAS_TIMEOUT": "timeout",
    "CANVAS_MAX_PAGES": "max_pages",
    "CANVAS_RETRIES": "retries",
}


class FetchSettings(BaseModel):
    base_url: str = "https://westminster.instructure.com"
    timeout: float = Field(30.0, gt=0)
    # None means follow next links until the server stops sending them.
    max_pages: int | None = Field(None, ge=1)
    retries: int = Field(1, ge=1)
    user_agent: str = "canvas-fetch"

    @classmethod
    def from_env(cls, **overrides) -> "FetchSettings":
        """Build settings from CANVAS_* variables; non-None overrides win."""
        values: dict[str, object] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def api_url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

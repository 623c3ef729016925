from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _templates_root() -> Path:
    env_root = os.getenv("TEMPLATES_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "templates"


def _cors_origins() -> list[str]:
    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    return origins or ["http://localhost:5173", "http://127.0.0.1:5173"]


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: str | None = None
    supabase_key: str | None = None
    template_bucket: str = "templates"
    templates_root: Path = field(default_factory=_templates_root)
    mirror_function_url: str | None = None
    render_timeout: float = 5.0
    http_timeout: float = 30.0
    cors_origins: list[str] = field(default_factory=_cors_origins)

    @property
    def hosted(self) -> bool:
        """True when the hosted record/template store is configured."""

        return bool(self.supabase_url and self.supabase_key)


def load_settings() -> Settings:
    """Read settings from the process environment."""

    supabase_url = (os.getenv("SUPABASE_URL") or "").rstrip("/") or None
    mirror_url = os.getenv("MIRROR_FUNCTION_URL")
    if not mirror_url and supabase_url:
        mirror_url = f"{supabase_url}/functions/v1/sync-google-sheets"
    return Settings(
        supabase_url=supabase_url,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        template_bucket=os.getenv("SUPABASE_TEMPLATE_BUCKET") or "templates",
        templates_root=_templates_root(),
        mirror_function_url=mirror_url or None,
        render_timeout=_float_env("RENDER_TIMEOUT_SECONDS", 5.0),
        http_timeout=_float_env("HTTP_TIMEOUT_SECONDS", 30.0),
        cors_origins=_cors_origins(),
    )

"""Runtime settings.

Read from the process environment, with a ``.env`` file at the project
root loaded first.  Values already set in the environment win over the
file.  ``get_settings()`` builds the ``Settings`` once per process.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from storefront.domain.model.value_objects import ZERO_DECIMAL_CURRENCIES

ROOT_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_bool(*keys: str, default: bool) -> bool:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


def _get_set(*keys: str, default: frozenset[str]) -> frozenset[str]:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return frozenset(code.strip().upper() for code in v.split(",") if code.strip())


@dataclass(frozen=True)
class Settings:
    data_file: Path
    currency: str
    zero_decimal_currencies: frozenset[str]
    base_url: str
    stripe_api_key: str
    stripe_webhook_secret: str
    webhook_tolerance_seconds: int
    smtp_host: str
    smtp_port: int
    smtp_username: str
    smtp_password: str
    smtp_use_tls: bool
    mail_from: str
    mail_from_name: str
    log_level: str
    log_json: bool

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            data_file=Path(
                _get_env(
                    "STOREFRONT_DATA_FILE",
                    "DATA_FILE",
                    default=str(ROOT_DIR / "data" / "store.json"),
                )
            ),
            currency=(_get_env("STOREFRONT_CURRENCY", "CURRENCY", default="VND") or "VND").upper(),
            zero_decimal_currencies=_get_set(
                "ZERO_DECIMAL_CURRENCIES", default=ZERO_DECIMAL_CURRENCIES
            ),
            base_url=(
                _get_env("STOREFRONT_BASE_URL", "BASE_URL", default="http://localhost:8000")
                or "http://localhost:8000"
            ).rstrip("/"),
            stripe_api_key=_get_env("STRIPE_SECRET_KEY", "STRIPE_API_KEY", default="") or "",
            stripe_webhook_secret=_get_env("STRIPE_WEBHOOK_SECRET", default="") or "",
            webhook_tolerance_seconds=_get_int("STRIPE_WEBHOOK_TOLERANCE", default=300),
            smtp_host=_get_env("SMTP_HOST", default="") or "",
            smtp_port=_get_int("SMTP_PORT", default=587),
            smtp_username=_get_env("SMTP_USERNAME", "SMTP_USER", default="") or "",
            smtp_password=_get_env("SMTP_PASSWORD", default="") or "",
            smtp_use_tls=_get_bool("SMTP_USE_TLS", default=True),
            mail_from=_get_env("MAIL_FROM", default="no-reply@eyewear.local") or "no-reply@eyewear.local",
            mail_from_name=_get_env("MAIL_FROM_NAME", default="Eyewear Store") or "Eyewear Store",
            log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
            log_json=_get_bool("LOG_JSON", default=False),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

"""
Decision service configuration.

Loaded once from the environment (ConfigMap/Secret friendly) and passed by reference
into every validation; nothing here changes after startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

DEFAULT_TEMPLATE_PATH = str(Path(__file__).resolve().parents[1] / "templates" / "validationRequest.xml")


def _env_str(name: str, default: str) -> str:
    return (os.getenv(name, "") or "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _env_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        v = float(raw)
    except Exception:
        return None
    return v if v > 0 else None


@dataclass(frozen=True)
class AccessConfig:
    # Decision service endpoint
    protocol: str = "http"
    host: str = "localhost"
    port: int = 7070
    path: str = "/pdp/v3"

    # Request template resource
    template_path: str = DEFAULT_TEMPLATE_PATH

    # None keeps the transport default (no explicit timeout).
    timeout_seconds: Optional[float] = None

    # Inbound headers carrying the caller identity
    token_header: str = "x-auth-token"
    organization_header: str = "fiware-service"

    @property
    def endpoint_url(self) -> str:
        path = self.path if self.path.startswith("/") else "/" + self.path
        return f"{self.protocol}://{self.host}:{self.port}{path}"


@lru_cache(maxsize=1)
def load_access_config() -> AccessConfig:
    """
    Load decision service settings from env.

    Recommended vars:
    - ACCESS_PROTOCOL=http|https
    - ACCESS_HOST=keypass.default.svc
    - ACCESS_PORT=7070
    - ACCESS_PATH=/pdp/v3
    - ACCESS_TEMPLATE_PATH=/etc/pep/validationRequest.xml
    - ACCESS_TIMEOUT_SECONDS=10 (unset: no explicit timeout)
    - ACCESS_TOKEN_HEADER=x-auth-token
    - ACCESS_ORGANIZATION_HEADER=fiware-service
    """
    protocol = _env_str("ACCESS_PROTOCOL", "http").lower()
    if protocol not in ("http", "https"):
        protocol = "http"

    return AccessConfig(
        protocol=protocol,
        host=_env_str("ACCESS_HOST", "localhost"),
        port=max(1, min(_env_int("ACCESS_PORT", 7070), 65535)),
        path=_env_str("ACCESS_PATH", "/pdp/v3"),
        template_path=_env_str("ACCESS_TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH),
        timeout_seconds=_env_float("ACCESS_TIMEOUT_SECONDS"),
        token_header=_env_str("ACCESS_TOKEN_HEADER", "x-auth-token").lower(),
        organization_header=_env_str("ACCESS_ORGANIZATION_HEADER", "fiware-service").lower(),
    )

from __future__ import annotations


def mask_token(token: str | None, *, keep: int = 4) -> str:
    """
    Best-effort token masking for logs: keep a short prefix so operators can correlate
    requests without the credential ending up in log storage.
    """
    t = (token or "").strip()
    if not t:
        return "<none>"
    if len(t) <= keep * 2:
        return "[REDACTED]"
    return t[:keep] + "...[REDACTED]"

# fil: src/services/api_keys.py
"""
Provider API keys (e.g. for a document-extraction service).

Rotating a key deactivates the provider's older keys and inserts the new
one, so there is at most one active key per provider afterwards.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from src.server.models import ApiKey
from src.services.errors import BadRequest, NotFound

MASK = "••••"


def _stderr(msg: str) -> None:
    print(f"[api_keys] {msg}", file=sys.stderr)


def mask_key(key_value: Optional[str]) -> str:
    return f"{(key_value or '')[:4]}{MASK}"


def key_to_dict(k: ApiKey) -> Dict[str, Any]:
    # key_value itself never leaves the server
    return {
        "id": k.id,
        "provider": k.provider,
        "key_preview": mask_key(k.key_value),
        "active": k.active,
        "created_at": k.created_at.isoformat() if k.created_at else None,
        "updated_at": k.updated_at.isoformat() if k.updated_at else None,
    }


def list_keys(session: Session) -> List[ApiKey]:
    stmt = select(ApiKey).order_by(ApiKey.updated_at.desc(), ApiKey.id.desc())
    return list(session.exec(stmt).all())


def rotate_key(session: Session, provider: Optional[str], key_value: Optional[str], active: bool = True) -> Dict[str, Any]:
    """
    Returns {"rotated": <deactivated count>, "inserted": <new id>}.
    """
    provider = (provider or "").strip()
    key_value = (key_value or "").strip()
    if not provider or not key_value:
        raise BadRequest("missing_fields")

    now = datetime.now(timezone.utc)
    rotated = 0
    for k in session.exec(select(ApiKey).where(ApiKey.provider == provider, ApiKey.active == True)).all():  # noqa: E712
        k.active = False
        k.updated_at = now
        session.add(k)
        rotated += 1

    new_key = ApiKey(provider=provider, key_value=key_value, active=bool(active), created_at=now, updated_at=now)
    session.add(new_key)
    session.commit()
    session.refresh(new_key)

    _stderr(f"Rotated key for {provider} ({rotated} deactivated)")
    return {"rotated": rotated, "inserted": new_key.id}


def set_active(session: Session, key_id: int, active: bool) -> ApiKey:
    k = session.get(ApiKey, key_id)
    if k is None:
        raise NotFound("API key not found")
    k.active = bool(active)
    k.updated_at = datetime.now(timezone.utc)
    session.add(k)
    session.commit()
    session.refresh(k)
    return k


def get_active_api_key(session: Session, provider: str) -> Optional[str]:
    """
    Newest active key for a provider, or None.
    """
    stmt = (
        select(ApiKey)
        .where(ApiKey.provider == provider, ApiKey.active == True)  # noqa: E712
        .order_by(ApiKey.updated_at.desc(), ApiKey.id.desc())
    )
    k = session.exec(stmt).first()
    return k.key_value if k else None

# backend/utils/audit.py
import logging
from typing import Optional
from fastapi import Request
from sqlalchemy.orm import Session
from models.log import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


def write_log(db: Session, *, action, resource, user_id=None, session_id=None,
              status="SUCCESS", request: Optional[Request] = None, meta=None):
    """Persist one audit entry. Commits on its own, call it after the business commit."""
    entry = AuditLog(
        user_id=user_id,
        session_id=session_id,
        action=action,
        resource=resource,
        status=status,
        ip=client_ip(request),
        meta=meta or {},
    )
    db.add(entry)
    db.commit()
    logger.info("%s %s %s user=%s meta=%s", resource, action, status, user_id, entry.meta)

import logging

from sqlalchemy.orm import Session
from models.audit import AuditLog

logger = logging.getLogger(__name__)


def write_log(db: Session, *, user_id, action, resource, resource_id=None, status="SUCCESS", ip=None, meta=None):
    """Persist an audit entry and commit it on the given session."""
    entry = AuditLog(
        user_id=user_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        status=status,
        ip=ip,
        meta=meta or {},
    )
    db.add(entry)
    db.commit()

    log = logger.warning if status != "SUCCESS" else logger.info
    log("%s %s%s %s user=%s", action, resource, f"/{resource_id}" if resource_id is not None else "", status, user_id)
    return entry

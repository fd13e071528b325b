from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog


def log_event(
    s: Session,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    *,
    user_id: int | None = None,
    username: str | None = None,
    client_id: int | None = None,
    details: dict | None = None,
    commit: bool = True,
) -> AuditLog:
    """Record an audit row. With commit=False the row joins the caller's transaction."""
    row = AuditLog(
        user_id=user_id,
        username=username,
        client_id=client_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    s.add(row)
    if commit:
        s.commit()
    else:
        s.flush()
    return row

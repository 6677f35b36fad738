import logging
from typing import Any, Dict, Optional

from django.db import transaction

from api.models import AuditEvent, User

logger = logging.getLogger(__name__)


def log_action(*, user=None, action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None) -> Optional[AuditEvent]:
    """Persist an audit event.

    ``user`` may be a :class:`User`, a principal or None.  A failed write
    is logged and swallowed so auditing never breaks the request.  The
    insert runs in its own savepoint so a failure does not poison an
    enclosing transaction.
    """
    user_id = getattr(user, 'id', None)
    try:
        with transaction.atomic():
            return AuditEvent.objects.create(
                user_id=user_id if user_id and User.objects.filter(pk=user_id).exists() else None,
                action=action,
                object_type=object_type, object_id=object_id,
                detail=detail or {},
            )
    except Exception:
        logger.exception("Failed to write audit event %s", action)
        return None

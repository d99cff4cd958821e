"""
Persistent audit trail of logins and register changes.
"""
import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model

from records.models import AuditEvent

User = get_user_model()
logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None) -> AuditEvent:
    """Store one event; anonymous actors (failed logins) are kept as NULL."""
    actor = user if isinstance(user, User) and user.pk else None
    event = AuditEvent.objects.create(
        user=actor,
        action=action,
        object_type=object_type,
        object_id=object_id,
        detail=detail or {},
    )
    logger.debug('audit %s %s#%s by %s', action, object_type or '-', object_id or '-',
                 getattr(actor, 'username', 'anonymous'))
    return event

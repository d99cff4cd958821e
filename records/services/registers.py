"""
Create, update and delete helpers shared by every register.

Each helper stamps the audit columns, writes an :class:`AuditEvent` and
logs the operation.  ``data`` is the ``validated_data`` of one of the
input serializers, already keyed by model attribute.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Type

from django.db import models, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from records.services.audit import log_action

logger = logging.getLogger(__name__)


def _actor(user):
    return user if user is not None and getattr(user, 'is_authenticated', False) else None


def get_record_or_404(model: Type[models.Model], pk: int, label: str = 'record'):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise NotFound(f'{label} not found')
    return obj


@transaction.atomic
def create_record(model: Type[models.Model], *, user, data: Dict[str, Any], object_type: str):
    actor = _actor(user)
    obj = model.objects.create(created_by=actor, **data)
    log_action(user=actor, action=f'{object_type}_create', object_type=object_type, object_id=obj.pk)
    logger.info('%s #%s created by %s', object_type, obj.pk, getattr(actor, 'username', '-'))
    return obj


@transaction.atomic
def update_record(obj: models.Model, *, user, data: Dict[str, Any], object_type: str):
    actor = _actor(user)
    for field, value in data.items():
        setattr(obj, field, value)
    obj.updated_at = timezone.now()
    obj.updated_by = actor
    obj.save()
    log_action(user=actor, action=f'{object_type}_update', object_type=object_type, object_id=obj.pk,
               detail={'fields': sorted(data)})
    logger.info('%s #%s updated by %s', object_type, obj.pk, getattr(actor, 'username', '-'))
    return obj


@transaction.atomic
def delete_record(obj: models.Model, *, user, object_type: str) -> None:
    actor = _actor(user)
    pk = obj.pk
    obj.delete()
    log_action(user=actor, action=f'{object_type}_delete', object_type=object_type, object_id=pk)
    logger.info('%s #%s deleted by %s', object_type, pk, getattr(actor, 'username', '-'))


def audit_columns(obj) -> Dict[str, Any]:
    """The four audit columns as they appear in API payloads."""
    return {
        'createdAt': obj.created_at.isoformat() if obj.created_at else None,
        'createdBy': obj.created_by_id,
        'updatedAt': obj.updated_at.isoformat() if obj.updated_at else None,
        'updatedBy': obj.updated_by_id,
    }

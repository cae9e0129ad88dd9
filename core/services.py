"""
Core — Audit Service

Writes audit log entries from any app and snapshots model instances
into JSON-safe dicts.

@file core/services.py
"""

import logging
import uuid
from decimal import Decimal
from typing import Any

from django.forms.models import model_to_dict

from core.models import AuditLog

logger = logging.getLogger('waretrack')


class AuditService:
    """Centralised audit logging for write operations and admin flags."""

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str = '',
    ) -> AuditLog:
        return AuditLog.objects.create(
            actor=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=AuditService.jsonable(old_values),
            new_values=AuditService.jsonable(new_values),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @staticmethod
    def jsonable(values: dict[str, Any] | None) -> dict[str, Any] | None:
        """Stringify Decimal / UUID values so the dict fits a JSON column."""
        if values is None:
            return None
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if isinstance(value, Decimal):
                cleaned[key] = str(value)
            elif isinstance(value, uuid.UUID):
                cleaned[key] = str(value)
            else:
                cleaned[key] = value
        return cleaned

    @staticmethod
    def snapshot(instance, fields=None) -> dict[str, Any]:
        """
        Serialise a model instance to a plain dict suitable for JSON
        storage. DateTimes are ISO-formatted; UUIDs stringified;
        M2M / querysets reduced to lists of PKs.
        """
        data = model_to_dict(instance, fields=fields)
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                cleaned[key] = None
            elif isinstance(value, Decimal):
                cleaned[key] = str(value)
            elif hasattr(value, 'isoformat'):
                cleaned[key] = value.isoformat()
            elif hasattr(value, 'hex'):
                cleaned[key] = str(value)
            elif hasattr(value, 'all'):
                cleaned[key] = [str(obj.pk) for obj in value.all()]
            elif isinstance(value, (list, tuple)):
                cleaned[key] = [str(v.pk) if hasattr(v, 'pk') else v for v in value]
            else:
                cleaned[key] = value
        return cleaned

    @staticmethod
    def get_client_ip(request) -> str | None:
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')

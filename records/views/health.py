"""
Liveness check used by the reverse proxy and the deployment scripts.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import connections
from django.db.utils import DatabaseError
from django.http import JsonResponse
from django_redis.exceptions import ConnectionInterrupted
from redis.exceptions import RedisError

from records.services import localtime

logger = logging.getLogger(__name__)


def _cache_alive() -> bool:
    try:
        cache.set('records:healthz', 1, 5)
        return cache.get('records:healthz') == 1
    except (ConnectionInterrupted, RedisError) as e:
        logger.warning('healthz: cache unreachable: %s', e)
        return False


def healthz(request):
    payload = {
        'ok': True,
        'hospital': settings.HOSPITAL_NAME,
        'localTime': localtime.format_local(localtime.now_local(), '%Y-%m-%d %H:%M'),
    }
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError:
        logger.exception('healthz: database unreachable')
        return JsonResponse({**payload, 'ok': False, 'db': False, 'error': 'database unreachable'}, status=500)
    payload['db'] = bool(row and row[0] == 1)
    # locmem always answers; a Redis outage shows up here
    payload['cache'] = _cache_alive()
    if not payload['cache']:
        payload['ok'] = False
        return JsonResponse(payload, status=503)
    return JsonResponse(payload)

import logging

from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = 'Erreur interne du serveur'


def _error_code(exc, status_code: int) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return 'validation_error'
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return 'unauthorized'
    if isinstance(exc, exceptions.PermissionDenied):
        return 'forbidden'
    if isinstance(exc, exceptions.NotFound) or status_code == 404:
        return 'not_found'
    if isinstance(exc, exceptions.Throttled):
        return 'throttled'
    return 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view'), exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': SERVER_ERROR_MESSAGE}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    return Response(
        {'ok': False, 'error': {'code': _error_code(exc, resp.status_code), 'message': detail}},
        status=resp.status_code,
        headers={k: resp[k] for k in ('WWW-Authenticate', 'Retry-After', 'Allow') if resp.has_header(k)},
    )

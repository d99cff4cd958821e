"""
Authentication views and helper functions.

This module defines the login endpoint used by the front-end together
with JWT refresh and logout.  Keeping these views apart from the
authentication class (see ``records.authentication``) prevents circular
imports when Django REST framework initialises authentication classes.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from records.serializers.auth import LoginSerializer
from records.services.audit import log_action
from records.services.users import serialize_department

from .models import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Username/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login with username/password.  The role always comes from the
    database; any role sent by the client is ignored.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=username, password=password)
    if not user:
        inactive = User.objects.filter(username=username, is_active=False).first()
        if inactive is not None and inactive.check_password(password):
            log_action(user=None, action='login', object_type='user', object_id=inactive.id,
                       detail={'result': 'inactive', 'ip': ip})
            return Response({'ok': False, 'detail': "Votre compte a été désactivé. Contactez l'administrateur."},
                            status=403)
        # only the username is recorded for failed attempts
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'username': username, 'ip': ip})
        logger.warning('failed login for %s from %s', username, ip)
        return Response({'ok': False, 'detail': "Nom d'utilisateur ou mot de passe incorrect"}, status=400)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)

    payload: dict[str, object] = {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'role': user.role,
            'departments': [serialize_department(d) for d in user.departments.all()],
        },
    }
    return Response(payload, status=200)

# ScopedRateThrottle reads the scope from the view class @api_view generated
login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist current user's refresh tokens (all or a given one)."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
        # only the owner of a refresh token may revoke it
        if str(token.get(jwt_settings.USER_ID_CLAIM)) != str(request.user.pk):
            logger.warning('user %s tried to revoke a token of user %s', request.user.pk,
                           token.get(jwt_settings.USER_ID_CLAIM))
            return Response({'ok': False, 'detail': 'Ce jeton appartient à un autre utilisateur'}, status=403)
        token.blacklist()
        count = 1
    else:
        for outstanding in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=outstanding)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})

"""
Custom authentication backend for token-based auth.

This module defines a subclass of Django REST framework's
``TokenAuthentication`` that pins the ``keyword`` used in the
``Authorization`` header.  Keeping it apart from the views avoids
circular imports when the REST framework loads authentication classes
during initialisation.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword.

    DRF already rejects tokens that belong to deactivated users, so a
    user switched off by an administrator loses access on the next
    request.
    """

    keyword = 'Token'

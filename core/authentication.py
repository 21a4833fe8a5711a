"""
JWT cookie authentication.

Session tokens are simplejwt access tokens carried in the ``auth-token``
HTTP-only cookie. A bearer ``Authorization`` header is accepted as a
fallback for non-browser clients.
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)

User = get_user_model()


def issue_token(user):
    """Create a signed access token carrying the user's role."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    return str(token)


def set_auth_cookie(response, token):
    cookie = settings.AUTH_COOKIE
    response.set_cookie(
        cookie['NAME'],
        token,
        max_age=cookie['MAX_AGE'],
        httponly=cookie['HTTPONLY'],
        secure=cookie['SECURE'],
        samesite=cookie['SAMESITE'],
        path='/',
    )
    return response


def clear_auth_cookie(response):
    cookie = settings.AUTH_COOKIE
    response.delete_cookie(cookie['NAME'], path='/', samesite=cookie['SAMESITE'])
    return response


class CookieJWTAuthentication(JWTAuthentication):
    """
    Authenticate from the ``auth-token`` cookie, then the bearer header.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.AUTH_COOKIE['NAME'])

        if raw_token is None:
            header = self.get_header(request)
            if header is None:
                return None
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except InvalidToken:
            logger.debug("Rejected invalid or expired session token")
            raise
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = User.objects.select_related(
                'assigned_province', 'assigned_district'
            ).get(**{api_settings.USER_ID_FIELD: user_id})
        except (User.DoesNotExist, ValueError, TokenError):
            raise AuthenticationFailed('User not found', code='user_not_found')

        if not user.is_active:
            raise AuthenticationFailed('User is inactive', code='user_inactive')

        return user

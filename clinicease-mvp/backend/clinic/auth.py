"""
认证门禁。

登录 / 注册 / 找回密码全部由外部身份提供方处理，后端只问一个问题：
"这个 bearer token 有效吗？" → 有效返回 uid，无效返回 None。

settings.IDENTITY_PROVIDER:
  static  : StaticTokenProvider    (CLINIC_API_TOKENS 白名单，开发 / 测试)
  firebase: FirebaseIdentityProvider (accounts:lookup 校验 ID token)
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from django.conf import settings
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)


class IdentityProvider(ABC):

    @abstractmethod
    def verify(self, token: str) -> Optional[str]:
        """token 有效 → 用户 uid；否则 None。"""


class StaticTokenProvider(IdentityProvider):

    def verify(self, token):
        if token in settings.CLINIC_API_TOKENS:
            return f"static-{settings.CLINIC_API_TOKENS.index(token)}"
        return None


class FirebaseIdentityProvider(IdentityProvider):

    LOOKUP_URL = "https://identitytoolkit.googleapis.com/v1/accounts:lookup"

    def verify(self, token):
        try:
            response = requests.post(
                self.LOOKUP_URL,
                params={"key": settings.FIREBASE_API_KEY},
                json={"idToken": token},
                timeout=5,
            )
        except requests.RequestException as exc:
            logger.warning("Identity provider unreachable: %s", exc)
            return None

        if response.status_code != 200:
            return None
        try:
            users = response.json().get("users") or []
        except ValueError:
            logger.warning("Identity provider returned a non-JSON body")
            return None
        return users[0].get("localId") if users else None


def get_identity_provider() -> IdentityProvider:
    registry = {
        "static":   StaticTokenProvider,
        "firebase": FirebaseIdentityProvider,
    }
    provider = getattr(settings, "IDENTITY_PROVIDER", "static")
    provider_cls = registry.get(provider)
    if provider_cls is None:
        raise ValueError(
            f"Unknown IDENTITY_PROVIDER: {provider!r}. "
            f"Known providers: {list(registry.keys())}"
        )
    return provider_cls()


class ClinicUser:
    """认证通过的调用方。只有 uid，没有别的权限信息。"""

    is_authenticated = True

    def __init__(self, uid: str):
        self.uid = uid

    def __str__(self):
        return self.uid


class BearerTokenAuthentication(BaseAuthentication):
    keyword = b"bearer"

    def authenticate(self, request):
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword:
            return None
        if len(parts) != 2:
            raise AuthenticationFailed("Invalid Authorization header.")

        token = parts[1].decode("utf-8", errors="replace")
        uid = get_identity_provider().verify(token)
        if uid is None:
            raise AuthenticationFailed("Invalid or expired token.")
        return ClinicUser(uid), token

    def authenticate_header(self, request):
        return "Bearer"

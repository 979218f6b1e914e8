"""Principal resolution.

Credentials are verified upstream by the auth gateway, which forwards the
caller's identity in trusted headers. This module only turns those headers
into a :class:`~events.domain.Principal`.
"""

from uuid import UUID

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from events.domain import Principal, Role

PRINCIPAL_ID_HEADER = "HTTP_X_PRINCIPAL_ID"
PRINCIPAL_ROLE_HEADER = "HTTP_X_PRINCIPAL_ROLE"


class GatewayUser:
    """Minimal user object so DRF permission classes work with a Principal."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, principal: Principal) -> None:
        self.principal = principal

    @property
    def pk(self) -> UUID:
        return self.principal.id

    def __str__(self) -> str:
        return f"{self.principal.role.value}:{self.principal.id}"


class GatewayPrincipalAuthentication(BaseAuthentication):
    def authenticate(self, request: Request) -> tuple[GatewayUser, None] | None:
        raw_id = request.META.get(PRINCIPAL_ID_HEADER)
        if not raw_id:
            return None
        try:
            principal = Principal(
                id=UUID(raw_id),
                role=Role(request.META.get(PRINCIPAL_ROLE_HEADER, Role.USER.value).lower()),
            )
        except ValueError as exc:
            raise exceptions.AuthenticationFailed("Invalid principal headers") from exc
        return GatewayUser(principal), None

    def authenticate_header(self, request: Request) -> str:
        return "Gateway"


def principal_of(request: Request) -> Principal | None:
    user = getattr(request, "user", None)
    if isinstance(user, GatewayUser):
        return user.principal
    return None

"""FastAPI dependencies for the caller's identity.

Authentication happens upstream; the gateway forwards the authenticated
user in trusted headers.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status


class Role(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def get_current_identity(
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> Identity:
    """
    Read the identity headers set by the gateway.

    Raises:
        HTTPException: 401 if the user header is missing or malformed
    """
    if x_user_id is None or not x_user_id.isdigit() or int(x_user_id) <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-User-Id header",
        )
    try:
        role = Role((x_user_role or Role.MEMBER.value).lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-Role header",
        ) from None
    return Identity(user_id=int(x_user_id), role=role)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


def require_admin(identity: CurrentIdentity) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return identity


AdminIdentity = Annotated[Identity, Depends(require_admin)]

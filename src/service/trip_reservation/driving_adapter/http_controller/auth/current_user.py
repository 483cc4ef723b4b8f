"""
Caller identity

Authentication happens upstream (gateway). The gateway forwards the
authenticated user id in the X-User-Id header and, optionally, the role in
X-User-Role. This service trusts those headers and only checks that an
identity is present.
"""

from typing import Optional

import attrs
from fastapi import Header

from src.platform.exception.exceptions import AuthenticationError


@attrs.define(frozen=True)
class CurrentUserInfo:
    """Current user information for controllers"""

    user_id: int
    role: Optional[str] = None


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUserInfo:
    if x_user_id is None or not x_user_id.strip().isdigit():
        raise AuthenticationError('Missing or invalid X-User-Id header')
    return CurrentUserInfo(user_id=int(x_user_id), role=x_user_role)

"""Identity context: resolves the authenticated actor of a request.

Business services never read ``request.user`` themselves; views call
``current_user`` once and pass the resulting ``UserId`` explicitly into
every operation.
"""

from __future__ import annotations

from typing import Any, NewType

from modules.core.exceptions import Unauthenticated

UserId = NewType("UserId", int)


def current_user(request: Any) -> UserId:
    """Return the primary key of the authenticated user.

    Raises:
        Unauthenticated: when the request carries no authenticated user.
    """
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated or user.pk is None:
        raise Unauthenticated("Authentication credentials were not provided.")
    return UserId(user.pk)

# userauth/graphql/permissions.py

from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info


class IsAuthenticated(BasePermission):
    message = "not authenticated"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context.user_id is not None

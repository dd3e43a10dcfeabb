"""Endpoint catalog of the quiz administration API."""

from __future__ import annotations

from enum import Enum
from typing import Any

PLACEHOLDER = "{}"


def placeholder_count(template: str) -> int:
    return template.count(PLACEHOLDER)


def format_endpoint(template: str, *args: Any) -> str:
    """
    Substitute positional '{}' placeholders in an endpoint template.

    Example:
        format_endpoint("/admin/quiz/{}/name", 5) -> "/admin/quiz/5/name"

    Raises:
        ValueError: If the number of arguments does not match the placeholders
    """
    expected = placeholder_count(template)
    if len(args) != expected:
        raise ValueError(
            f"Endpoint '{template}' takes {expected} argument(s), got {len(args)}"
        )

    parts = template.split(PLACEHOLDER)
    result = parts[0]
    for arg, part in zip(args, parts[1:]):
        result += str(arg) + part
    return result


class Endpoint(Enum):
    ADMIN_AUTH_REGISTER = "/admin/auth/register"
    ADMIN_AUTH_LOGIN = "/admin/auth/login"
    ADMIN_AUTH_LOGOUT = "/admin/auth/logout"
    ADMIN_USER_DETAILS = "/admin/user/details"
    ADMIN_USER_PASSWORD = "/admin/user/password"
    ADMIN_QUIZ_LIST = "/admin/quiz/list"
    ADMIN_QUIZ = "/admin/quiz"
    ADMIN_QUIZ_ID = "/admin/quiz/{}"
    ADMIN_QUIZ_ID_NAME = "/admin/quiz/{}/name"
    ADMIN_QUIZ_ID_DESCRIPTION = "/admin/quiz/{}/description"
    ADMIN_QUIZ_TRASH = "/admin/quiz/trash"
    ADMIN_QUIZ_ID_RESTORE = "/admin/quiz/{}/restore"
    ADMIN_QUIZ_TRASH_EMPTY = "/admin/quiz/trash/empty"
    ADMIN_QUIZ_ID_TRANSFER = "/admin/quiz/{}/transfer"
    # Test-only reset hook, not part of the public API
    CLEAR = "/clear"

    @property
    def placeholders(self) -> int:
        return placeholder_count(self.value)

    def format(self, *args: Any) -> str:
        return format_endpoint(self.value, *args)

    @classmethod
    def lookup(cls, name_or_path: str) -> Endpoint:
        """Find an endpoint by member name ('ADMIN_QUIZ_ID') or path template."""
        try:
            return cls[name_or_path.upper()]
        except KeyError:
            pass
        try:
            return cls(name_or_path)
        except ValueError:
            raise ValueError(f"Unknown endpoint: {name_or_path}") from None

"""
Role hierarchy used by every permission check.

Roles are totally ordered by their integer value; a caller satisfies a
requirement when ``caller_role >= required_role``.
"""

from enum import IntEnum


class Role(IntEnum):
    GUEST = 0
    NORMAL = 1
    VIP = 2
    ADMIN = 3
    SUPER_ADMIN = 4

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def satisfies(self, required: "Role") -> bool:
        return self >= required


_DISPLAY_NAMES = {
    Role.GUEST: "Guest",
    Role.NORMAL: "Normal User",
    Role.VIP: "VIP User",
    Role.ADMIN: "Administrator",
    Role.SUPER_ADMIN: "Super Administrator",
}

DEFAULT_ROLE = Role.NORMAL

# app/access/roles.py
"""
Role enumerations.

The call-center console and the main dashboard each have their own three-level
hierarchy. They look alike but carry different privileges, so they are two
separate types and never compared with each other.
"""
import enum


class RankedRole(enum.Enum):
    """Ordered role; the first member is the lowest privilege."""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    @classmethod
    def top(cls) -> "RankedRole":
        return list(cls)[-1]

    def _check_same(self, other) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )

    def __lt__(self, other):
        self._check_same(other)
        return self.rank < other.rank

    def __le__(self, other):
        self._check_same(other)
        return self.rank <= other.rank

    def __gt__(self, other):
        self._check_same(other)
        return self.rank > other.rank

    def __ge__(self, other):
        self._check_same(other)
        return self.rank >= other.rank


class CallCenterRole(RankedRole):
    AGENT = "agent"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"


class AdminRole(RankedRole):
    OPERATIONS_STAFF = "operations_staff"
    SUPERVISOR = "supervisor"
    ROOT_ADMIN = "root_admin"

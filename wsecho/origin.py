from typing import Callable, Iterable, Optional

OriginCheck = Callable[[Optional[str]], bool]


def _normalize(origin: str) -> str:
    return origin.strip().rstrip("/").lower()


class OriginPolicy:
    """
    Decides whether an upgrade request's Origin header is acceptable.

    "*" accepts everything. Requests without an Origin header come from
    non-browser clients and are always accepted.
    """

    def __init__(self, allowed: Iterable[str] = ("*",)):
        allowed = [a for a in allowed if a and a.strip()]
        self.allow_all = "*" in allowed
        self.allowed = {_normalize(a) for a in allowed if a != "*"}

    @classmethod
    def from_list(cls, origins: Iterable[str]) -> "OriginPolicy":
        return cls(origins)

    def __call__(self, origin: Optional[str]) -> bool:
        if self.allow_all or origin is None:
            return True
        return _normalize(origin) in self.allowed

    def __repr__(self):
        if self.allow_all:
            return "OriginPolicy(*)"
        return f"OriginPolicy({sorted(self.allowed)})"

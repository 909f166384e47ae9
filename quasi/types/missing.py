from __future__ import annotations


class MissingArgType:
    """Bound to a formal parameter the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "<missing>"
    def __bool__(self): return False

    def __eq__(self, other):
        return isinstance(other, MissingArgType)

    def __hash__(self):
        return hash(MissingArgType)


MISSING = MissingArgType()

from __future__ import annotations

from typing import Mapping, Optional

from quasi import QuasiValue
from quasi.types.environment import Environment


class DataMask(Environment):
    """An overlay consulted before a quoted closure's own scope.

    Masks are built once per tidy evaluation. `rebase` gives a sibling mask over
    the same bindings under a different parent, which is how an embedded quoted
    closure keeps seeing the mask while resolving everything else in its own scope.
    """

    __slots__ = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, QuasiValue], outer: Optional[Environment] = None) -> DataMask:
        return cls(mapping, outer=outer)

    def rebase(self, outer: Environment) -> DataMask:
        mask = DataMask(outer=outer)
        # Shared dict: the mask is one set of bindings seen from several scopes
        mask.vars = self.vars
        return mask


def nearest_mask(env: Environment) -> DataMask | None:
    for scope in env.chain():
        if isinstance(scope, DataMask):
            return scope
    return None

"""RefResolver - Resolves $ref pointers in OpenAPI specifications."""

from __future__ import annotations

from typing import Any


class UnresolvedRef(LookupError):
    """A $ref pointer does not lead anywhere in the document."""

    def __init__(self, ref: str) -> None:
        self.ref = ref
        super().__init__(f"Unresolved reference '{ref}'")


class RefResolver:
    """Resolves JSON $ref pointers within an OpenAPI specification.

    Supports internal references (starting with "#/") to any location,
    typically:
    - #/components/schemas/...      (OpenAPI 3)
    - #/components/parameters/...
    - #/components/requestBodies/...
    - #/definitions/...             (Swagger 2.0)
    - #/parameters/...

    JSON pointer escapes (``~0`` and ``~1``) are honoured. Resolved targets are
    cached.

    Example::

        resolver = RefResolver(spec)
        schema = resolver.resolve("#/components/schemas/User")

    Args:
        spec: The full OpenAPI specification dictionary.
    """

    def __init__(self, spec: dict[str, Any]) -> None:
        self._spec = spec
        self._cache: dict[str, dict[str, Any]] = {}

    def resolve(self, ref: str) -> dict[str, Any]:
        """Resolve a $ref pointer to its target.

        Raises:
            UnresolvedRef: If the pointer is external or leads nowhere.
        """
        if ref in self._cache:
            return self._cache[ref]

        if not ref.startswith("#/"):
            # External refs not supported
            raise UnresolvedRef(ref)

        current: Any = self._spec
        for raw in ref[2:].split("/"):
            part = raw.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                raise UnresolvedRef(ref)

        if not isinstance(current, dict):
            raise UnresolvedRef(ref)

        self._cache[ref] = current
        return current

    def resolve_object(self, obj: dict[str, Any]) -> dict[str, Any]:
        """Follow a chain of $ref objects (parameters, request bodies) to the target."""
        seen: set[str] = set()
        while "$ref" in obj:
            ref = obj["$ref"]
            if ref in seen:
                raise UnresolvedRef(ref)
            seen.add(ref)
            obj = self.resolve(ref)
        return obj


__all__ = ["RefResolver", "UnresolvedRef"]

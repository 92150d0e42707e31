"""Path lookups into decoded JSON bodies.

Two syntaxes are accepted:
- dotted: ``meta.next`` or ``data.items.0.id``
- JSON pointer: ``/meta/next`` (``~1`` and ``~0`` escapes supported)
"""

from typing import Any, List


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_path(path: str) -> List[str]:
    """Split a dotted or JSON pointer path into keys."""
    path = path.strip()
    if not path or path == "/":
        return []
    if path.startswith("/"):
        return [p.replace("~1", "/").replace("~0", "~") for p in path[1:].split("/")]
    return path.split(".")


def resolve_path(data: Any, path: str) -> Any:
    """Return the value at `path`, or MISSING when any step does not exist."""
    obj = data
    for key in split_path(path):
        if isinstance(obj, dict):
            if key not in obj:
                return MISSING
            obj = obj[key]
        elif isinstance(obj, list):
            try:
                obj = obj[int(key)]
            except (ValueError, IndexError):
                return MISSING
        else:
            return MISSING
    return obj


def is_absent(value: Any) -> bool:
    """True for values that mean "nothing here": missing, null, or blank string."""
    if value is MISSING or value is None:
        return True
    return isinstance(value, str) and not value.strip()

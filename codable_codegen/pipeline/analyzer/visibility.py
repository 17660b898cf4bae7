"""
Access level resolution for declarations.
"""

from __future__ import annotations

from .ir_nodes import Visibility


class VisibilityResolver:
    """Derives a declaration's access level from its name and the module's ``__all__``.

    A leading underscore makes a declaration private; a name listed in
    ``__all__`` makes it public; anything else is internal.
    """

    def __init__(self, exported_names: set[str] | None = None):
        self.exported_names = exported_names

    def resolve(self, name: str) -> Visibility:
        if name.startswith("_"):
            return Visibility.PRIVATE
        if self.exported_names is not None and name in self.exported_names:
            return Visibility.PUBLIC
        return Visibility.INTERNAL

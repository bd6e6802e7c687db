"""Path-keyed project config store with change handlers.

Handlers subscribe with a pattern such as ``formflow.stencils.{uid}``; each
``{token}`` matches one path segment and the matched values are passed to
the handler in ``ConfigEvent.token_matches``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy.orm import Session

from formflow.db.models import ProjectConfigItem

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{[a-zA-Z_]+\}")


@dataclass
class ConfigEvent:
    path: str
    token_matches: list[str] = field(default_factory=list)
    old_value: Any = None
    new_value: Any = None


ConfigHandler = Callable[[ConfigEvent], None]


def compile_pattern(pattern: str) -> re.Pattern:
    parts = TOKEN_PATTERN.split(pattern)
    regex = "([^.]+)".join(re.escape(part) for part in parts)
    return re.compile(f"^{regex}$")


class ProjectConfigStore:
    def __init__(self, db: Session):
        self.db = db
        self._change_handlers: list[tuple[re.Pattern, ConfigHandler]] = []
        self._remove_handlers: list[tuple[re.Pattern, ConfigHandler]] = []

    def on_change(self, pattern: str, handler: ConfigHandler) -> None:
        self._change_handlers.append((compile_pattern(pattern), handler))

    def on_remove(self, pattern: str, handler: ConfigHandler) -> None:
        self._remove_handlers.append((compile_pattern(pattern), handler))

    def get(self, path: str) -> Any:
        item = self.db.get(ProjectConfigItem, path)
        return item.value if item else None

    def get_all(self, prefix: str) -> dict[str, Any]:
        """Every value stored directly under ``prefix``, keyed by the remaining path."""
        items = (
            self.db.query(ProjectConfigItem)
            .filter(ProjectConfigItem.path.like(f"{prefix}.%"))
            .order_by(ProjectConfigItem.path)
            .all()
        )
        return {item.path[len(prefix) + 1:]: item.value for item in items}

    def set(self, path: str, value: Any) -> None:
        """
        Write ``value`` at ``path`` and run matching change handlers.

        Setting ``None`` removes the path. Handlers only run when the stored
        value actually changed; their exceptions propagate to the caller.
        """
        if value is None:
            self.remove(path)
            return

        item = self.db.get(ProjectConfigItem, path)
        old_value = item.value if item else None
        if item is None:
            item = ProjectConfigItem(path=path, value=value)
            self.db.add(item)
        else:
            item.value = value
        self.db.commit()

        if old_value == value:
            return
        self._dispatch(self._change_handlers, path, old_value, value)

    def remove(self, path: str) -> None:
        item = self.db.get(ProjectConfigItem, path)
        if item is None:
            return
        old_value = item.value
        self.db.delete(item)
        self.db.commit()
        self._dispatch(self._remove_handlers, path, old_value, None)

    def _dispatch(
        self,
        handlers: list[tuple[re.Pattern, ConfigHandler]],
        path: str,
        old_value: Any,
        new_value: Any,
    ) -> None:
        for pattern, handler in handlers:
            match = pattern.match(path)
            if not match:
                continue
            logger.debug("Applying config change for %s", path)
            handler(
                ConfigEvent(
                    path=path,
                    token_matches=list(match.groups()),
                    old_value=old_value,
                    new_value=new_value,
                )
            )

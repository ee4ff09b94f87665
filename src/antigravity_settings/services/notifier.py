"""Field change notifications.

Handlers are registered per dotted field path and run synchronously, in
registration order, whenever a commit or an immediate apply changes that
field's value (compared by equality). The store calls them before the
corresponding disk write, so UI effects such as a locale or theme switch are
never held up by I/O.
"""

import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Any

from antigravity_settings.models.config import AppConfig
from antigravity_settings.services.validator import get_field

logger = logging.getLogger(__name__)

FieldHandler = Callable[[str, Any, Any], None]


class ChangeNotifier:
    """Registry of per-field change handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[FieldHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def on_field(self, field: str, handler: FieldHandler) -> Callable[[], None]:
        """Register ``handler(field, old_value, new_value)`` for ``field``.

        Args:
            field: Dotted path, e.g. ``language`` or ``proxy.port``.
            handler: Callable run when the field's value changes.

        Returns:
            Callable that unregisters the handler.
        """
        with self._lock:
            self._handlers[field].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(field, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    @property
    def watched_fields(self) -> list[str]:
        """Fields with at least one handler."""
        with self._lock:
            return [field for field, handlers in self._handlers.items() if handlers]

    def notify(self, field: str, old_value: Any, new_value: Any) -> None:
        """Run handlers for ``field`` if the value changed.

        A failing handler is logged and does not stop the others.
        """
        if old_value == new_value:
            return
        with self._lock:
            handlers = list(self._handlers.get(field, []))
        for handler in handlers:
            try:
                handler(field, old_value, new_value)
            except Exception as e:
                logger.error(f"Change handler for {field} failed: {e}", exc_info=True)

    def notify_changes(
        self,
        old: AppConfig,
        new: AppConfig,
        only: Iterable[str] | None = None,
        exclude: Iterable[str] = (),
    ) -> list[str]:
        """Run handlers for every watched field that differs.

        Args:
            old: Previous snapshot.
            new: New snapshot.
            only: Restrict to these fields.
            exclude: Skip these fields.

        Returns:
            Watched fields that changed
        """
        fields = self.watched_fields
        if only is not None:
            allowed = set(only)
            fields = [field for field in fields if field in allowed]
        skipped = set(exclude)

        changed = []
        for field in fields:
            if field in skipped:
                continue
            try:
                old_value = get_field(old, field)
                new_value = get_field(new, field)
            except AttributeError:
                logger.warning(f"Handler registered for unknown field: {field}")
                continue
            if old_value != new_value:
                changed.append(field)
                self.notify(field, old_value, new_value)
        return changed

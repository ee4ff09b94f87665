"""Services for antigravity-settings."""

from antigravity_settings.services.backend import Backend, LocalBackend
from antigravity_settings.services.config_store import (
    ConfigStore,
    get_config_store,
    load_config_store,
    resolve_data_dir,
)
from antigravity_settings.services.notifier import ChangeNotifier
from antigravity_settings.services.persistence import (
    FileConfigPersistence,
    InMemoryPersistence,
    PersistenceAdapter,
    run_with_timeout,
)
from antigravity_settings.services.update_service import UpdateService
from antigravity_settings.services.validator import (
    Violation,
    check_commit,
    repair,
    validate,
    validate_field,
)

__all__ = [
    "Backend",
    "ChangeNotifier",
    "ConfigStore",
    "FileConfigPersistence",
    "InMemoryPersistence",
    "LocalBackend",
    "PersistenceAdapter",
    "UpdateService",
    "Violation",
    "check_commit",
    "get_config_store",
    "load_config_store",
    "repair",
    "resolve_data_dir",
    "run_with_timeout",
    "validate",
    "validate_field",
]

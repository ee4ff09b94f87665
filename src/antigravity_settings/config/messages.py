"""User-facing messages for antigravity-settings.

Messages are format strings; fill them with ``.format(...)``.
"""

# =============================================================================
# Project Metadata
# =============================================================================

PROJECT_TAGLINE = "Settings manager for Antigravity Tools"

HELP_TEXT = f"""
[bold cyan]agt-settings[/bold cyan] - {PROJECT_TAGLINE}

[bold]Commands:[/bold]
  [cyan]show[/cyan]          Show the saved configuration
  [cyan]get[/cyan]           Read one field (dotted path)
  [cyan]set[/cyan]           Change fields and save (validated)
  [cyan]apply[/cyan]         Apply language/theme immediately
  [cyan]validate[/cyan]      Check the configuration file
  [cyan]maintenance[/cyan]   Cache, logs, updates and auto-launch

[bold]Examples:[/bold]
  [dim]$ agt-settings set proxy.port=8045 proxy.enabled=true[/dim]
  [dim]$ agt-settings apply theme dark[/dim]
"""

# =============================================================================
# Success Messages
# =============================================================================

SUCCESS_MESSAGES = {
    "saved": "Settings saved",
    "applied": "{field} set to {value}",
    "logs_cleared": "Log cache cleared",
    "cache_cleared": "Cleared {count} cache path(s), freed {size_mb:.2f} MB",
    "auto_launch_enabled": "Launch at login enabled",
    "auto_launch_disabled": "Launch at login disabled",
    "update_settings_saved": "Update check settings saved",
    "latest_version": "You are running the latest version ({version})",
    "executable_detected": "Detected Antigravity executable: {path}",
    "args_detected": "Detected launch arguments: {args}",
    "config_valid": "Configuration is valid",
}

# =============================================================================
# Info Messages
# =============================================================================

INFO_MESSAGES = {
    "restart_hint": "Proxy settings saved; restart the application for them to take effect",
    "cache_not_found": "No Antigravity cache found",
    "new_version_available": "New version available: {latest} (current {current})\n{url}",
    "no_changes": "No changes to save",
}

# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES = {
    "upstream_url_required": "Upstream proxy URL is required when the upstream proxy is enabled",
    "out_of_range": "{field} must be between {minimum} and {maximum}",
    "must_be_positive": "{field} must be greater than 0",
    "must_be_non_negative": "{field} must not be negative",
    "invalid_choice": "Invalid {field}: {value}",
    "wrong_type": "{field} must be {expected}",
    "duplicates": "{field} contains duplicate entries: {duplicates}",
    "not_sorted": "{field} must be in ascending order",
    "empty_steps": "{field} must contain at least one step",
    "not_immediate": "{field} cannot be applied immediately; use a full save",
    "invalid_assignment": "Expected FIELD=VALUE, got: {value}",
    "unknown_field": "Unknown field: {field}",
    "save_failed": "Failed to save settings: {error}",
    "io_timeout": "Settings {operation} did not finish within {timeout:.1f}s",
    "save_in_progress": "A previous settings save is still in progress; try again later",
    "load_failed": "Failed to load settings: {error}",
    "cache_clear_failed": "Failed to clear {path}: {error}",
    "update_check_failed": "Update check failed: {error}",
    "auto_launch_unsupported": "Launch at login is not supported on {platform}",
    "executable_not_found": "Antigravity executable not found",
    "args_not_found": "No running Antigravity process found",
}

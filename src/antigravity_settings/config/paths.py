"""Path constants for antigravity-settings.

File and directory names inside the per-user data directory
(``~/.antigravity_tools`` unless overridden by AGT_STORAGE_DATA_DIR).
"""

# =============================================================================
# Data Directory Layout
# =============================================================================

CONFIG_FILENAME = "gui_config.json"
UPDATE_SETTINGS_FILENAME = "update_settings.json"
LOGS_DIRNAME = "logs"

# =============================================================================
# Auto-launch (XDG autostart)
# =============================================================================

AUTOSTART_DIRNAME = "autostart"
AUTOSTART_DESKTOP_FILENAME = "antigravity-tools.desktop"
APP_EXECUTABLE_NAME = "antigravity-tools"

# =============================================================================
# Antigravity process detection
# =============================================================================

ANTIGRAVITY_PROCESS_NAMES = ("antigravity", "Antigravity", "Antigravity.exe")

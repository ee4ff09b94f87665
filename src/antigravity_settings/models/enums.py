"""Enum types for antigravity-settings.

Closed value sets stored in the configuration tree. The enums subclass
``str`` so members compare equal to the raw strings read from disk.
"""

from enum import Enum


class Language(str, Enum):
    """UI locale codes."""

    ZH = "zh"
    ZH_TW = "zh-TW"
    EN = "en"
    JA = "ja"
    TR = "tr"
    VI = "vi"
    PT = "pt"
    KO = "ko"
    RU = "ru"
    AR = "ar"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all locale codes."""
        return [lang.value for lang in cls]


class Theme(str, Enum):
    """UI color theme."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all themes."""
        return [t.value for t in cls]


class ThinkingBudgetMode(str, Enum):
    """How the proxy sets the thinking budget on upstream requests."""

    AUTO = "auto"  # Let the proxy pick per model
    FIXED = "fixed"  # Always send custom_value
    PASSTHROUGH = "passthrough"  # Forward whatever the client sent

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all modes."""
        return [m.value for m in cls]


class ViolationRule(str, Enum):
    """Nature of a configuration invariant breach."""

    RANGE = "range"
    REQUIRED = "required"
    ORDERING = "ordering"
    UNIQUENESS = "uniqueness"
    CHOICE = "choice"
    TYPE = "type"

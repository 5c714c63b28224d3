"""Shared constants and configuration defaults for reflectkit."""

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_LOGGER_NAME = "reflectkit"

# Environment
ENV_PREFIX = "REFLECTKIT_"

# Text rendered for absent values in string projections
DEFAULT_NONE_TEXT = ""

# Default string set rendering
STRING_SET_OPEN = "{ "
STRING_SET_CLOSE = " }"
STRING_SET_SEPARATOR = ", "

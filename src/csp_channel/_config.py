"""Package configuration: ChannelConfig, init() and environment detection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from csp_channel._logging import configure_logging

__all__ = [
    'ChannelConfig',
    'get_config',
    'init',
]

_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class ChannelConfig:
    """Configuration for csp_channel.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
        json_logs: Emit JSON logs if True, console logs otherwise.
    """

    log_level: str | None = None
    json_logs: bool = True


_config: ChannelConfig | None = None


def _detect_log_level() -> str | None:
    """Read CSP_CHANNEL_LOG_LEVEL, ignoring unknown values."""
    env_level = os.environ.get('CSP_CHANNEL_LOG_LEVEL', '').upper()
    if not env_level:
        return None
    if env_level not in _LEVELS:
        logging.warning("Unknown CSP_CHANNEL_LOG_LEVEL value '%s', ignoring", env_level)
        return None
    return env_level


def _detect_json_logs() -> bool:
    """Read CSP_CHANNEL_LOG_FORMAT ("json" or "console"), defaulting to JSON."""
    env_format = os.environ.get('CSP_CHANNEL_LOG_FORMAT', '').lower()
    if env_format == 'console':
        return False
    if env_format and env_format != 'json':
        logging.warning("Unknown CSP_CHANNEL_LOG_FORMAT value '%s', defaulting to json", env_format)
    return True


def init(
    log_level: str | None = None,
    json_logs: bool | None = None,
) -> ChannelConfig:
    """Initialize csp_channel with the given configuration.

    Unset arguments fall back to the CSP_CHANNEL_LOG_LEVEL and
    CSP_CHANNEL_LOG_FORMAT environment variables.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = do not configure logging.
        json_logs: JSON (True) or console (False) log rendering.

    Returns:
        The ChannelConfig that was set.

    Example:
        ```python
        from csp_channel import init

        init(log_level='DEBUG', json_logs=False)
        ```
    """
    global _config  # noqa: PLW0603

    resolved_level = log_level.upper() if log_level is not None else _detect_log_level()
    resolved_json = _detect_json_logs() if json_logs is None else json_logs

    _config = ChannelConfig(log_level=resolved_level, json_logs=resolved_json)

    if resolved_level is not None:
        configure_logging(resolved_level, json_output=resolved_json)

    return _config


def get_config() -> ChannelConfig:
    """Get the current configuration.

    Returns the defaults when init() has not been called; channels work
    without any initialization.
    """
    if _config is None:
        return ChannelConfig()
    return _config

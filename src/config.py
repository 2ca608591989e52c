"""
Process-wide configuration for the contact form Lambda.

Settings are read from environment variables once, when the handler module is
imported, and treated as immutable afterwards. Missing secrets abort the
import so a misconfigured deployment never serves traffic.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = ('EMAIL_USER', 'EMAIL_PASS')

DEFAULT_SMTP_HOST = 'smtp.gmail.com'
DEFAULT_SMTP_PORT = 465
DEFAULT_SMTP_TIMEOUT = 20
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigurationError(Exception):
    """Raised when required configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class Settings:
    """
    Immutable service settings.

    Attributes:
        email_user: SMTP login, also used as the from and to address
        email_pass: SMTP credential
        smtp_host: Relay hostname
        smtp_port: Relay port (implicit TLS)
        smtp_timeout: Seconds allowed for each SMTP operation
        environment: Deployment stage name (dev, prod, ...)
        log_level: Root logger level name
    """
    email_user: str
    email_pass: str
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_timeout: int = DEFAULT_SMTP_TIMEOUT
    environment: str = 'dev'
    log_level: str = 'INFO'

    def __repr__(self) -> str:
        """Representation safe for logs (credential masked)."""
        return (
            f"Settings(email_user={self.email_user}, email_pass=***, "
            f"smtp_host={self.smtp_host}, smtp_port={self.smtp_port}, "
            f"smtp_timeout={self.smtp_timeout}, environment={self.environment})"
        )


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got: '{raw}'")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")
    return value


def _read_log_level(environ: Mapping[str, str]) -> str:
    level = (environ.get('LOG_LEVEL') or 'INFO').strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: '{level}'"
        )
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings: The validated configuration

    Raises:
        ConfigurationError: If EMAIL_USER or EMAIL_PASS is unset, or an
            optional variable is malformed. All missing names are
            reported in a single error.
    """
    if environ is None:
        environ = os.environ

    missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    settings = Settings(
        email_user=environ['EMAIL_USER'],
        email_pass=environ['EMAIL_PASS'],
        smtp_host=environ.get('SMTP_HOST') or DEFAULT_SMTP_HOST,
        smtp_port=_read_int(environ, 'SMTP_PORT', DEFAULT_SMTP_PORT),
        smtp_timeout=_read_int(environ, 'SMTP_TIMEOUT', DEFAULT_SMTP_TIMEOUT),
        environment=environ.get('ENVIRONMENT') or 'dev',
        log_level=_read_log_level(environ),
    )

    logger.info(f"Configuration loaded: {settings!r}")
    return settings

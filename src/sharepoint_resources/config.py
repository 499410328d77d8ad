"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Credentials have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing.
    """

    # Required (no defaults): fail at startup if missing
    client_id: str
    client_secret: str
    tenant_id: str

    # Decode behaviour (default provided), overridable via env
    strict_quota: bool = True


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        SPR_CLIENT_ID: Azure AD application (client) ID.
        SPR_CLIENT_SECRET: Azure AD application client secret.
        SPR_TENANT_ID: Azure AD tenant ID.

    Optional environment variables (with defaults):
        SPR_STRICT_QUOTA: Reject quota objects missing a byte count
            (default: true). "false", "0", "no" or "off" switch to lenient
            decoding, where a missing byte count reads as 0.

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        client_id=os.environ["SPR_CLIENT_ID"],
        client_secret=os.environ["SPR_CLIENT_SECRET"],
        tenant_id=os.environ["SPR_TENANT_ID"],
        strict_quota=_env_flag("SPR_STRICT_QUOTA", True),
    )

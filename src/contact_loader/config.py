"""Configuration lookup scoped to an organization, falling back to the environment."""

import os
from typing import Callable, Optional

from contact_loader.errors import ConfigurationError
from contact_loader.models.job import Organization

ConfigLookup = Callable[[str, Optional[Organization]], Optional[str]]


def get_config(key: str, organization: Optional[Organization] = None) -> Optional[str]:
    """
    Return the value for key. Organization features win over environment variables.
    Empty strings count as absent.
    """
    if organization is not None:
        value = organization.features.get(key)
        if value:
            return value
    return os.environ.get(key) or None


def int_config(
    lookup: ConfigLookup,
    key: str,
    organization: Optional[Organization],
    default: int,
) -> int:
    """Integer config value, default when absent."""
    value = lookup(key, organization)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def float_config(
    lookup: ConfigLookup,
    key: str,
    organization: Optional[Organization],
    default: float,
) -> float:
    """Float config value, default when absent."""
    value = lookup(key, organization)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e

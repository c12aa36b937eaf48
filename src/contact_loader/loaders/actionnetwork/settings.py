"""Per-organization Action Network settings."""

from typing import Optional

from pydantic import BaseModel, Field

from contact_loader.config import ConfigLookup, float_config, get_config, int_config
from contact_loader.models.job import Organization

from . import constants as c


class RetryPolicy(BaseModel):
    """Retry policy for page fetches. attempts=1 means no retries."""

    attempts: int = Field(default=c.DEFAULT_RETRY_ATTEMPTS, ge=1)
    backoff_seconds: float = Field(default=c.DEFAULT_RETRY_BACKOFF_SECONDS, ge=0)


class ActionNetworkSettings(BaseModel):
    """Resolved settings for one organization."""

    api_key: Optional[str] = None
    domain: str = c.DEFAULT_DOMAIN
    base_url: str = c.DEFAULT_BASE_URL
    cache_ttl: int = c.DEFAULT_CACHE_TTL
    # TODO: confirm with Action Network whether the 4 req/s quota is per token or per IP
    requests_per_second: int = Field(default=c.DEFAULT_REQUESTS_PER_SECOND, ge=1)
    cooldown_seconds: float = Field(default=c.DEFAULT_COOLDOWN_SECONDS, ge=0)
    timeout_seconds: float = c.DEFAULT_TIMEOUT_SECONDS
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    @property
    def api_root(self) -> str:
        return f"{self.domain.rstrip('/')}{self.base_url.rstrip('/')}"

    @classmethod
    def from_organization(
        cls,
        organization: Optional[Organization] = None,
        lookup: ConfigLookup = get_config,
    ) -> "ActionNetworkSettings":
        """Resolve every setting through lookup, using defaults for absent keys."""
        return cls(
            api_key=lookup(c.API_KEY, organization),
            domain=lookup(c.DOMAIN, organization) or c.DEFAULT_DOMAIN,
            base_url=lookup(c.BASE_URL, organization) or c.DEFAULT_BASE_URL,
            cache_ttl=int_config(lookup, c.CACHE_TTL, organization, c.DEFAULT_CACHE_TTL),
            requests_per_second=int_config(
                lookup, c.REQUESTS_PER_SECOND, organization, c.DEFAULT_REQUESTS_PER_SECOND
            ),
            cooldown_seconds=float_config(
                lookup, c.COOLDOWN_SECONDS, organization, c.DEFAULT_COOLDOWN_SECONDS
            ),
            timeout_seconds=float_config(
                lookup, c.TIMEOUT_SECONDS, organization, c.DEFAULT_TIMEOUT_SECONDS
            ),
            retry=RetryPolicy(
                attempts=int_config(lookup, c.RETRY_ATTEMPTS, organization, c.DEFAULT_RETRY_ATTEMPTS),
                backoff_seconds=float_config(
                    lookup, c.RETRY_BACKOFF_SECONDS, organization, c.DEFAULT_RETRY_BACKOFF_SECONDS
                ),
            ),
        )

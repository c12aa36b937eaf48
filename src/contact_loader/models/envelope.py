"""Page envelope returned by paginated OSDI collection endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# OSDI namespaces embedded collections, e.g. _embedded["osdi:lists"]
EMBEDDED_NAMESPACE = "osdi"


class PageEnvelope(BaseModel):
    """
    One page of a paginated resource collection.
    Upstream omits _embedded (or the namespaced key inside it) on empty pages.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_pages: int = 1
    per_page: int = Field(default=25, ge=1)
    page: Optional[int] = None
    embedded: Optional[dict[str, list[dict[str, Any]]]] = Field(default=None, alias="_embedded")

    def items(self, key: str) -> list[dict[str, Any]]:
        """Return the embedded items for key; empty when the page carries none."""
        if not self.embedded:
            return []
        return list(self.embedded.get(f"{EMBEDDED_NAMESPACE}:{key}") or [])

"""Action Network (OSDI) contact loader."""

from .client import ActionNetworkClient
from .loader import ActionNetworkLoader
from .pagination import PacedPaginator, RequestScheduler, extract_embedded, pages_needed
from .settings import ActionNetworkSettings, RetryPolicy

__all__ = [
    "ActionNetworkClient",
    "ActionNetworkLoader",
    "ActionNetworkSettings",
    "PacedPaginator",
    "RequestScheduler",
    "RetryPolicy",
    "extract_embedded",
    "pages_needed",
]

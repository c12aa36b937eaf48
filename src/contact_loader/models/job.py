"""Contact load jobs, their payloads and the choice data handed to the picker."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class Organization(BaseModel):
    """Organization on whose behalf a load runs; features hold per-org config values."""

    id: int = 0
    name: str = "default"
    features: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Organization":
        """Load organization from YAML. Feature values are coerced to strings like env vars."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        features = data.get("features") or {}
        return cls.model_validate(
            {
                "id": data.get("id", 0),
                "name": data.get("name", "default"),
                "features": {str(k): str(v) for k, v in features.items() if v is not None},
            }
        )


class ContactLoadJob(BaseModel):
    """Host job row describing one requested contact load."""

    id: int
    campaign_id: int
    payload: str = "{}"
    status: str = "pending"
    result_message: Optional[str] = None


class JobPayload(BaseModel):
    """Parsed job payload as written by the list picker."""

    listIdentifier: str = Field(..., min_length=1)
    requestContactCount: int = 0


class ClientChoiceData(BaseModel):
    """
    Cacheable data for the list picker.
    expires_seconds is None when the result must not be cached (failures).
    """

    data: str
    expires_seconds: Optional[int] = None

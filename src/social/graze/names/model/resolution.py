from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class ResolutionResult(BaseModel):
    """Uniform result of resolving an address or an ENS name.

    The field that was given as input is always populated. The counterpart is only populated when resolution
    succeeds. ``display_name`` always carries something presentable.
    """

    model_config = ConfigDict(populate_by_name=True)

    address: Optional[str] = None
    name: Optional[str] = None
    display_name: str = Field(alias="displayName")
    avatar: Optional[str] = None
    error: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the wire shape, omitting ``error`` when there isn't one."""
        exclude = {"error"} if self.error is None else None
        return self.model_dump(by_alias=True, exclude=exclude)

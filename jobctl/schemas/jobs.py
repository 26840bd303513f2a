from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

INSTANTIATE_ANNOTATION = "cronjob.kubernetes.io/instantiate"
INSTANTIATE_MANUAL = "manual"
LAST_APPLIED_ANNOTATION = "kubectl.kubernetes.io/last-applied-configuration"


class ObjectMeta(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    namespace: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None


class Job(BaseModel):
    """batch/v1 Job as sent to the API server. `spec` is copied verbatim, never interpreted."""
    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(default="batch/v1", alias="apiVersion")
    kind: str = "Job"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: Dict[str, Any] = Field(default_factory=dict)

    def to_manifest(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

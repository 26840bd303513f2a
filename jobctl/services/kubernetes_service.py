from typing import Any, Dict, Optional
import logging

from kubernetes import client

log = logging.getLogger(__name__)


class KubernetesService:
    """Typed batch/v1 Job API, scoped to one namespace per call."""

    def __init__(self, api_client: client.ApiClient, *, field_manager: Optional[str] = None):
        self.api_client = api_client
        self.batch = client.BatchV1Api(api_client)
        self.field_manager = field_manager

    def create_job(self, *, namespace: str, manifest: Dict[str, Any]) -> Dict[str, Any]:
        # ApiException propagates; the caller decides how to word it
        kwargs = {"field_manager": self.field_manager} if self.field_manager else {}
        created = self.batch.create_namespaced_job(namespace=namespace, body=manifest, **kwargs)
        log.info("created job %s/%s", namespace, created.metadata.name)
        return self.to_dict(created)

    def to_dict(self, obj: Any) -> Dict[str, Any]:
        # camelCase wire form, same shape as a manifest built locally
        return self.api_client.sanitize_for_serialization(obj)

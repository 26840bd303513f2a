import io
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from jobctl.services.kubernetes_service import KubernetesService
from jobctl.services.resource_resolver import ResourceResolver


def make_cronjob(
    api_version: str = "batch/v1beta1",
    *,
    name: str = "a-cronjob",
    namespace: str = "default",
    annotations: Optional[Dict[str, str]] = None,
    labels: Optional[Dict[str, str]] = None,
    spec: Optional[Dict[str, Any]] = None,
    kind: str = "CronJob",
) -> Dict[str, Any]:
    tpl_meta: Dict[str, Any] = {}
    if annotations is not None:
        tpl_meta["annotations"] = annotations
    if labels is not None:
        tpl_meta["labels"] = labels
    return {
        "apiVersion": api_version,
        "kind": kind,
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "schedule": "*/5 * * * *",
            "jobTemplate": {
                "metadata": tpl_meta,
                "spec": spec if spec is not None else {"parallelism": 1},
            },
        },
    }


class FakeFactory:
    """Stands in for KubeFactory; hands out mocks for the two API collaborators."""

    def __init__(self, objects: List[Dict[str, Any]], namespace: str = "default"):
        self.namespace = namespace
        self.resolver = MagicMock(spec=ResourceResolver)
        self.resolver.resolve.return_value = objects
        self.client = MagicMock(spec=KubernetesService)
        self.client.create_job.side_effect = self._echo

    @staticmethod
    def _echo(*, namespace, manifest):
        created = dict(manifest)
        created["metadata"] = dict(manifest["metadata"], uid="1234")
        return created

    def default_namespace(self) -> str:
        return self.namespace

    def new_batch_client(self):
        return self.client

    def new_resolver(self):
        return self.resolver


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def v1beta1_cronjob():
    return make_cronjob("batch/v1beta1", labels={"app": "x"}, annotations={})

"""
CronJob source templates.

Two historical schema variants are accepted, batch/v1beta1 and batch/v2alpha1.
They differ only in the group/version that defines them; both carry the Job
template under ``spec.jobTemplate``. Any other group/version/kind is rejected.
"""
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.exceptions import SchemaMismatchError, ServiceError
from .jobs import ObjectMeta

CRONJOB_V1BETA1 = ("batch", "v1beta1", "CronJob")
CRONJOB_V2ALPHA1 = ("batch", "v2alpha1", "CronJob")
ACCEPTED_GVKS = (CRONJOB_V1BETA1, CRONJOB_V2ALPHA1)


def format_gvk(group: str, version: str, kind: str) -> str:
    # "batch/v1beta1, Kind=CronJob"; core group renders as "/v1, Kind=Pod"
    return f"{group}/{version}, Kind={kind}"


def split_api_version(api_version: str) -> Tuple[str, str]:
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


def group_version_kind(obj: Dict[str, Any]) -> Tuple[str, str, str]:
    group, version = split_api_version(obj.get("apiVersion") or "")
    return group, version, obj.get("kind") or ""


class JobTemplateSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: Dict[str, Any] = Field(default_factory=dict)


class CronJobSpec(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    job_template: JobTemplateSpec = Field(alias="jobTemplate")


class _CronJobBase(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: Literal["CronJob"]
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CronJobSpec

    def job_template(self) -> Tuple[Optional[Dict[str, str]], Optional[Dict[str, str]], Dict[str, Any]]:
        """Return (annotations, labels, spec) of the embedded Job template."""
        tpl = self.spec.job_template
        return tpl.metadata.annotations, tpl.metadata.labels, tpl.spec


class CronJobV1beta1(_CronJobBase):
    api_version: Literal["batch/v1beta1"] = Field(alias="apiVersion")


class CronJobV2alpha1(_CronJobBase):
    api_version: Literal["batch/v2alpha1"] = Field(alias="apiVersion")


CronJob = Annotated[Union[CronJobV1beta1, CronJobV2alpha1], Field(discriminator="api_version")]

_cronjob_adapter: TypeAdapter = TypeAdapter(CronJob)


def parse_cronjob(obj: Dict[str, Any]) -> Union[CronJobV1beta1, CronJobV2alpha1]:
    gvk = group_version_kind(obj)
    if gvk not in ACCEPTED_GVKS:
        raise SchemaMismatchError(
            'from must be "{}" or "{}", but got "{}"'.format(
                format_gvk(*CRONJOB_V1BETA1),
                format_gvk(*CRONJOB_V2ALPHA1),
                format_gvk(*gvk),
            )
        )
    try:
        return _cronjob_adapter.validate_python(obj)
    except ValidationError as e:
        name = (obj.get("metadata") or {}).get("name", "")
        raise ServiceError(f"invalid cronjob \"{name}\": {e}", cause=e) from e

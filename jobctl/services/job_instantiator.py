# jobctl/services/job_instantiator.py
import json
import logging
import re
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, TextIO

from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from ..core.exceptions import InvalidNameError, JobCreateError, SourceNotFoundError, UsageError
from ..core.kube import ClientFactory
from ..schemas.cronjobs import parse_cronjob
from ..schemas.jobs import (
    INSTANTIATE_ANNOTATION,
    INSTANTIATE_MANUAL,
    LAST_APPLIED_ANNOTATION,
    Job,
    ObjectMeta,
)
from .kubernetes_service import KubernetesService
from .printers import print_object, print_success
from .resource_resolver import ResourceResolver

log = logging.getLogger(__name__)

DNS1123_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")
DNS1123_SUBDOMAIN_MAX = 253


def validate_job_name(name: str) -> None:
    if len(name) > DNS1123_SUBDOMAIN_MAX:
        raise InvalidNameError(f'invalid job name "{name}": must be no more than {DNS1123_SUBDOMAIN_MAX} characters')
    if not DNS1123_SUBDOMAIN.match(name):
        raise InvalidNameError(
            f'invalid job name "{name}": a lowercase RFC 1123 subdomain must consist of lower case '
            "alphanumeric characters, '-' or '.', and must start and end with an alphanumeric character"
        )


def _api_error_message(err: ApiException) -> str:
    if err.body:
        try:
            message = json.loads(err.body).get("message")
        except (ValueError, AttributeError):
            message = None
        if message:
            return message
    return f"({err.status}) {err.reason}"


def build_job(
    *,
    name: str,
    namespace: str,
    template_annotations: Optional[Dict[str, str]],
    template_labels: Optional[Dict[str, str]],
    template_spec: Dict[str, Any],
    save_config: bool = False,
) -> Dict[str, Any]:
    """
    Build the Job manifest for a CronJob's job template.

    Annotations are the template's plus the instantiate marker; the marker is
    written last and always wins over a template annotation with the same key.
    Labels and spec are copied as they are.
    """
    annotations: Dict[str, str] = dict(template_annotations or {})
    if annotations.get(INSTANTIATE_ANNOTATION, INSTANTIATE_MANUAL) != INSTANTIATE_MANUAL:
        log.warning(
            "ignoring template annotation %s=%s", INSTANTIATE_ANNOTATION, annotations[INSTANTIATE_ANNOTATION]
        )
    annotations[INSTANTIATE_ANNOTATION] = INSTANTIATE_MANUAL

    job = Job(
        metadata=ObjectMeta(
            name=name,
            namespace=namespace,
            annotations=annotations,
            labels=dict(template_labels) if template_labels is not None else None,
        ),
        spec=template_spec,
    )
    manifest = job.to_manifest()
    if save_config:
        annotations[LAST_APPLIED_ANNOTATION] = json.dumps(manifest, separators=(",", ":"), sort_keys=True)
        manifest["metadata"]["annotations"] = dict(annotations)
    return manifest


@dataclass
class CreateJobOptions:
    name: str
    from_ref: str
    namespace: str
    output_format: str
    dry_run: bool
    client: KubernetesService
    resolver: ResourceResolver
    save_config: bool = False
    out: TextIO = field(default_factory=lambda: sys.stdout)

    @classmethod
    def complete(
        cls,
        factory: ClientFactory,
        args: Sequence[str],
        *,
        from_ref: str = "",
        output_format: str = "",
        dry_run: bool = False,
        validate: bool = True,
        save_config: bool = False,
        out: Optional[TextIO] = None,
    ) -> "CreateJobOptions":
        if not args:
            raise UsageError("NAME is required")
        if len(args) > 1:
            raise UsageError(f"exactly one NAME is required, got {len(args)}: {' '.join(args)}")
        name = args[0]
        if validate:
            validate_job_name(name)

        namespace = factory.default_namespace()
        return cls(
            name=name,
            from_ref=from_ref or "",
            namespace=namespace,
            output_format=output_format or "",
            dry_run=dry_run,
            client=factory.new_batch_client(),
            resolver=factory.new_resolver(),
            save_config=save_config,
            out=out or sys.stdout,
        )

    def run(self) -> Dict[str, Any]:
        infos = self.resolver.resolve(self.namespace, self.from_ref)
        if len(infos) != 1:
            log.debug("%s matched %d objects", self.from_ref, len(infos))
            raise SourceNotFoundError("from must be an existing cronjob")

        cron_job = parse_cronjob(infos[0])
        annotations, labels, spec = cron_job.job_template()
        return self.create_job(annotations, labels, spec)

    def create_job(
        self,
        annotations: Optional[Dict[str, str]],
        labels: Optional[Dict[str, str]],
        spec: Dict[str, Any],
    ) -> Dict[str, Any]:
        job = build_job(
            name=self.name,
            namespace=self.namespace,
            template_annotations=annotations,
            template_labels=labels,
            template_spec=spec,
            save_config=self.save_config,
        )

        if self.dry_run:
            log.info("dry run, not creating job %s/%s", self.namespace, self.name)
        else:
            try:
                job = self.client.create_job(namespace=self.namespace, manifest=job)
            except ApiException as e:
                raise JobCreateError(f"failed to create job: {_api_error_message(e)}", cause=e) from e
            except HTTPError as e:
                raise JobCreateError(f"failed to create job: {e}", cause=e) from e

        short = self.output_format == "name"
        if short or not self.output_format:
            print_success(short, self.out, job, self.dry_run, "created")
        else:
            print_object(job, self.output_format, self.out)
        return job

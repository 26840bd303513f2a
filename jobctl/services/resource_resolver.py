import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import DynamicApiError, NotFoundError
from kubernetes.dynamic.resource import ResourceList
from urllib3.exceptions import HTTPError

from ..core.exceptions import ResolutionError

log = logging.getLogger(__name__)

VERSION_RE = re.compile(r"^v\d+((alpha|beta)\d+)?$")


def parse_reference(ref: str) -> Tuple[str, Optional[str]]:
    """Split "cronjob/nightly" into ("cronjob", "nightly"); a bare type has no name."""
    ref = (ref or "").strip()
    if not ref:
        raise ResolutionError("you must provide one or more resources by argument or filename")
    if "/" in ref:
        rtype, name = ref.split("/", 1)
        if not rtype or not name or "/" in name:
            raise ResolutionError(f"arguments in resource/name form must have a single resource and name: {ref!r}")
        return rtype, name
    return ref, None


def parse_resource_type(rtype: str) -> Tuple[str, Optional[str], Optional[str]]:
    """Split "cronjobs.v1beta1.batch" into ("cronjobs", "v1beta1", "batch"); version and group are optional."""
    name, _, rest = rtype.lower().partition(".")
    head, _, tail = rest.partition(".")
    if tail and VERSION_RE.match(head):
        return name, head, tail
    return name, None, rest or None


def _api_message(err: DynamicApiError) -> str:
    # summary() prefers the Status message from a JSON body
    return err.summary() or str(err)


class ResourceResolver:
    """
    Turns a TYPE[/NAME] reference into live objects, read straight from the API server.

    TYPE may be a plural, singular or short name ("cronjobs", "cronjob", "cj"),
    optionally qualified with an API group ("cronjobs.batch") or a version and
    group ("cronjobs.v1beta1.batch"). Without a version only preferred versions
    take part in the match. Namespaced resources are looked up in the given
    namespace; cluster-scoped ones are looked up without it.
    """

    def __init__(self, dynamic: DynamicClient):
        self.dynamic = dynamic

    def _find_resource(self, rtype: str):
        name, version, group = parse_resource_type(rtype)
        matches = []
        for res in self.dynamic.resources.search():
            # list kinds proxy their attributes to the base resource
            if isinstance(res, ResourceList):
                continue
            if "/" in (res.name or ""):  # subresource, e.g. cronjobs/status
                continue
            if version:
                if (res.api_version or "").lower() != version:
                    continue
            elif not getattr(res, "preferred", False):
                continue
            if group and (res.group or "").lower() != group:
                continue
            names = {(res.name or "").lower(), (res.singular_name or "").lower()}
            names.update(s.lower() for s in (res.short_names or []))
            if name in names:
                matches.append(res)
        if not matches:
            raise ResolutionError(f'the server doesn\'t have a resource type "{rtype}"')
        if len(matches) > 1:
            log.debug("resource type %r is ambiguous, using %s", rtype, matches[0].group_version)
        return matches[0]

    def resolve(self, namespace: str, ref: str) -> List[Dict[str, Any]]:
        rtype, name = parse_reference(ref)
        res = self._find_resource(rtype)
        scope = {"namespace": namespace} if res.namespaced else {}
        try:
            if name:
                obj = res.get(name=name, **scope).to_dict()
                log.debug("resolved %s to %s %s", ref, res.group_version, name)
                return [obj]
            listing = res.get(**scope).to_dict()
        except NotFoundError:
            log.debug("%s not found", ref)
            return []
        except DynamicApiError as e:
            raise ResolutionError(_api_message(e), cause=e) from e
        except HTTPError as e:
            raise ResolutionError(f"unable to reach the server: {e}", cause=e) from e

        items = []
        for item in listing.get("items") or []:
            # list items come back without type information
            item.setdefault("apiVersion", res.group_version)
            item.setdefault("kind", res.kind)
            items.append(item)
        log.debug("resolved %s to %d object(s)", ref, len(items))
        return items

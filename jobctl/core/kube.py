import logging
import os
from typing import Optional, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.dynamic import DynamicClient
from urllib3.exceptions import HTTPError

from .config import Settings, settings as default_settings
from .exceptions import ConfigurationError
from ..services.kubernetes_service import KubernetesService
from ..services.resource_resolver import ResourceResolver

log = logging.getLogger(__name__)

SERVICE_ACCOUNT_NAMESPACE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"


class ClientFactory(Protocol):
    def default_namespace(self) -> str: ...
    def new_batch_client(self) -> KubernetesService: ...
    def new_resolver(self) -> ResourceResolver: ...


class KubeFactory:
    """
    Builds the Kubernetes collaborators for one command invocation.
    Configuration is loaded lazily into a private client.Configuration, so
    nothing touches the library's global default configuration.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        namespace: Optional[str] = None,
    ):
        self.settings = settings or default_settings
        self.kubeconfig = kubeconfig or self.settings.kubeconfig
        self.context = context or self.settings.context
        self.namespace = namespace or self.settings.namespace
        self._api_client: Optional[client.ApiClient] = None
        self._in_cluster: Optional[bool] = None

    def _load(self) -> client.ApiClient:
        if self._api_client is not None:
            return self._api_client
        cfg = client.Configuration()
        explicit = bool(self.kubeconfig or self.context)
        try:
            if explicit:
                config.load_kube_config(config_file=self.kubeconfig, context=self.context, client_configuration=cfg)
                self._in_cluster = False
            else:
                # Try in-cluster, fall back to kubeconfig (local dev)
                try:
                    config.load_incluster_config(client_configuration=cfg)
                    self._in_cluster = True
                    log.info("using in-cluster configuration")
                except config.ConfigException:
                    config.load_kube_config(client_configuration=cfg)
                    self._in_cluster = False
        except (config.ConfigException, OSError) as e:
            raise ConfigurationError(f"unable to load Kubernetes configuration: {e}", cause=e) from e
        if not self._in_cluster:
            log.info("using kubeconfig %s", self.kubeconfig or os.environ.get("KUBECONFIG") or "~/.kube/config")
        self._api_client = client.ApiClient(cfg)
        return self._api_client

    def _context_namespace(self) -> Optional[str]:
        try:
            contexts, active = config.list_kube_config_contexts(config_file=self.kubeconfig)
        except (config.ConfigException, OSError) as e:
            raise ConfigurationError(f"unable to read kubeconfig contexts: {e}", cause=e) from e
        if self.context:
            ctx = next((c for c in contexts or [] if c.get("name") == self.context), None)
            if ctx is None:
                raise ConfigurationError(f'context "{self.context}" does not exist')
        else:
            ctx = active
        return ((ctx or {}).get("context") or {}).get("namespace")

    def default_namespace(self) -> str:
        if self.namespace:
            return self.namespace
        self._load()
        if self._in_cluster and os.path.exists(SERVICE_ACCOUNT_NAMESPACE):
            with open(SERVICE_ACCOUNT_NAMESPACE, "r") as f:
                ns = f.read().strip()
            if ns:
                return ns
        if not self._in_cluster:
            ns = self._context_namespace()
            if ns:
                return ns
        return "default"

    def new_batch_client(self) -> KubernetesService:
        return KubernetesService(self._load(), field_manager=self.settings.field_manager)

    def new_resolver(self) -> ResourceResolver:
        api_client = self._load()
        try:
            # DynamicClient runs API discovery up front
            return ResourceResolver(DynamicClient(api_client))
        except (ApiException, HTTPError) as e:
            raise ConfigurationError(f"unable to discover server resources: {e}", cause=e) from e

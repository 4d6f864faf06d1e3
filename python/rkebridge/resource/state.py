"""
rkebridge/resource/state.py

Config -> Resource: writes a typed Cluster back into the flat representation
through a StateBuilder sink, using the same key vocabulary the extractors in
rkebridge.resource.parse read.

 - Single-occurrence blocks become a one-element list holding one map; a
   block equal to its zero value is not written at all.
 - Nodes and private registries become ordered lists of maps. Node ports go
   back to int.
 - Host groups are reclassified from the node list and written as compact
   {node_name, address} maps.
 - Certificate bundles become a list of maps carrying PEM text and an "id".
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from rkebridge.errors import FieldTypeError
from rkebridge.hosts import classify_hosts
from rkebridge.models.cluster import Cluster
from rkebridge.models.rke import (
    AuthnConfig,
    AuthzConfig,
    BaseService,
    CloudProvider,
    ETCDService,
    IngressConfig,
    KubeAPIService,
    KubeControllerService,
    KubeletService,
    KubeproxyService,
    NetworkConfig,
    PrivateRegistry,
    RKEConfigNode,
    RKESystemImages,
    SchedulerService,
    is_decimal_port,
)
from rkebridge.pki.codec import certificates_to_state
from rkebridge.resource import keys
from rkebridge.resource.data import DictStateBuilder, FlatValue, StateBuilder

logger = logging.getLogger(__name__)

StateItem = Tuple[str, FlatValue]


# ----------------------------------------------------------------------
# 1) Per-record writers
# ----------------------------------------------------------------------


def _block(model: BaseModel, body: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    """Wrap a block body in a one-element list, or None if the model is zero-valued."""
    if model == type(model)():
        return None
    return [body]


def _port_to_state(port: str) -> int:
    # Nodes edited after construction skip model validation.
    if not is_decimal_port(port):
        raise FieldTypeError(
            f"Invalid '{keys.PORT}': expected a decimal integer string, got {port!r}",
            key=keys.PORT,
        )
    return int(port)


def _node_to_state(node: RKEConfigNode) -> Dict[str, Any]:
    port = {keys.PORT: _port_to_state(node.port)} if node.port else {}
    return {
        keys.NODE_NAME: node.node_name,
        keys.ADDRESS: node.address,
        **port,
        keys.INTERNAL_ADDRESS: node.internal_address,
        keys.ROLE: list(node.role),
        keys.HOSTNAME_OVERRIDE: node.hostname_override,
        keys.USER: node.user,
        keys.DOCKER_SOCKET: node.docker_socket,
        keys.SSH_AGENT_AUTH: node.ssh_agent_auth,
        keys.SSH_KEY: node.ssh_key,
        keys.SSH_KEY_PATH: node.ssh_key_path,
        keys.LABELS: dict(node.labels),
    }


def _host_to_state(node: RKEConfigNode) -> Dict[str, Any]:
    return {keys.NODE_NAME: node.node_name, keys.ADDRESS: node.address}


def _base_service_to_state(base: BaseService) -> Dict[str, Any]:
    return {
        keys.IMAGE: base.image,
        keys.EXTRA_ARGS: dict(base.extra_args),
        keys.EXTRA_BINDS: list(base.extra_binds),
    }


def _etcd_to_state(s: ETCDService) -> Dict[str, Any]:
    return {
        **_base_service_to_state(s.base),
        keys.EXTERNAL_URLS: list(s.external_urls),
        keys.CA_CERT: s.ca_cert,
        keys.CERT: s.cert,
        keys.KEY: s.key,
        keys.PATH: s.path,
    }


def _kube_api_to_state(s: KubeAPIService) -> Dict[str, Any]:
    return {
        **_base_service_to_state(s.base),
        keys.SERVICE_CLUSTER_IP_RANGE: s.service_cluster_ip_range,
        keys.POD_SECURITY_POLICY: s.pod_security_policy,
    }


def _kube_controller_to_state(s: KubeControllerService) -> Dict[str, Any]:
    return {
        **_base_service_to_state(s.base),
        keys.CLUSTER_CIDR: s.cluster_cidr,
        keys.SERVICE_CLUSTER_IP_RANGE: s.service_cluster_ip_range,
    }


def _scheduler_to_state(s: SchedulerService) -> Dict[str, Any]:
    return _base_service_to_state(s.base)


def _kubelet_to_state(s: KubeletService) -> Dict[str, Any]:
    return {
        **_base_service_to_state(s.base),
        keys.CLUSTER_DOMAIN: s.cluster_domain,
        keys.INFRA_CONTAINER_IMAGE: s.infra_container_image,
        keys.CLUSTER_DNS_SERVER: s.cluster_dns_server,
        keys.FAIL_SWAP_ON: s.fail_swap_on,
    }


def _kubeproxy_to_state(s: KubeproxyService) -> Dict[str, Any]:
    return _base_service_to_state(s.base)


def _network_to_state(n: NetworkConfig) -> Dict[str, Any]:
    return {keys.PLUGIN: n.plugin, keys.OPTIONS: dict(n.options)}


def _authentication_to_state(a: AuthnConfig) -> Dict[str, Any]:
    return {
        keys.STRATEGY: a.strategy,
        keys.OPTIONS: dict(a.options),
        keys.SANS: list(a.sans),
    }


def _authorization_to_state(a: AuthzConfig) -> Dict[str, Any]:
    return {keys.MODE: a.mode, keys.OPTIONS: dict(a.options)}


def _system_images_to_state(images: RKESystemImages) -> Dict[str, Any]:
    return {slot: getattr(images, slot) for slot in keys.SYSTEM_IMAGE_KEYS}


def _registry_to_state(r: PrivateRegistry) -> Dict[str, Any]:
    return {keys.URL: r.url, keys.USER: r.user, keys.PASSWORD: r.password}


def _ingress_to_state(i: IngressConfig) -> Dict[str, Any]:
    return {
        keys.PROVIDER: i.provider,
        keys.OPTIONS: dict(i.options),
        keys.NODE_SELECTOR: dict(i.node_selector),
    }


def _cloud_provider_to_state(c: CloudProvider) -> Dict[str, Any]:
    return {keys.NAME: c.name, keys.CLOUD_CONFIG: dict(c.cloud_config)}


# ----------------------------------------------------------------------
# 2) Whole cluster
# ----------------------------------------------------------------------


def cluster_state_items(
    cluster: Cluster, sort_certificates: bool = True
) -> List[StateItem]:
    """
    Compute every (key, value) pair the flat representation of cluster holds.

    Zero-valued blocks are left out. Host groups are classified from the
    current node list.

    Args:
        cluster: The typed cluster.
        sort_certificates: Order certificate bundles by id.

    Returns:
        Ordered (key, value) pairs.

    Raises:
        FieldTypeError: If a node port is not a decimal integer string.
    """
    cfg = cluster.rke_config
    svc = cfg.services
    groups = classify_hosts(cfg.nodes)

    blocks = [
        (keys.SERVICES_ETCD, _block(svc.etcd, _etcd_to_state(svc.etcd))),
        (keys.SERVICES_KUBE_API, _block(svc.kube_api, _kube_api_to_state(svc.kube_api))),
        (
            keys.SERVICES_KUBE_CONTROLLER,
            _block(svc.kube_controller, _kube_controller_to_state(svc.kube_controller)),
        ),
        (
            keys.SERVICES_SCHEDULER,
            _block(svc.scheduler, _scheduler_to_state(svc.scheduler)),
        ),
        (keys.SERVICES_KUBELET, _block(svc.kubelet, _kubelet_to_state(svc.kubelet))),
        (
            keys.SERVICES_KUBEPROXY,
            _block(svc.kubeproxy, _kubeproxy_to_state(svc.kubeproxy)),
        ),
        (keys.NETWORK, _block(cfg.network, _network_to_state(cfg.network))),
        (
            keys.AUTHENTICATION,
            _block(cfg.authentication, _authentication_to_state(cfg.authentication)),
        ),
        (
            keys.SYSTEM_IMAGES,
            _block(cfg.system_images, _system_images_to_state(cfg.system_images)),
        ),
        (
            keys.AUTHORIZATION,
            _block(cfg.authorization, _authorization_to_state(cfg.authorization)),
        ),
        (keys.INGRESS, _block(cfg.ingress, _ingress_to_state(cfg.ingress))),
        (
            keys.CLOUD_PROVIDER,
            _block(cfg.cloud_provider, _cloud_provider_to_state(cfg.cloud_provider)),
        ),
    ]
    present_blocks: List[StateItem] = [(k, v) for k, v in blocks if v is not None]

    return [
        (keys.NODES, [_node_to_state(n) for n in cfg.nodes]),
        *present_blocks,
        (keys.ADDONS, cfg.addons),
        (keys.ADDONS_INCLUDE, list(cfg.addons_include)),
        (keys.SSH_KEY_PATH, cfg.ssh_key_path),
        (keys.SSH_AGENT_AUTH, cfg.ssh_agent_auth),
        (keys.IGNORE_DOCKER_VERSION, cfg.ignore_docker_version),
        (keys.KUBERNETES_VERSION, cfg.kubernetes_version),
        (keys.PRIVATE_REGISTRIES, [_registry_to_state(r) for r in cfg.private_registries]),
        (keys.CLUSTER_NAME, cfg.cluster_name),
        (
            keys.CERTIFICATES,
            certificates_to_state(cluster.certificates, sort_by_id=sort_certificates),
        ),
        (keys.CLUSTER_DOMAIN, cluster.cluster_domain),
        (keys.CLUSTER_CIDR, cluster.cluster_cidr),
        (keys.CLUSTER_DNS_SERVER, cluster.cluster_dns_server),
        (keys.ETCD_HOSTS, [_host_to_state(h) for h in groups.etcd]),
        (keys.WORKER_HOSTS, [_host_to_state(h) for h in groups.worker]),
        (keys.CONTROL_PLANE_HOSTS, [_host_to_state(h) for h in groups.control_plane]),
        (keys.INACTIVE_HOSTS, [_host_to_state(h) for h in groups.inactive]),
    ]


def cluster_to_state(
    cluster: Cluster,
    builder: StateBuilder,
    resource_id: Optional[str] = None,
    sort_certificates: bool = True,
) -> None:
    """
    Write cluster into builder.

    Writes stop at the first failure and earlier writes are not rolled back,
    so a failed call leaves the sink in an indeterminate state.

    Args:
        cluster: The typed cluster.
        builder: The write sink.
        resource_id: If given, passed to builder.set_id before any write.
        sort_certificates: Order certificate bundles by id.

    Raises:
        FieldTypeError: If a node port is not a decimal integer string.
        Exception: Whatever builder.set raises, unchanged.
    """
    items = cluster_state_items(cluster, sort_certificates=sort_certificates)
    if resource_id is not None:
        builder.set_id(resource_id)
    for key, value in items:
        builder.set(key, value)
    logger.debug("Wrote %d flat key(s).", len(items))


def cluster_to_dict(cluster: Cluster, sort_certificates: bool = True) -> Dict[str, Any]:
    """Return the flat representation of cluster as a plain dict."""
    builder = DictStateBuilder()
    cluster_to_state(cluster, builder, sort_certificates=sort_certificates)
    return builder.values

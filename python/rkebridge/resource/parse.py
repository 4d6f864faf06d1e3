"""
rkebridge/resource/parse.py

Resource -> Config: one extractor per configuration domain, reading the flat
representation through a ResourceData accessor.

Single-occurrence blocks return None when omitted (key absent or empty list),
which callers must keep distinct from "present with zero values". List-valued
top-level fields return [] when absent. The aggregate entry points are
parse_resource_rke_config and parse_resource_cluster.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, TypeVar

from pydantic import BaseModel

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
    RancherKubernetesEngineConfig,
    RKEConfigNode,
    RKEConfigServices,
    RKESystemImages,
    SchedulerService,
)
from rkebridge.pki.codec import state_to_certificates
from rkebridge.resource import keys
from rkebridge.resource.data import DictResourceData, ResourceData
from rkebridge.resource.fields import (
    read_block,
    read_block_list,
    read_bool,
    read_port,
    read_str,
    read_str_list,
    read_str_map,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse_block(
    d: ResourceData, key: str, build: Callable[[DictResourceData], M]
) -> Optional[M]:
    block = read_block(d, key)
    if block is None:
        logger.debug("Block '%s' omitted.", key)
        return None
    return build(block)


# ----------------------------------------------------------------------
# 1) Nodes
# ----------------------------------------------------------------------


def _parse_node(n: ResourceData) -> RKEConfigNode:
    return RKEConfigNode(
        node_name=read_str(n, keys.NODE_NAME),
        address=read_str(n, keys.ADDRESS),
        port=read_port(n, keys.PORT),
        internal_address=read_str(n, keys.INTERNAL_ADDRESS),
        role=read_str_list(n, keys.ROLE),
        hostname_override=read_str(n, keys.HOSTNAME_OVERRIDE),
        user=read_str(n, keys.USER),
        docker_socket=read_str(n, keys.DOCKER_SOCKET),
        ssh_agent_auth=read_bool(n, keys.SSH_AGENT_AUTH),
        ssh_key=read_str(n, keys.SSH_KEY),
        ssh_key_path=read_str(n, keys.SSH_KEY_PATH),
        labels=read_str_map(n, keys.LABELS),
    )


def parse_resource_rke_config_node(d: ResourceData) -> List[RKEConfigNode]:
    """
    Read the node list.

    Returns:
        Nodes in declared order, [] if "nodes" is absent. Each node's integer
        port becomes its decimal string.
    """
    return [_parse_node(n) for n in read_block_list(d, keys.NODES)]


# ----------------------------------------------------------------------
# 2) Services
# ----------------------------------------------------------------------


def _parse_base_service(s: ResourceData) -> BaseService:
    return BaseService(
        image=read_str(s, keys.IMAGE),
        extra_args=read_str_map(s, keys.EXTRA_ARGS),
        extra_binds=read_str_list(s, keys.EXTRA_BINDS),
    )


def parse_resource_etcd_service(d: ResourceData) -> Optional[ETCDService]:
    return _parse_block(
        d,
        keys.SERVICES_ETCD,
        lambda s: ETCDService(
            base=_parse_base_service(s),
            external_urls=read_str_list(s, keys.EXTERNAL_URLS),
            ca_cert=read_str(s, keys.CA_CERT),
            cert=read_str(s, keys.CERT),
            key=read_str(s, keys.KEY),
            path=read_str(s, keys.PATH),
        ),
    )


def parse_resource_kube_api_service(d: ResourceData) -> Optional[KubeAPIService]:
    return _parse_block(
        d,
        keys.SERVICES_KUBE_API,
        lambda s: KubeAPIService(
            base=_parse_base_service(s),
            service_cluster_ip_range=read_str(s, keys.SERVICE_CLUSTER_IP_RANGE),
            pod_security_policy=read_bool(s, keys.POD_SECURITY_POLICY),
        ),
    )


def parse_resource_kube_controller_service(
    d: ResourceData,
) -> Optional[KubeControllerService]:
    return _parse_block(
        d,
        keys.SERVICES_KUBE_CONTROLLER,
        lambda s: KubeControllerService(
            base=_parse_base_service(s),
            cluster_cidr=read_str(s, keys.CLUSTER_CIDR),
            service_cluster_ip_range=read_str(s, keys.SERVICE_CLUSTER_IP_RANGE),
        ),
    )


def parse_resource_scheduler_service(d: ResourceData) -> Optional[SchedulerService]:
    return _parse_block(
        d,
        keys.SERVICES_SCHEDULER,
        lambda s: SchedulerService(base=_parse_base_service(s)),
    )


def parse_resource_kubelet_service(d: ResourceData) -> Optional[KubeletService]:
    return _parse_block(
        d,
        keys.SERVICES_KUBELET,
        lambda s: KubeletService(
            base=_parse_base_service(s),
            cluster_domain=read_str(s, keys.CLUSTER_DOMAIN),
            infra_container_image=read_str(s, keys.INFRA_CONTAINER_IMAGE),
            cluster_dns_server=read_str(s, keys.CLUSTER_DNS_SERVER),
            fail_swap_on=read_bool(s, keys.FAIL_SWAP_ON),
        ),
    )


def parse_resource_kubeproxy_service(d: ResourceData) -> Optional[KubeproxyService]:
    return _parse_block(
        d,
        keys.SERVICES_KUBEPROXY,
        lambda s: KubeproxyService(base=_parse_base_service(s)),
    )


# ----------------------------------------------------------------------
# 3) Network, authn/authz, ingress, cloud provider
# ----------------------------------------------------------------------


def parse_resource_network(d: ResourceData) -> Optional[NetworkConfig]:
    return _parse_block(
        d,
        keys.NETWORK,
        lambda b: NetworkConfig(
            plugin=read_str(b, keys.PLUGIN),
            options=read_str_map(b, keys.OPTIONS),
        ),
    )


def parse_resource_authentication(d: ResourceData) -> Optional[AuthnConfig]:
    return _parse_block(
        d,
        keys.AUTHENTICATION,
        lambda b: AuthnConfig(
            strategy=read_str(b, keys.STRATEGY),
            options=read_str_map(b, keys.OPTIONS),
            sans=read_str_list(b, keys.SANS),
        ),
    )


def parse_resource_authorization(d: ResourceData) -> Optional[AuthzConfig]:
    return _parse_block(
        d,
        keys.AUTHORIZATION,
        lambda b: AuthzConfig(
            mode=read_str(b, keys.MODE),
            options=read_str_map(b, keys.OPTIONS),
        ),
    )


def parse_resource_ingress(d: ResourceData) -> Optional[IngressConfig]:
    return _parse_block(
        d,
        keys.INGRESS,
        lambda b: IngressConfig(
            provider=read_str(b, keys.PROVIDER),
            options=read_str_map(b, keys.OPTIONS),
            node_selector=read_str_map(b, keys.NODE_SELECTOR),
        ),
    )


def parse_resource_cloud_provider(d: ResourceData) -> Optional[CloudProvider]:
    return _parse_block(
        d,
        keys.CLOUD_PROVIDER,
        lambda b: CloudProvider(
            name=read_str(b, keys.NAME),
            cloud_config=read_str_map(b, keys.CLOUD_CONFIG),
        ),
    )


# ----------------------------------------------------------------------
# 4) System images
# ----------------------------------------------------------------------


def _parse_system_images(b: DictResourceData) -> RKESystemImages:
    images = RKESystemImages(
        **{slot: read_str(b, slot) for slot in keys.SYSTEM_IMAGE_KEYS}
    )
    ignored = sorted(set(b.keys()) - set(keys.SYSTEM_IMAGE_KEYS))
    if ignored:
        logger.warning("Ignoring unknown system image key(s): %s", ", ".join(ignored))
    return images


def parse_resource_system_images(d: ResourceData) -> Optional[RKESystemImages]:
    """
    Read the system image overrides.

    Only the fixed image slots are read; unknown keys are ignored and missing
    slots stay "".
    """
    return _parse_block(d, keys.SYSTEM_IMAGES, _parse_system_images)


# ----------------------------------------------------------------------
# 5) Top-level scalars and lists
# ----------------------------------------------------------------------


def parse_resource_addons(d: ResourceData) -> str:
    return read_str(d, keys.ADDONS)


def parse_resource_addons_include(d: ResourceData) -> List[str]:
    return read_str_list(d, keys.ADDONS_INCLUDE)


def parse_resource_ssh_key_path(d: ResourceData) -> str:
    return read_str(d, keys.SSH_KEY_PATH)


def parse_resource_ssh_agent_auth(d: ResourceData) -> bool:
    return read_bool(d, keys.SSH_AGENT_AUTH)


def parse_resource_ignore_docker_version(d: ResourceData) -> bool:
    return read_bool(d, keys.IGNORE_DOCKER_VERSION)


def parse_resource_version(d: ResourceData) -> str:
    return read_str(d, keys.KUBERNETES_VERSION)


def parse_resource_cluster_name(d: ResourceData) -> str:
    return read_str(d, keys.CLUSTER_NAME)


def parse_resource_private_registries(d: ResourceData) -> List[PrivateRegistry]:
    return [
        PrivateRegistry(
            url=read_str(r, keys.URL),
            user=read_str(r, keys.USER),
            password=read_str(r, keys.PASSWORD),
        )
        for r in read_block_list(d, keys.PRIVATE_REGISTRIES)
    ]


parse_resource_certificates = state_to_certificates


# ----------------------------------------------------------------------
# 6) Aggregates
# ----------------------------------------------------------------------


def parse_resource_rke_config(d: ResourceData) -> RancherKubernetesEngineConfig:
    """
    Build the full typed configuration from the flat representation.

    Omitted blocks are left at their zero value.

    Raises:
        FieldTypeError: If any flat value has the wrong shape.
    """
    services = RKEConfigServices(
        etcd=parse_resource_etcd_service(d) or ETCDService(),
        kube_api=parse_resource_kube_api_service(d) or KubeAPIService(),
        kube_controller=(
            parse_resource_kube_controller_service(d) or KubeControllerService()
        ),
        scheduler=parse_resource_scheduler_service(d) or SchedulerService(),
        kubelet=parse_resource_kubelet_service(d) or KubeletService(),
        kubeproxy=parse_resource_kubeproxy_service(d) or KubeproxyService(),
    )
    config = RancherKubernetesEngineConfig(
        nodes=parse_resource_rke_config_node(d),
        services=services,
        network=parse_resource_network(d) or NetworkConfig(),
        authentication=parse_resource_authentication(d) or AuthnConfig(),
        addons=parse_resource_addons(d),
        addons_include=parse_resource_addons_include(d),
        system_images=parse_resource_system_images(d) or RKESystemImages(),
        ssh_key_path=parse_resource_ssh_key_path(d),
        ssh_agent_auth=parse_resource_ssh_agent_auth(d),
        authorization=parse_resource_authorization(d) or AuthzConfig(),
        ignore_docker_version=parse_resource_ignore_docker_version(d),
        kubernetes_version=parse_resource_version(d),
        private_registries=parse_resource_private_registries(d),
        ingress=parse_resource_ingress(d) or IngressConfig(),
        cluster_name=parse_resource_cluster_name(d),
        cloud_provider=parse_resource_cloud_provider(d) or CloudProvider(),
    )
    logger.debug(
        "Parsed cluster '%s' with %d node(s).", config.cluster_name, len(config.nodes)
    )
    return config


def parse_resource_cluster(d: ResourceData) -> Cluster:
    """
    Build a Cluster: the typed configuration, its certificate bundles and the
    cluster-wide domain/CIDR/DNS overrides. Host groups follow from the nodes.

    Raises:
        FieldTypeError: If any flat value has the wrong shape.
        CertificateDecodeError: If a certificate or key PEM is invalid.
    """
    return Cluster(
        rke_config=parse_resource_rke_config(d),
        certificates=parse_resource_certificates(d),
        cluster_domain=read_str(d, keys.CLUSTER_DOMAIN),
        cluster_cidr=read_str(d, keys.CLUSTER_CIDR),
        cluster_dns_server=read_str(d, keys.CLUSTER_DNS_SERVER),
    )

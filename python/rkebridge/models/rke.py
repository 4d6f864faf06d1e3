"""
rkebridge/models/rke.py

Defines Pydantic models for the typed RKE cluster configuration:
 - RKEConfigNode
 - BaseService and the six Kubernetes service records
 - RKEConfigServices
 - NetworkConfig, AuthnConfig, AuthzConfig
 - RKESystemImages
 - PrivateRegistry, IngressConfig, CloudProvider
 - RancherKubernetesEngineConfig

Every field defaults to its zero value, so a model built with no arguments
is the zero value of that record. Field names match the flat-representation
keys exactly.
"""

from __future__ import annotations

from typing import Any, Dict, List
from pydantic import BaseModel, Field, field_validator


def is_decimal_port(port: str) -> bool:
    """
    True if port is the canonical decimal form of a non-negative integer.

    Signs, whitespace, digit separators, leading zeros and non-ASCII digits
    are all rejected, so str(int(port)) == port holds for every accepted value.
    """
    return port.isascii() and port.isdigit() and str(int(port)) == port


class RKEConfigNode(BaseModel):
    """
    A single cluster node as declared by the user.

    Attributes:
        node_name: Logical node name.
        address: Address used to reach the node over SSH.
        port: SSH port, kept as a string (the flat form carries an int).
        internal_address: Address used for intra-cluster traffic.
        role: Ordered role tags, e.g. ["etcd", "controlplane", "worker"].
        hostname_override: Hostname to register the node under.
        user: SSH user.
        docker_socket: Path of the container runtime socket.
        ssh_agent_auth: True to authenticate through the local SSH agent.
        ssh_key: Inline SSH private key material.
        ssh_key_path: Path to the SSH private key.
        labels: Node labels.
    """

    node_name: str = ""
    address: str = ""
    port: str = ""
    internal_address: str = ""
    role: List[str] = Field(default_factory=list)
    hostname_override: str = ""
    user: str = ""
    docker_socket: str = ""
    ssh_agent_auth: bool = False
    ssh_key: str = ""
    ssh_key_path: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)

    @field_validator("port", mode="before")
    @classmethod
    def port_as_string(cls, val: Any) -> Any:
        """Accept an integer port (as YAML documents usually carry it)."""
        if isinstance(val, int) and not isinstance(val, bool):
            return str(val)
        return val

    @field_validator("port")
    @classmethod
    def port_is_decimal(cls, val: str) -> str:
        if val and not is_decimal_port(val):
            raise ValueError(f"port must be a decimal integer, got {val!r}")
        return val


class BaseService(BaseModel):
    """Fields shared by every Kubernetes service record."""

    image: str = ""
    extra_args: Dict[str, str] = Field(default_factory=dict)
    extra_binds: List[str] = Field(default_factory=list)


class ETCDService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)
    external_urls: List[str] = Field(default_factory=list)
    ca_cert: str = ""
    cert: str = ""
    key: str = ""
    path: str = ""


class KubeAPIService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)
    service_cluster_ip_range: str = ""
    pod_security_policy: bool = False


class KubeControllerService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)
    cluster_cidr: str = ""
    service_cluster_ip_range: str = ""


class SchedulerService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)


class KubeletService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)
    cluster_domain: str = ""
    infra_container_image: str = ""
    cluster_dns_server: str = ""
    fail_swap_on: bool = False


class KubeproxyService(BaseModel):
    base: BaseService = Field(default_factory=BaseService)


class RKEConfigServices(BaseModel):
    """The six Kubernetes services RKE deploys."""

    etcd: ETCDService = Field(default_factory=ETCDService)
    kube_api: KubeAPIService = Field(default_factory=KubeAPIService)
    kube_controller: KubeControllerService = Field(
        default_factory=KubeControllerService
    )
    scheduler: SchedulerService = Field(default_factory=SchedulerService)
    kubelet: KubeletService = Field(default_factory=KubeletService)
    kubeproxy: KubeproxyService = Field(default_factory=KubeproxyService)


class NetworkConfig(BaseModel):
    plugin: str = ""
    options: Dict[str, str] = Field(default_factory=dict)


class AuthnConfig(BaseModel):
    strategy: str = ""
    options: Dict[str, str] = Field(default_factory=dict)
    sans: List[str] = Field(default_factory=list)


class AuthzConfig(BaseModel):
    mode: str = ""
    options: Dict[str, str] = Field(default_factory=dict)


class RKESystemImages(BaseModel):
    """
    Image overrides, one per cluster component. Any slot left empty
    falls back to the engine's built-in default.
    """

    etcd: str = ""
    alpine: str = ""
    nginx_proxy: str = ""
    cert_downloader: str = ""
    kubernetes_services_sidecar: str = ""
    kube_dns: str = ""
    dnsmasq: str = ""
    kube_dns_sidecar: str = ""
    kube_dns_autoscaler: str = ""
    kubernetes: str = ""
    flannel: str = ""
    flannel_cni: str = ""
    calico_node: str = ""
    calico_cni: str = ""
    calico_controllers: str = ""
    calico_ctl: str = ""
    canal_node: str = ""
    canal_cni: str = ""
    canal_flannel: str = ""
    weave_node: str = ""
    weave_cni: str = ""
    pod_infra_container: str = ""
    ingress: str = ""
    ingress_backend: str = ""
    dashboard: str = ""
    heapster: str = ""
    grafana: str = ""
    influxdb: str = ""
    tiller: str = ""


class PrivateRegistry(BaseModel):
    url: str = ""
    user: str = ""
    password: str = ""


class IngressConfig(BaseModel):
    provider: str = ""
    options: Dict[str, str] = Field(default_factory=dict)
    node_selector: Dict[str, str] = Field(default_factory=dict)


class CloudProvider(BaseModel):
    name: str = ""
    cloud_config: Dict[str, str] = Field(default_factory=dict)


class RancherKubernetesEngineConfig(BaseModel):
    """
    The full user-facing cluster configuration consumed by the provisioning engine.

    Attributes:
        nodes: Declared nodes, in order.
        services: Per-service settings.
        network: Network plugin and its options.
        authentication: Authentication strategy, options and SANs.
        addons: Inline addon YAML.
        addons_include: Addon manifest URLs or paths, in order.
        system_images: Per-component image overrides.
        ssh_key_path: Cluster-wide default SSH key path.
        ssh_agent_auth: Cluster-wide default for SSH agent authentication.
        authorization: Authorization mode and options.
        ignore_docker_version: Skip the container runtime version check.
        kubernetes_version: Kubernetes version to deploy.
        private_registries: Registries to log into before pulling images.
        ingress: Ingress controller settings.
        cluster_name: Cluster name.
        cloud_provider: Cloud provider integration settings.
    """

    nodes: List[RKEConfigNode] = Field(default_factory=list)
    services: RKEConfigServices = Field(default_factory=RKEConfigServices)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    authentication: AuthnConfig = Field(default_factory=AuthnConfig)
    addons: str = ""
    addons_include: List[str] = Field(default_factory=list)
    system_images: RKESystemImages = Field(default_factory=RKESystemImages)
    ssh_key_path: str = ""
    ssh_agent_auth: bool = False
    authorization: AuthzConfig = Field(default_factory=AuthzConfig)
    ignore_docker_version: bool = False
    kubernetes_version: str = ""
    private_registries: List[PrivateRegistry] = Field(default_factory=list)
    ingress: IngressConfig = Field(default_factory=IngressConfig)
    cluster_name: str = ""
    cloud_provider: CloudProvider = Field(default_factory=CloudProvider)


__all__ = [
    "RKEConfigNode",
    "BaseService",
    "ETCDService",
    "KubeAPIService",
    "KubeControllerService",
    "SchedulerService",
    "KubeletService",
    "KubeproxyService",
    "RKEConfigServices",
    "NetworkConfig",
    "AuthnConfig",
    "AuthzConfig",
    "RKESystemImages",
    "PrivateRegistry",
    "IngressConfig",
    "CloudProvider",
    "RancherKubernetesEngineConfig",
]

"""
rkebridge/resource/keys.py

The flat-representation key vocabulary. These strings are the compatibility
surface with the Terraform resource schema and must not change.
"""

from typing import Tuple

# ----------------------------------------------------------------------
# 1) Top-level keys
# ----------------------------------------------------------------------

NODES = "nodes"
SERVICES_ETCD = "services_etcd"
SERVICES_KUBE_API = "services_kube_api"
SERVICES_KUBE_CONTROLLER = "services_kube_controller"
SERVICES_SCHEDULER = "services_scheduler"
SERVICES_KUBELET = "services_kubelet"
SERVICES_KUBEPROXY = "services_kubeproxy"
NETWORK = "network"
AUTHENTICATION = "authentication"
AUTHORIZATION = "authorization"
ADDONS = "addons"
ADDONS_INCLUDE = "addons_include"
SYSTEM_IMAGES = "system_images"
SSH_KEY_PATH = "ssh_key_path"
SSH_AGENT_AUTH = "ssh_agent_auth"
IGNORE_DOCKER_VERSION = "ignore_docker_version"
KUBERNETES_VERSION = "kubernetes_version"
PRIVATE_REGISTRIES = "private_registries"
INGRESS = "ingress"
CLUSTER_NAME = "cluster_name"
CLOUD_PROVIDER = "cloud_provider"
CERTIFICATES = "certificates"
CLUSTER_DOMAIN = "cluster_domain"
CLUSTER_CIDR = "cluster_cidr"
CLUSTER_DNS_SERVER = "cluster_dns_server"
ETCD_HOSTS = "etcd_hosts"
WORKER_HOSTS = "worker_hosts"
CONTROL_PLANE_HOSTS = "control_plane_hosts"
INACTIVE_HOSTS = "inactive_hosts"

# ----------------------------------------------------------------------
# 2) Node keys
# ----------------------------------------------------------------------

NODE_NAME = "node_name"
ADDRESS = "address"
PORT = "port"
INTERNAL_ADDRESS = "internal_address"
ROLE = "role"
HOSTNAME_OVERRIDE = "hostname_override"
USER = "user"
DOCKER_SOCKET = "docker_socket"
SSH_KEY = "ssh_key"
LABELS = "labels"

# ----------------------------------------------------------------------
# 3) Block keys
# ----------------------------------------------------------------------

IMAGE = "image"
EXTRA_ARGS = "extra_args"
EXTRA_BINDS = "extra_binds"
EXTERNAL_URLS = "external_urls"
CA_CERT = "ca_cert"
CERT = "cert"
KEY = "key"
PATH = "path"
SERVICE_CLUSTER_IP_RANGE = "service_cluster_ip_range"
POD_SECURITY_POLICY = "pod_security_policy"
INFRA_CONTAINER_IMAGE = "infra_container_image"
FAIL_SWAP_ON = "fail_swap_on"
PLUGIN = "plugin"
OPTIONS = "options"
STRATEGY = "strategy"
SANS = "sans"
MODE = "mode"
URL = "url"
PASSWORD = "password"
PROVIDER = "provider"
NODE_SELECTOR = "node_selector"
NAME = "name"
CLOUD_CONFIG = "cloud_config"

# ----------------------------------------------------------------------
# 4) Certificate bundle keys
# ----------------------------------------------------------------------

CERT_ID = "id"
CERT_CERTIFICATE = "certificate"
CERT_KEY = "key"
CERT_CONFIG = "config"
CERT_NAME = "name"
CERT_COMMON_NAME = "common_name"
CERT_OU_NAME = "ou_name"
CERT_ENV_NAME = "env_name"
CERT_PATH = "path"
CERT_KEY_ENV_NAME = "key_env_name"
CERT_KEY_PATH = "key_path"
CERT_CONFIG_ENV_NAME = "config_env_name"
CERT_CONFIG_PATH = "config_path"

# Passthrough metadata strings carried by every certificate bundle.
CERT_METADATA_KEYS: Tuple[str, ...] = (
    CERT_CONFIG,
    CERT_NAME,
    CERT_COMMON_NAME,
    CERT_OU_NAME,
    CERT_ENV_NAME,
    CERT_PATH,
    CERT_KEY_ENV_NAME,
    CERT_KEY_PATH,
    CERT_CONFIG_ENV_NAME,
    CERT_CONFIG_PATH,
)

# ----------------------------------------------------------------------
# 5) System image slots
# ----------------------------------------------------------------------

SYSTEM_IMAGE_KEYS: Tuple[str, ...] = (
    "etcd",
    "alpine",
    "nginx_proxy",
    "cert_downloader",
    "kubernetes_services_sidecar",
    "kube_dns",
    "dnsmasq",
    "kube_dns_sidecar",
    "kube_dns_autoscaler",
    "kubernetes",
    "flannel",
    "flannel_cni",
    "calico_node",
    "calico_cni",
    "calico_controllers",
    "calico_ctl",
    "canal_node",
    "canal_cni",
    "canal_flannel",
    "weave_node",
    "weave_cni",
    "pod_infra_container",
    "ingress",
    "ingress_backend",
    "dashboard",
    "heapster",
    "grafana",
    "influxdb",
    "tiller",
)

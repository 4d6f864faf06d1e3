"""Shared test fixtures for rkebridge tests."""

from __future__ import annotations

from typing import Any, Dict

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

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
from rkebridge.resource import keys

CERT_PEM = """-----BEGIN CERTIFICATE-----
MIIDujCCAqKgAwIBAgIIE31FZVaPXTUwDQYJKoZIhvcNAQEFBQAwSTELMAkGA1UE
BhMCVVMxEzARBgNVBAoTCkdvb2dsZSBJbmMxJTAjBgNVBAMTHEdvb2dsZSBJbnRl
cm5ldCBBdXRob3JpdHkgRzIwHhcNMTQwMTI5MTMyNzQzWhcNMTQwNTI5MDAwMDAw
WjBpMQswCQYDVQQGEwJVUzETMBEGA1UECAwKQ2FsaWZvcm5pYTEWMBQGA1UEBwwN
TW91bnRhaW4gVmlldzETMBEGA1UECgwKR29vZ2xlIEluYzEYMBYGA1UEAwwPbWFp
bC5nb29nbGUuY29tMFkwEwYHKoZIzj0CAQYIKoZIzj0DAQcDQgAEfRrObuSW5T7q
5CnSEqefEmtH4CCv6+5EckuriNr1CjfVvqzwfAhopXkLrq45EQm8vkmf7W96XJhC
7ZM0dYi1/qOCAU8wggFLMB0GA1UdJQQWMBQGCCsGAQUFBwMBBggrBgEFBQcDAjAa
BgNVHREEEzARgg9tYWlsLmdvb2dsZS5jb20wCwYDVR0PBAQDAgeAMGgGCCsGAQUF
BwEBBFwwWjArBggrBgEFBQcwAoYfaHR0cDovL3BraS5nb29nbGUuY29tL0dJQUcy
LmNydDArBggrBgEFBQcwAYYfaHR0cDovL2NsaWVudHMxLmdvb2dsZS5jb20vb2Nz
cDAdBgNVHQ4EFgQUiJxtimAuTfwb+aUtBn5UYKreKvMwDAYDVR0TAQH/BAIwADAf
BgNVHSMEGDAWgBRK3QYWG7z2aLV29YG2u2IaulqBLzAXBgNVHSAEEDAOMAwGCisG
AQQB1nkCBQEwMAYDVR0fBCkwJzAloCOgIYYfaHR0cDovL3BraS5nb29nbGUuY29t
L0dJQUcyLmNybDANBgkqhkiG9w0BAQUFAAOCAQEAH6RYHxHdcGpMpFE3oxDoFnP+
gtuBCHan2yE2GRbJ2Cw8Lw0MmuKqHlf9RSeYfd3BXeKkj1qO6TVKwCh+0HdZk283
TZZyzmEOyclm3UGFYe82P/iDFt+CeQ3NpmBg+GoaVCuWAARJN/KfglbLyyYygcQq
0SgeDh8dRKUiaW3HQSoYvTvdTuqzwK4CXsr3b5/dAOY8uMuG/IAR3FgwTbZ1dtoW
RvOTa8hYiU6A475WuZKyEHcwnGYe57u2I2KbMgcKjPniocj4QzgYsVAVKW3IwaOh
yE+vPxsiUkvQHdO2fojCkY8jg70jxM+gu59tPDNbw3Uh/2Ij310FgTHsnGQMyA==
-----END CERTIFICATE-----
"""


@pytest.fixture
def cert_pem() -> str:
    """Reference certificate PEM (mail.google.com, 2014)."""
    return CERT_PEM


@pytest.fixture
def certificate(cert_pem: str) -> x509.Certificate:
    return x509.load_pem_x509_certificate(cert_pem.encode("ascii"))


@pytest.fixture
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


def _services_state() -> Dict[str, Any]:
    def base(image: str) -> Dict[str, Any]:
        return {
            "image": image,
            "extra_args": {"foo": "bar", "bar": "foo"},
            "extra_binds": ["/bind1", "/bind2"],
        }

    return {
        "services_etcd": [
            {
                **base("etcd:latest"),
                "external_urls": [
                    "https://ext1.example.com",
                    "https://ext2.example.com",
                ],
                "ca_cert": "ca_cert",
                "cert": "cert",
                "key": "key",
                "path": "path",
            }
        ],
        "services_kube_api": [
            {
                **base("kube_api:latest"),
                "service_cluster_ip_range": "10.240.0.0/16",
                "pod_security_policy": True,
            }
        ],
        "services_kube_controller": [
            {
                **base("kube_controller:latest"),
                "cluster_cidr": "10.200.0.0/8",
                "service_cluster_ip_range": "10.240.0.0/16",
            }
        ],
        "services_scheduler": [base("scheduler:latest")],
        "services_kubelet": [
            {
                **base("kubelet:latest"),
                "cluster_domain": "example.com",
                "infra_container_image": "alpine:latest",
                "cluster_dns_server": "192.2.0.1",
                "fail_swap_on": True,
            }
        ],
        "services_kubeproxy": [base("kubeproxy:latest")],
    }


@pytest.fixture
def full_state() -> Dict[str, Any]:
    """A flat representation exercising every domain (no certificates)."""
    node = {
        "node_name": "node1",
        "address": "192.2.0.1",
        "port": 22,
        "internal_address": "192.2.0.2",
        "role": ["controlplane", "worker", "etcd"],
        "hostname_override": "hostname_override",
        "user": "rancher",
        "docker_socket": "/var/run/docker.sock",
        "ssh_agent_auth": True,
        "ssh_key": "ssh_key",
        "ssh_key_path": "ssh_key_path",
        "labels": {"foo": "foo", "bar": "bar"},
    }
    worker = {
        **node,
        "node_name": "node2",
        "address": "192.2.0.3",
        "port": 2222,
        "role": ["worker"],
        "labels": {},
    }
    idle = {**node, "node_name": "node3", "address": "192.2.0.4", "role": []}
    return {
        "nodes": [node, worker, idle],
        **_services_state(),
        "network": [{"plugin": "calico", "options": {"foo": "bar", "bar": "foo"}}],
        "authentication": [
            {
                "strategy": "x509",
                "options": {"foo": "bar", "bar": "foo"},
                "sans": ["sans1", "sans2"],
            }
        ],
        "addons": "addons: yaml",
        "addons_include": [
            "https://example.com/addon1.yaml",
            "https://example.com/addon2.yaml",
        ],
        "system_images": [{slot: slot for slot in keys.SYSTEM_IMAGE_KEYS}],
        "ssh_key_path": "ssh_key_path",
        "ssh_agent_auth": True,
        "authorization": [{"mode": "rbac", "options": {"foo": "bar", "bar": "foo"}}],
        "ignore_docker_version": True,
        "kubernetes_version": "1.8.9",
        "private_registries": [
            {
                "url": "https://registry1.example.com",
                "user": "user1",
                "password": "password1",
            },
            {
                "url": "https://registry2.example.com",
                "user": "user2",
                "password": "password2",
            },
        ],
        "ingress": [
            {
                "provider": "nginx",
                "options": {"foo": "bar", "bar": "foo"},
                "node_selector": {"role": "worker"},
            }
        ],
        "cluster_name": "example",
        "cloud_provider": [
            {
                "name": "sakuracloud",
                "cloud_config": {
                    "token": "your-token",
                    "secret": "your-secret",
                    "zone": "your-zone",
                },
            }
        ],
        "certificates": [],
        "cluster_domain": "example.com",
        "cluster_cidr": "10.200.0.0/8",
        "cluster_dns_server": "192.2.0.1",
        "etcd_hosts": [{"node_name": "node1", "address": "192.2.0.1"}],
        "worker_hosts": [
            {"node_name": "node1", "address": "192.2.0.1"},
            {"node_name": "node2", "address": "192.2.0.3"},
        ],
        "control_plane_hosts": [{"node_name": "node1", "address": "192.2.0.1"}],
        "inactive_hosts": [{"node_name": "node3", "address": "192.2.0.4"}],
    }


@pytest.fixture
def full_cluster() -> Cluster:
    """The typed counterpart of full_state."""
    node = RKEConfigNode(
        node_name="node1",
        address="192.2.0.1",
        port="22",
        internal_address="192.2.0.2",
        role=["controlplane", "worker", "etcd"],
        hostname_override="hostname_override",
        user="rancher",
        docker_socket="/var/run/docker.sock",
        ssh_agent_auth=True,
        ssh_key="ssh_key",
        ssh_key_path="ssh_key_path",
        labels={"foo": "foo", "bar": "bar"},
    )
    worker = node.model_copy(
        update={
            "node_name": "node2",
            "address": "192.2.0.3",
            "port": "2222",
            "role": ["worker"],
            "labels": {},
        }
    )
    idle = node.model_copy(
        update={"node_name": "node3", "address": "192.2.0.4", "role": []}
    )

    def base(image: str) -> BaseService:
        return BaseService(
            image=image,
            extra_args={"foo": "bar", "bar": "foo"},
            extra_binds=["/bind1", "/bind2"],
        )

    services = RKEConfigServices(
        etcd=ETCDService(
            base=base("etcd:latest"),
            external_urls=["https://ext1.example.com", "https://ext2.example.com"],
            ca_cert="ca_cert",
            cert="cert",
            key="key",
            path="path",
        ),
        kube_api=KubeAPIService(
            base=base("kube_api:latest"),
            service_cluster_ip_range="10.240.0.0/16",
            pod_security_policy=True,
        ),
        kube_controller=KubeControllerService(
            base=base("kube_controller:latest"),
            cluster_cidr="10.200.0.0/8",
            service_cluster_ip_range="10.240.0.0/16",
        ),
        scheduler=SchedulerService(base=base("scheduler:latest")),
        kubelet=KubeletService(
            base=base("kubelet:latest"),
            cluster_domain="example.com",
            infra_container_image="alpine:latest",
            cluster_dns_server="192.2.0.1",
            fail_swap_on=True,
        ),
        kubeproxy=KubeproxyService(base=base("kubeproxy:latest")),
    )
    config = RancherKubernetesEngineConfig(
        nodes=[node, worker, idle],
        services=services,
        network=NetworkConfig(plugin="calico", options={"foo": "bar", "bar": "foo"}),
        authentication=AuthnConfig(
            strategy="x509",
            options={"foo": "bar", "bar": "foo"},
            sans=["sans1", "sans2"],
        ),
        addons="addons: yaml",
        addons_include=[
            "https://example.com/addon1.yaml",
            "https://example.com/addon2.yaml",
        ],
        system_images=RKESystemImages(
            **{slot: slot for slot in keys.SYSTEM_IMAGE_KEYS}
        ),
        ssh_key_path="ssh_key_path",
        ssh_agent_auth=True,
        authorization=AuthzConfig(mode="rbac", options={"foo": "bar", "bar": "foo"}),
        ignore_docker_version=True,
        kubernetes_version="1.8.9",
        private_registries=[
            PrivateRegistry(
                url="https://registry1.example.com", user="user1", password="password1"
            ),
            PrivateRegistry(
                url="https://registry2.example.com", user="user2", password="password2"
            ),
        ],
        ingress=IngressConfig(
            provider="nginx",
            options={"foo": "bar", "bar": "foo"},
            node_selector={"role": "worker"},
        ),
        cluster_name="example",
        cloud_provider=CloudProvider(
            name="sakuracloud",
            cloud_config={
                "token": "your-token",
                "secret": "your-secret",
                "zone": "your-zone",
            },
        ),
    )
    return Cluster(
        rke_config=config,
        cluster_domain="example.com",
        cluster_cidr="10.200.0.0/8",
        cluster_dns_server="192.2.0.1",
    )

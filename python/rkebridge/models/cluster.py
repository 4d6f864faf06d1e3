"""
rkebridge/models/cluster.py

Defines the top-level Pydantic models handed to the provisioning engine:
 - CertificatePKI: one named certificate bundle
 - Cluster: the typed configuration plus derived host groups and certificates
"""

from __future__ import annotations

from typing import Dict, List, Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from pydantic import BaseModel, ConfigDict, Field

from rkebridge.hosts import HostGroups, classify_hosts
from rkebridge.models.rke import RancherKubernetesEngineConfig, RKEConfigNode


class CertificatePKI(BaseModel):
    """
    A certificate and its private key, plus the bookkeeping the engine uses to
    place them on hosts.

    Attributes:
        certificate: Parsed X.509 certificate, or None if not yet issued.
        key: Parsed private key of any algorithm family, or None.
        config: Kubeconfig blob built around this certificate, if any.
        name: Display name.
        common_name: Subject common name.
        ou_name: Subject organizational unit.
        env_name: Environment variable carrying the certificate.
        path: On-host path of the certificate.
        key_env_name: Environment variable carrying the key.
        key_path: On-host path of the key.
        config_env_name: Environment variable carrying the config blob.
        config_path: On-host path of the config blob.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    certificate: Optional[x509.Certificate] = None
    key: Optional[PrivateKeyTypes] = None
    config: str = ""
    name: str = ""
    common_name: str = ""
    ou_name: str = ""
    env_name: str = ""
    path: str = ""
    key_env_name: str = ""
    key_path: str = ""
    config_env_name: str = ""
    config_path: str = ""


class Cluster(BaseModel):
    """
    Everything one provisioning operation needs, built fresh from the flat
    representation (or written back to it).

    The host groups are not stored: each property reclassifies
    rke_config.nodes when read, so they can never go stale.

    Attributes:
        rke_config: The user-facing cluster configuration.
        certificates: Certificate bundles keyed by logical certificate id.
        cluster_domain: Cluster-wide DNS domain override.
        cluster_cidr: Cluster-wide pod CIDR override.
        cluster_dns_server: Cluster-wide DNS server override.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rke_config: RancherKubernetesEngineConfig = Field(
        default_factory=RancherKubernetesEngineConfig
    )
    certificates: Dict[str, CertificatePKI] = Field(default_factory=dict)
    cluster_domain: str = ""
    cluster_cidr: str = ""
    cluster_dns_server: str = ""

    def host_groups(self) -> HostGroups:
        """Classify the current node list into the four host groups."""
        return classify_hosts(self.rke_config.nodes)

    @property
    def etcd_hosts(self) -> List[RKEConfigNode]:
        return self.host_groups().etcd

    @property
    def control_plane_hosts(self) -> List[RKEConfigNode]:
        return self.host_groups().control_plane

    @property
    def worker_hosts(self) -> List[RKEConfigNode]:
        return self.host_groups().worker

    @property
    def inactive_hosts(self) -> List[RKEConfigNode]:
        return self.host_groups().inactive

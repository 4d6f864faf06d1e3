"""
rkebridge/hosts.py

Derives the operational host groups (etcd, control-plane, worker, inactive)
from a node list annotated with role tags.

Roles are independent: a node may sit in any combination of the etcd,
control-plane and worker groups. Only a node with none of those roles is
inactive. Groups are recomputed from the node list on every call.
"""

from __future__ import annotations

from typing import List, Sequence
from pydantic import BaseModel, Field

from rkebridge.models.rke import RKEConfigNode

ETCD_ROLE = "etcd"
CONTROL_PLANE_ROLE = "controlplane"
WORKER_ROLE = "worker"

KNOWN_ROLES = frozenset({ETCD_ROLE, CONTROL_PLANE_ROLE, WORKER_ROLE})


class HostGroups(BaseModel):
    """
    The four role-derived host groups, each in original node order.

    Attributes:
        etcd: Nodes tagged "etcd".
        control_plane: Nodes tagged "controlplane".
        worker: Nodes tagged "worker".
        inactive: Nodes carrying none of the three roles.
    """

    etcd: List[RKEConfigNode] = Field(default_factory=list)
    control_plane: List[RKEConfigNode] = Field(default_factory=list)
    worker: List[RKEConfigNode] = Field(default_factory=list)
    inactive: List[RKEConfigNode] = Field(default_factory=list)


def _with_role(nodes: Sequence[RKEConfigNode], role: str) -> List[RKEConfigNode]:
    return [node for node in nodes if role in node.role]


def classify_hosts(nodes: Sequence[RKEConfigNode]) -> HostGroups:
    """
    Partition nodes into the four host groups.

    Args:
        nodes: The ordered node list.

    Returns:
        HostGroups whose lists reference the given node objects, in input order.
    """
    return HostGroups(
        etcd=_with_role(nodes, ETCD_ROLE),
        control_plane=_with_role(nodes, CONTROL_PLANE_ROLE),
        worker=_with_role(nodes, WORKER_ROLE),
        inactive=[node for node in nodes if KNOWN_ROLES.isdisjoint(node.role)],
    )

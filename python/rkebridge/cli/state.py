#!/usr/bin/env python3
"""
rkebridge/cli/state.py

CLI offering two subcommands for moving an RKE cluster between its Terraform
resource form and its typed form:

  1) "show": Read 'terraform show -json' output, locate the rke_cluster
     resource and print the typed cluster as YAML.
  2) "export": Read a typed cluster YAML document and print its flat resource
     representation as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import nullcontext
from typing import Any, ContextManager, Dict, List, Optional, TextIO

import yaml
from cryptography import x509

from rkebridge.errors import ResourceError
from rkebridge.models.cluster import CertificatePKI, Cluster
from rkebridge.models.settings import ConversionSettings
from rkebridge.models.terraform import TerraformState, find_resource_values
from rkebridge.models.validator import validate_type
from rkebridge.pki.codec import state_to_certificates
from rkebridge.resource import keys
from rkebridge.resource.data import DictResourceData, DictStateBuilder
from rkebridge.resource.parse import parse_resource_cluster
from rkebridge.resource.state import cluster_to_state

logger = logging.getLogger(__name__)


def _open_input(path: str) -> ContextManager[TextIO]:
    """Open path for reading; "-" yields stdin, which is left open on exit."""
    if path == "-":
        return nullcontext(sys.stdin)
    return open(path, "r", encoding="utf-8")


def _certificate_summary(bundle: CertificatePKI) -> Dict[str, Any]:
    cert: Optional[x509.Certificate] = bundle.certificate
    return {
        "name": bundle.name,
        "common_name": bundle.common_name,
        "path": bundle.path,
        "key_path": bundle.key_path,
        "subject": cert.subject.rfc4514_string() if cert is not None else None,
        "not_valid_after": (
            cert.not_valid_after_utc.isoformat() if cert is not None else None
        ),
        "has_key": bundle.key is not None,
    }


def cluster_summary(cluster: Cluster) -> Dict[str, Any]:
    """
    Build a YAML-friendly view of a Cluster: the full configuration, the host
    groups by node name/address, and certificates by id without key material.
    """
    groups = cluster.host_groups()
    return {
        "rke_config": cluster.rke_config.model_dump(),
        "cluster_domain": cluster.cluster_domain,
        "cluster_cidr": cluster.cluster_cidr,
        "cluster_dns_server": cluster.cluster_dns_server,
        "host_groups": {
            group: [f"{n.node_name or '-'} ({n.address})" for n in nodes]
            for group, nodes in (
                ("etcd", groups.etcd),
                ("control_plane", groups.control_plane),
                ("worker", groups.worker),
                ("inactive", groups.inactive),
            )
        },
        "certificates": {
            cert_id: _certificate_summary(bundle)
            for cert_id, bundle in sorted(cluster.certificates.items())
        },
    }


def load_cluster_yaml(stream: TextIO) -> Cluster:
    """
    Load a typed cluster from YAML.

    The document mirrors Cluster's fields; an optional "certificates" key holds
    bundles in their flat form (a list of maps with "id" and PEM text).
    """
    raw = yaml.safe_load(stream) or {}
    data = validate_type(raw, Dict[str, Any])
    flat_certs = data.pop(keys.CERTIFICATES, None)
    certificates = (
        state_to_certificates(DictResourceData({keys.CERTIFICATES: flat_certs}))
        if flat_certs is not None
        else {}
    )
    return Cluster.model_validate({**data, "certificates": certificates})


def _run_show(args: argparse.Namespace, settings: ConversionSettings) -> None:
    """Handle the 'show' subcommand."""
    with _open_input(args.state_file) as stream:
        tf_state = TerraformState.model_validate(json.load(stream))

    resource = find_resource_values(
        tf_state,
        resource_type=settings.resource_type,
        name=settings.resource_name,
    )
    cluster = parse_resource_cluster(resource)
    logger.info(
        "Parsed '%s' with %d node(s) and %d certificate(s).",
        cluster.rke_config.cluster_name,
        len(cluster.rke_config.nodes),
        len(cluster.certificates),
    )
    print(yaml.dump(cluster_summary(cluster), sort_keys=False), end="")


def _run_export(args: argparse.Namespace, settings: ConversionSettings) -> None:
    """Handle the 'export' subcommand."""
    with _open_input(args.cluster_file) as stream:
        cluster = load_cluster_yaml(stream)

    builder = DictStateBuilder()
    cluster_to_state(
        cluster,
        builder,
        resource_id=settings.resource_id,
        sort_certificates=settings.sort_certificates,
    )
    output: Dict[str, Any] = {"id": builder.id, "values": builder.values}
    print(json.dumps(output, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert RKE clusters between Terraform state and typed config."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level (DEBUG, INFO, WARNING, ERROR). Default: WARNING.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser(
        "show", help="Print the typed cluster held in a Terraform JSON state."
    )
    show.add_argument(
        "state_file", help="Path to 'terraform show -json' output, or '-' for stdin."
    )
    show.add_argument(
        "--resource-type",
        default=None,
        help="Terraform resource type. Default: rke_cluster.",
    )
    show.add_argument(
        "--resource-name",
        default=None,
        help="Resource name or address, when the state holds several clusters.",
    )
    show.set_defaults(func=_run_show)

    export = subparsers.add_parser(
        "export", help="Print the flat resource representation of a cluster YAML."
    )
    export.add_argument("cluster_file", help="Path to a cluster YAML, or '-' for stdin.")
    export.add_argument(
        "--id", dest="resource_id", default=None, help="Resource id to assign."
    )
    export.add_argument(
        "--keep-certificate-order",
        action="store_true",
        help="Write certificates in document order instead of sorted by id.",
    )
    export.set_defaults(func=_run_export)

    return parser


def _settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    overrides = {
        "resource_type": getattr(args, "resource_type", None),
        "resource_name": getattr(args, "resource_name", None),
        "resource_id": getattr(args, "resource_id", None),
        "sort_certificates": (
            False if getattr(args, "keep_certificate_order", False) else None
        ),
        "log_level": args.log_level,
    }
    return ConversionSettings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except ValueError as exc:
        print(f"Invalid arguments: {exc}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        args.func(args, settings)
    except (OSError, KeyError, ValueError, ResourceError, yaml.YAMLError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

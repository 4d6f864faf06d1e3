"""
rkebridge/pki/codec.py

PEM codec for certificate bundles:
 - certificate_to_pem / pem_to_certificate
 - private_key_to_pem / pem_to_private_key
 - certificates_to_state / state_to_certificates

Encoders are pure and deterministic. Decoders raise CertificateDecodeError on
malformed PEM or on a DER payload that does not parse.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from rkebridge.errors import CertificateDecodeError
from rkebridge.models.cluster import CertificatePKI
from rkebridge.resource import keys
from rkebridge.resource.data import ResourceData
from rkebridge.resource.fields import read_block_list, read_str

logger = logging.getLogger(__name__)

# Key families with a traditional OpenSSL PEM form ("RSA PRIVATE KEY", ...).
# Everything else is written as PKCS#8 ("PRIVATE KEY").
_TRADITIONAL_KEY_TYPES = (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey, dsa.DSAPrivateKey)


# ----------------------------------------------------------------------
# 1) Single objects
# ----------------------------------------------------------------------


def certificate_to_pem(cert: x509.Certificate) -> str:
    """Encode a certificate as a PEM "CERTIFICATE" block."""
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


def private_key_to_pem(key: PrivateKeyTypes) -> str:
    """
    Encode an unencrypted private key of any algorithm family as PEM.

    RSA, EC and DSA keys use the traditional OpenSSL format; other families
    (Ed25519, Ed448, X25519, X448, DH) use PKCS#8.

    Args:
        key: The private key object.

    Returns:
        The PEM text.
    """
    fmt = (
        serialization.PrivateFormat.TraditionalOpenSSL
        if isinstance(key, _TRADITIONAL_KEY_TYPES)
        else serialization.PrivateFormat.PKCS8
    )
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def pem_to_certificate(pem: str, key: Optional[str] = None) -> x509.Certificate:
    """
    Decode a PEM "CERTIFICATE" block.

    Args:
        pem: The PEM text.
        key: Flat key the text came from, for error reporting.

    Raises:
        CertificateDecodeError: If the PEM or its DER payload is invalid.
    """
    try:
        return x509.load_pem_x509_certificate(pem.encode("ascii"))
    except (ValueError, UnicodeEncodeError) as exc:
        raise CertificateDecodeError(
            f"Failed to decode certificate PEM: {exc}", key=key
        ) from exc


def pem_to_private_key(pem: str, key: Optional[str] = None) -> PrivateKeyTypes:
    """
    Decode an unencrypted PEM private key of any supported algorithm family.

    Raises:
        CertificateDecodeError: If the PEM is malformed, encrypted, or its
            payload is not a private key.
    """
    try:
        return serialization.load_pem_private_key(pem.encode("ascii"), password=None)
    except (ValueError, TypeError, UnicodeEncodeError, UnsupportedAlgorithm) as exc:
        raise CertificateDecodeError(
            f"Failed to decode private key PEM: {exc}", key=key
        ) from exc


# ----------------------------------------------------------------------
# 2) Bundle list
# ----------------------------------------------------------------------


def _bundle_to_state(cert_id: str, bundle: CertificatePKI) -> Dict[str, Any]:
    metadata = {name: getattr(bundle, name) for name in keys.CERT_METADATA_KEYS}
    return {
        keys.CERT_ID: cert_id,
        keys.CERT_CERTIFICATE: (
            certificate_to_pem(bundle.certificate)
            if bundle.certificate is not None
            else ""
        ),
        keys.CERT_KEY: (
            private_key_to_pem(bundle.key) if bundle.key is not None else ""
        ),
        **metadata,
    }


def certificates_to_state(
    certificates: Mapping[str, CertificatePKI], sort_by_id: bool = True
) -> List[Dict[str, Any]]:
    """
    Encode certificate bundles as a list of flat maps.

    The logical id becomes the "id" field of each element. A missing
    certificate or key is written as "".

    Args:
        certificates: Bundles keyed by logical certificate id.
        sort_by_id: Order elements by id (otherwise mapping order is kept).

    Returns:
        One flat map per bundle.
    """
    ids = sorted(certificates) if sort_by_id else list(certificates)
    return [_bundle_to_state(cert_id, certificates[cert_id]) for cert_id in ids]


def _state_to_bundle(d: ResourceData) -> CertificatePKI:
    cert_pem = read_str(d, keys.CERT_CERTIFICATE)
    key_pem = read_str(d, keys.CERT_KEY)
    return CertificatePKI(
        certificate=(
            pem_to_certificate(cert_pem, keys.CERTIFICATES) if cert_pem else None
        ),
        key=pem_to_private_key(key_pem, keys.CERTIFICATES) if key_pem else None,
        **{name: read_str(d, name) for name in keys.CERT_METADATA_KEYS},
    )


def state_to_certificates(d: ResourceData) -> Dict[str, CertificatePKI]:
    """
    Decode the "certificates" list back into bundles keyed by id.

    Returns:
        Bundles keyed by id ({} if the key is absent). A later element with a
        repeated id replaces the earlier one.

    Raises:
        CertificateDecodeError: If any certificate or key PEM is invalid.
        FieldTypeError: If an element has the wrong shape.
    """
    bundles = read_block_list(d, keys.CERTIFICATES)
    decoded = {read_str(b, keys.CERT_ID): _state_to_bundle(b) for b in bundles}
    logger.debug("Decoded %d certificate bundle(s).", len(decoded))
    return decoded

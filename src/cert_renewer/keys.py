"""RSA key material, CSR construction and certificate inspection."""

from __future__ import annotations

from datetime import datetime

import josepy
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

_MAX_COMMON_NAME_LENGTH = 64

def generate_private_key_pem(key_size: int = 2048) -> bytes:
    """Generate an RSA private key and return PKCS#8 PEM bytes."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def load_private_key(private_key_pem: bytes) -> rsa.RSAPrivateKey:
    key = serialization.load_pem_private_key(private_key_pem, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("Stored private key is not an RSA key")
    return key


def account_jwk(private_key_pem: bytes) -> josepy.JWKRSA:
    """Wrap a PEM account key as the JWK the ACME client signs with."""
    return josepy.JWKRSA(key=load_private_key(private_key_pem))


def make_csr(private_key_pem: bytes, domains: list[str] | tuple[str, ...], common_name: str | None = None) -> bytes:
    """Build a PEM CSR naming ``common_name`` as subject CN and every domain as a SAN.

    The CN defaults to the first domain. A CN longer than 64 characters does
    not fit the X.509 attribute, so the subject is left empty and the names
    are carried by the SAN extension alone.
    """
    if not domains:
        raise ValueError("At least one domain is required to build a CSR")
    key = load_private_key(private_key_pem)
    common_name = common_name or domains[0]
    if len(common_name) <= _MAX_COMMON_NAME_LENGTH:
        subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    else:
        subject = x509.Name([])
    csr = (
        x509.CertificateSigningRequestBuilder()
        .subject_name(subject)
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(domain) for domain in domains]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    return csr.public_bytes(serialization.Encoding.PEM)


def load_leaf_certificate(chain_pem: bytes) -> x509.Certificate:
    """Return the end-entity certificate (the first one) of a PEM chain."""
    certs = x509.load_pem_x509_certificates(chain_pem)
    if not certs:
        raise ValueError("No certificates found in PEM data")
    return certs[0]


def certificate_not_after(chain_pem: bytes) -> datetime:
    """Timezone-aware expiry of the end-entity certificate."""
    return load_leaf_certificate(chain_pem).not_valid_after_utc

"""Shared test fixtures for acme-dns01-cert-renewer."""

from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

import cert_renewer.auth as _auth
from cert_renewer.config import AppConfig, RetryPolicy


def pytest_runtest_setup(item):
    """Reset module-level caches between tests."""
    _auth._credential = None


def _make_cert_and_key(common_name="example.com", not_after=None):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    not_after = not_after or datetime.now(UTC) + timedelta(days=90)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=90))
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM)
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    return cert_pem, key_pem


@pytest.fixture
def make_cert():
    """Factory for a self-signed (cert_pem, key_pem) pair with a chosen expiry."""
    return _make_cert_and_key


@pytest.fixture
def make_config():
    """Factory for an AppConfig with zero poll delays so loops never sleep."""

    def _make(**overrides):
        defaults = {
            "domains": ("example.com", "www.example.com"),
            "contact_email": "admin@example.com",
            "dns_provider": "route53",
            "storage_bucket": "certs-bucket",
            "dns_sync_retry": RetryPolicy(attempts=3, interval=0),
            "dns_propagation_retry": RetryPolicy(attempts=3, interval=0),
            "challenge_poll": RetryPolicy(attempts=5, interval=0),
            "challenge_retry": RetryPolicy(attempts=2, interval=0),
            "order_retry": RetryPolicy(attempts=3, interval=0),
        }
        defaults.update(overrides)
        return AppConfig(**defaults)

    return _make

"""Configuration loading and validation from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from cert_renewer.errors import ConfigurationError

_LETS_ENCRYPT_DIRECTORY = "https://acme-v02.api.letsencrypt.org/directory"
_LETS_ENCRYPT_STAGING_DIRECTORY = "https://acme-staging-v02.api.letsencrypt.org/directory"
_DEFAULT_RENEWAL_WINDOW_DAYS = 30
_ALLOWED_KEY_SIZES = (2048, 3072, 4096)
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class AwsCredentials:
    """Static AWS credentials for one service. Empty fields defer to the boto3 chain."""

    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and fixed delay for one polling loop."""

    attempts: int
    interval: float


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded once at startup."""

    domains: tuple[str, ...]
    contact_email: str
    dns_provider: str
    storage_bucket: str
    common_name: str | None = None
    key_size: int = 2048
    acme_directory_url: str = _LETS_ENCRYPT_DIRECTORY
    renewal_window_days: int = _DEFAULT_RENEWAL_WINDOW_DAYS
    same_private_key_on_renew: bool = False
    dns_zone_id: str | None = None
    dns_domain: str | None = None
    dns_record_ttl: int = 60
    dns_sync_retry: RetryPolicy = RetryPolicy(attempts=30, interval=5)
    dns_propagation_retry: RetryPolicy = RetryPolicy(attempts=60, interval=5)
    dns_resolve_timeout: float = 5
    dns_nameservers: tuple[str, ...] = ()
    challenge_poll: RetryPolicy = RetryPolicy(attempts=60, interval=2)
    challenge_retry: RetryPolicy = RetryPolicy(attempts=3, interval=5)
    order_retry: RetryPolicy = RetryPolicy(attempts=30, interval=2)
    workflow_timeout_seconds: float | None = None
    storage_provider: str = "s3"
    account_key_name: str = "acme/client.pem"
    certificate_key_name: str = "acme/certificate.key"
    certificate_name: str = "acme/certificate.pem"
    route53_credentials: AwsCredentials = field(default_factory=AwsCredentials)
    s3_credentials: AwsCredentials = field(default_factory=AwsCredentials)
    azure_subscription_id: str | None = None
    azure_dns_resource_group: str | None = None
    azure_storage_account_url: str | None = None
    cloudflare_api_token: str | None = None
    log_level: str = "INFO"

    @property
    def certificate_common_name(self) -> str:
        return self.common_name or self.domains[0]


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(f"Required environment variable {name} is not set")
    return value


def _optional_env(name: str) -> str | None:
    return os.environ.get(name) or None


def _dns_name_env(name: str, lowercase: bool = False) -> str | None:
    """Optional DNS name with surrounding whitespace and the root dot removed.

    Zone identifiers keep their case: Route53 hosted zone ids are upper case.
    """
    value = (_optional_env(name) or "").strip().rstrip(".")
    if lowercase:
        value = value.lower()
    return value or None


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got: {raw!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got: {value}")
    return value


def _float_env(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got: {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got: {value}")
    return value


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got: {raw!r}")


def _list_env(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _retry_env(prefix: str, default: RetryPolicy, minimum: int = 1) -> RetryPolicy:
    return RetryPolicy(
        attempts=_int_env(f"{prefix}_COUNT", default.attempts, minimum=minimum),
        interval=_float_env(f"{prefix}_INTERVAL", default.interval),
    )


def parse_domains(raw: str) -> tuple[str, ...]:
    """Split a comma separated identifier list, keeping first-seen order and dropping duplicates."""
    seen: dict[str, None] = {}
    for item in raw.split(","):
        domain = item.strip().lower().rstrip(".")
        if domain:
            seen.setdefault(domain, None)
    return tuple(seen)


def _aws_credentials(prefix: str) -> AwsCredentials:
    """Per-service credentials, falling back to the shared AWS_* variables field by field."""
    return AwsCredentials(
        access_key_id=_optional_env(f"{prefix}_AWS_ACCESS_KEY_ID") or _optional_env("AWS_ACCESS_KEY_ID"),
        secret_access_key=_optional_env(f"{prefix}_AWS_SECRET_ACCESS_KEY") or _optional_env("AWS_SECRET_ACCESS_KEY"),
        session_token=_optional_env(f"{prefix}_AWS_SESSION_TOKEN") or _optional_env("AWS_SESSION_TOKEN"),
        region=_optional_env(f"{prefix}_AWS_REGION") or _optional_env("AWS_REGION"),
    )


def load_config() -> AppConfig:
    """Load and validate application configuration from environment variables."""
    domains = parse_domains(_require_env("ACME_DOMAINS"))
    if not domains:
        raise ConfigurationError("ACME_DOMAINS must contain at least one domain")
    contact_email = _require_env("ACME_CONTACT_EMAIL")
    dns_provider = _require_env("DNS_PROVIDER").lower()
    storage_bucket = _require_env("STORAGE_BUCKET")

    common_name = _optional_env("ACME_COMMON_NAME")
    if common_name:
        common_name = common_name.lower().rstrip(".")
        if common_name not in domains:
            raise ConfigurationError(f"ACME_COMMON_NAME {common_name!r} must be one of ACME_DOMAINS")

    key_size = _int_env("ACME_KEY_SIZE", 2048)
    if key_size not in _ALLOWED_KEY_SIZES:
        raise ConfigurationError(f"ACME_KEY_SIZE must be one of {_ALLOWED_KEY_SIZES}, got: {key_size}")

    staging = _bool_env("ACME_STAGING")
    acme_directory_url = _optional_env("ACME_DIRECTORY_URL") or (
        _LETS_ENCRYPT_STAGING_DIRECTORY if staging else _LETS_ENCRYPT_DIRECTORY
    )

    renewal_window_days = _int_env("RENEWAL_WINDOW_DAYS", _DEFAULT_RENEWAL_WINDOW_DAYS)

    defaults = AppConfig(domains=domains, contact_email=contact_email, dns_provider=dns_provider, storage_bucket=storage_bucket)

    return AppConfig(
        domains=domains,
        contact_email=contact_email,
        dns_provider=dns_provider,
        storage_bucket=storage_bucket,
        common_name=common_name,
        key_size=key_size,
        acme_directory_url=acme_directory_url,
        renewal_window_days=renewal_window_days,
        same_private_key_on_renew=_bool_env("SAME_PRIVATE_KEY_ON_RENEW"),
        dns_zone_id=_dns_name_env("DNS_ZONE_ID"),
        dns_domain=_dns_name_env("DNS_DOMAIN", lowercase=True),
        dns_record_ttl=_int_env("DNS_RECORD_TTL", defaults.dns_record_ttl),
        dns_sync_retry=_retry_env("DNS_SYNC_RETRY", defaults.dns_sync_retry),
        dns_propagation_retry=_retry_env("DNS_PROPAGATION_RETRY", defaults.dns_propagation_retry),
        dns_resolve_timeout=_float_env("DNS_RESOLVE_TIMEOUT", defaults.dns_resolve_timeout),
        dns_nameservers=_list_env("DNS_NAMESERVERS"),
        challenge_poll=_retry_env("CHALLENGE_POLL", defaults.challenge_poll),
        challenge_retry=_retry_env("CHALLENGE_RETRY", defaults.challenge_retry, minimum=0),
        order_retry=_retry_env("ORDER_RETRY", defaults.order_retry),
        workflow_timeout_seconds=_float_env("WORKFLOW_TIMEOUT_SECONDS", None),
        storage_provider=os.environ.get("STORAGE_PROVIDER", defaults.storage_provider).lower(),
        account_key_name=os.environ.get("ACCOUNT_KEY_NAME", defaults.account_key_name),
        certificate_key_name=os.environ.get("CERTIFICATE_KEY_NAME", defaults.certificate_key_name),
        certificate_name=os.environ.get("CERTIFICATE_NAME", defaults.certificate_name),
        route53_credentials=_aws_credentials("ROUTE53"),
        s3_credentials=_aws_credentials("S3"),
        azure_subscription_id=_optional_env("AZURE_SUBSCRIPTION_ID"),
        azure_dns_resource_group=_optional_env("AZURE_DNS_RESOURCE_GROUP"),
        azure_storage_account_url=_optional_env("AZURE_STORAGE_ACCOUNT_URL"),
        cloudflare_api_token=_optional_env("CLOUDFLARE_API_TOKEN"),
        log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
    )

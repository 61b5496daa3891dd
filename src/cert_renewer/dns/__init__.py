"""Zone provider factory — resolve provider name to concrete implementation."""

from __future__ import annotations

from cert_renewer.auth import aws_client as _aws_client
from cert_renewer.auth import get_credential as _get_credential
from cert_renewer.config import AppConfig
from cert_renewer.dns.azure_dns import AzureDnsZoneProvider
from cert_renewer.dns.base import ZoneProvider
from cert_renewer.dns.cloudflare import CloudflareZoneProvider
from cert_renewer.dns.route53 import Route53ZoneProvider
from cert_renewer.errors import ConfigurationError


def get_zone_provider(config: AppConfig) -> ZoneProvider:
    """Instantiate the zone provider named by ``DNS_PROVIDER``.

    Args:
        config: Application configuration.

    Returns:
        A configured ZoneProvider instance.
    """
    name = config.dns_provider.lower()

    if name == "route53":
        return Route53ZoneProvider(client=_aws_client("route53", config.route53_credentials))

    if name == "azure":
        if not config.azure_subscription_id:
            raise ConfigurationError("AZURE_SUBSCRIPTION_ID is required when DNS_PROVIDER=azure")
        if not config.azure_dns_resource_group:
            raise ConfigurationError("AZURE_DNS_RESOURCE_GROUP is required when DNS_PROVIDER=azure")
        return AzureDnsZoneProvider(
            credential=_get_credential(),
            subscription_id=config.azure_subscription_id,
            resource_group=config.azure_dns_resource_group,
        )

    if name == "cloudflare":
        if not config.cloudflare_api_token:
            raise ConfigurationError("CLOUDFLARE_API_TOKEN is required when DNS_PROVIDER=cloudflare")
        return CloudflareZoneProvider(api_token=config.cloudflare_api_token)

    raise ConfigurationError(f"Unknown DNS provider: '{name}'")

"""Process entry operations: wire collaborators from configuration and run the controller."""

from __future__ import annotations

import logging

import josepy

from cert_renewer.acme_client import AcmeClient
from cert_renewer.artifacts import ArtifactStore
from cert_renewer.config import AppConfig, load_config
from cert_renewer.controller import CertificateController
from cert_renewer.coordinator import ChallengeCoordinator
from cert_renewer.dns import get_zone_provider
from cert_renewer.propagation import PropagationVerifier
from cert_renewer.resolver import PublicResolver
from cert_renewer.storage import get_object_store
from cert_renewer.waiting import Waiter
from cert_renewer.zone_updater import ZoneUpdater

logger = logging.getLogger(__name__)


def build_controller(config: AppConfig, waiter: Waiter | None = None) -> CertificateController:
    """Construct the controller with every collaborator injected.

    The zone provider and resolver are only created when a run actually
    reaches the challenge stage.
    """
    waiter = waiter or Waiter(timeout_seconds=config.workflow_timeout_seconds)
    artifacts = ArtifactStore(
        get_object_store(config),
        account_key_name=config.account_key_name,
        certificate_key_name=config.certificate_key_name,
        certificate_name=config.certificate_name,
    )

    def client_factory(account_key: josepy.JWKRSA) -> AcmeClient:
        return AcmeClient(config.acme_directory_url, account_key)

    def coordinator_factory(client: AcmeClient) -> ChallengeCoordinator:
        zone_updater = ZoneUpdater(
            get_zone_provider(config),
            retry=config.dns_sync_retry,
            waiter=waiter,
            ttl=config.dns_record_ttl,
            zone_id=config.dns_zone_id,
        )
        verifier = PropagationVerifier(
            PublicResolver(nameservers=config.dns_nameservers),
            retry=config.dns_propagation_retry,
            waiter=waiter,
            resolve_timeout=config.dns_resolve_timeout,
        )
        return ChallengeCoordinator(
            client,
            zone_updater,
            verifier,
            waiter,
            poll=config.challenge_poll,
            retry=config.challenge_retry,
            dns_domain=config.dns_domain,
        )

    return CertificateController(config, artifacts, client_factory, coordinator_factory, waiter)


def create_or_renew_certificate(config: AppConfig | None = None) -> dict:
    """Renew the configured certificate if it is due. Returns ``{"renewed": bool}``."""
    controller = build_controller(config or load_config())
    return controller.create_or_renew().to_dict()


def revoke_certificate(config: AppConfig | None = None) -> dict:
    """Revoke the stored certificate. Returns ``{"revoked": bool}``."""
    controller = build_controller(config or load_config())
    return controller.revoke().to_dict()


def lambda_renew(event, context) -> dict:
    """AWS Lambda handler for scheduled renewal."""
    return create_or_renew_certificate()


def lambda_revoke(event, context) -> dict:
    """AWS Lambda handler for revocation."""
    return revoke_certificate()

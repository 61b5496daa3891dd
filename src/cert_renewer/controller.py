"""Certificate lifecycle: renewal decision, issuance, storage and revocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import josepy

from cert_renewer.acme_client import AcmeClient
from cert_renewer.artifacts import ArtifactStore
from cert_renewer.config import AppConfig
from cert_renewer.coordinator import ChallengeCoordinator
from cert_renewer.errors import OrderFailedError, OrderTimeoutError
from cert_renewer.keys import account_jwk, certificate_not_after, generate_private_key_pem, make_csr
from cert_renewer.models import RenewalResult, RenewalState, RevocationResult
from cert_renewer.waiting import Waiter

logger = logging.getLogger(__name__)


class CertificateController:
    """Top-level issuance workflow for one configured identifier set.

    ``client_factory`` builds a CA client for an account key and
    ``coordinator_factory`` builds the challenge coordinator around that
    client; both exist because the CA client cannot be created until the
    account key has been loaded or bootstrapped.
    """

    def __init__(
        self,
        config: AppConfig,
        artifacts: ArtifactStore,
        client_factory: Callable[[josepy.JWKRSA], AcmeClient],
        coordinator_factory: Callable[[AcmeClient], ChallengeCoordinator],
        waiter: Waiter,
        _now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._config = config
        self._artifacts = artifacts
        self._client_factory = client_factory
        self._coordinator_factory = coordinator_factory
        self._waiter = waiter
        self._now = _now
        self.state = RenewalState.IDLE

    def _transition(self, state: RenewalState) -> None:
        logger.debug("Renewal state %s -> %s", self.state.value, state.value)
        self.state = state

    def create_or_renew(self) -> RenewalResult:
        try:
            return self._create_or_renew()
        except Exception:
            self._transition(RenewalState.FAILED)
            raise

    def _create_or_renew(self) -> RenewalResult:
        self._transition(RenewalState.CHECKING_VALIDITY)
        if self.certificate_valid():
            logger.info("Certificate %s is still valid. Exiting...", self._artifacts.certificate_name)
            self._transition(RenewalState.SKIPPED)
            self._transition(RenewalState.DONE)
            return RenewalResult(renewed=False)

        client = self._client()
        client.register_account(self._config.contact_email)
        self._transition(RenewalState.ACCOUNT_READY)

        private_key_pem = self._certificate_private_key()
        common_name = self._config.certificate_common_name
        csr_pem = make_csr(private_key_pem, list(self._config.domains), common_name)
        order = client.new_order(csr_pem)
        self._transition(RenewalState.ORDER_CREATED)

        with self._coordinator_factory(client) as coordinator:
            coordinator.fulfill_challenges(order)
        self._transition(RenewalState.CHALLENGES_FULFILLED)

        self._transition(RenewalState.FINALIZING)
        order = client.finalize(order)
        order = self._wait_order_to_complete(client, order)
        chain_pem = client.download_certificate(order)

        self._artifacts.save_certificate(common_name, private_key_pem, chain_pem)
        self._transition(RenewalState.STORED)
        self._transition(RenewalState.DONE)
        logger.info("Certificate for %s renewed", ", ".join(self._config.domains))
        return RenewalResult(renewed=True)

    def revoke(self) -> RevocationResult:
        """Revoke the stored certificate, if any. Stored artifacts are left untouched.

        Only the account that ordered the certificate may revoke it, so a
        missing account key is never bootstrapped here.
        """
        certificate = self._artifacts.load_certificate()
        if certificate is None:
            logger.info("No stored certificate %s; nothing to revoke", self._artifacts.certificate_name)
            return RevocationResult(revoked=False)

        account_key_pem = self._artifacts.load_account_key()
        if account_key_pem is None:
            logger.warning(
                "No ACME account key stored; cannot revoke %s on behalf of its account",
                self._artifacts.certificate_name,
            )
            return RevocationResult(revoked=False)

        client = self._client_factory(account_jwk(account_key_pem))
        client.register_account(self._config.contact_email)
        client.revoke(certificate)
        return RevocationResult(revoked=True)

    def certificate_valid(self) -> bool:
        """True while the stored certificate expires strictly after the renewal window opens."""
        certificate = self._artifacts.load_certificate()
        if certificate is None:
            logger.info("No stored certificate %s; renewal due", self._artifacts.certificate_name)
            return False

        not_after = certificate_not_after(certificate)
        logger.debug("Certificate not_after: %s", not_after.isoformat())
        renew_at = self._now() + timedelta(days=self._config.renewal_window_days)
        return not_after > renew_at

    def _client(self) -> AcmeClient:
        """Build the CA client around the stored account key, generating and storing one on first use."""
        account_key_pem = self._artifacts.load_account_key()
        if account_key_pem is None:
            logger.info("No ACME account key stored; generating a new one")
            account_key_pem = generate_private_key_pem(self._config.key_size)
            self._artifacts.save_account_key(account_key_pem)
        return self._client_factory(account_jwk(account_key_pem))

    def _certificate_private_key(self) -> bytes:
        if self._config.same_private_key_on_renew:
            stored = self._artifacts.load_private_key()
            if stored is not None:
                logger.info("Reusing stored certificate private key")
                return stored
        return generate_private_key_pem(self._config.key_size)

    def _wait_order_to_complete(self, client: AcmeClient, order):
        retry = self._config.order_retry
        for attempt in range(1, retry.attempts + 1):
            status, detail = client.order_status(order)
            if status == "valid":
                return order
            if status == "invalid":
                raise OrderFailedError(f"Order {order.uri} is invalid: {detail or 'no detail reported'}")
            logger.info("Waiting for order to complete (status %s). Check %d/%d", status, attempt, retry.attempts)
            if attempt < retry.attempts:
                self._waiter.sleep(retry.interval)
                order = client.reload_order(order)
        raise OrderTimeoutError(f"Order {order.uri} not completed after {retry.attempts} checks")

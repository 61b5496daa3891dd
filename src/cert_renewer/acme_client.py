"""ACME protocol operations used by the issuance workflow."""

from __future__ import annotations

import logging

import josepy
from acme import challenges, errors, messages
from acme.client import ClientNetwork, ClientV2
from cryptography import x509

from cert_renewer.models import DnsChallenge

logger = logging.getLogger(__name__)

_USER_AGENT = "acme-dns01-cert-renewer"
_PEM_CHAIN_CONTENT_TYPE = "application/pem-certificate-chain"


def _build_client(directory_url: str, account_key: josepy.JWKRSA) -> ClientV2:
    """Construct a ClientV2 instance for the given directory."""
    net = ClientNetwork(account_key, user_agent=_USER_AGENT)
    directory = ClientV2.get_directory(directory_url, net)
    return ClientV2(directory, net=net)


def validation_record_name(identifier: str) -> str:
    """TXT record name for an identifier; ``*.example.com`` validates at ``_acme-challenge.example.com``."""
    return f"{challenges.DNS01.LABEL}.{identifier.removeprefix('*.')}"


class AcmeClient:
    """Narrow facade over ``acme.client.ClientV2`` exposing what the issuance workflow needs."""

    def __init__(
        self,
        directory_url: str,
        account_key: josepy.JWKRSA,
        _client: ClientV2 | None = None,
    ) -> None:
        self._account_key = account_key
        self._client = _client or _build_client(directory_url, account_key)

    def register_account(self, contact_email: str) -> str:
        """Register the account key with the CA, reusing the existing account if the key is known."""
        registration = messages.NewRegistration.from_data(email=contact_email, terms_of_service_agreed=True)
        try:
            regr = self._client.new_account(registration)
        except errors.ConflictError as exc:
            # The CA already knows this key; bind the existing account URI.
            self._client.net.account = messages.RegistrationResource(uri=exc.location, body=messages.Registration())
            logger.info("Reusing existing ACME account %s", exc.location)
            return exc.location
        logger.info("Registered new ACME account %s", regr.uri)
        return regr.uri

    def new_order(self, csr_pem: bytes) -> messages.OrderResource:
        """Create an order for the identifiers carried by the CSR."""
        order = self._client.new_order(csr_pem)
        logger.info("Created ACME order %s", order.uri)
        return order

    def pending_dns_challenges(self, order: messages.OrderResource) -> list[DnsChallenge]:
        """DNS-01 challenges for every authorization still pending in the order.

        Authorizations in any other state are already satisfied (or failed) and
        need no DNS record.
        """
        result: list[DnsChallenge] = []
        for authz in order.authorizations:
            if authz.body.status != messages.STATUS_PENDING:
                logger.debug("Skipping authorization %s with status %s", authz.uri, authz.body.status)
                continue
            domain = authz.body.identifier.value
            for challb in authz.body.challenges:
                if isinstance(challb.chall, challenges.DNS01):
                    result.append(
                        DnsChallenge(
                            identifier=domain,
                            record_name=validation_record_name(domain),
                            record_value=challb.chall.validation(self._account_key),
                            resource=challb,
                        )
                    )
                    break
            else:
                raise ValueError(f"No DNS-01 challenge found for domain {domain}")
        return result

    def request_validation(self, challenge: DnsChallenge) -> None:
        challb = challenge.resource
        self._client.answer_challenge(challb, challb.chall.response(self._account_key))
        logger.info("Requested validation of DNS-01 challenge for %s", challenge.identifier)

    def challenge_status(self, challenge: DnsChallenge) -> tuple[str, str | None]:
        """Reload a challenge (POST-as-GET) and return its status and CA error detail, if any."""
        response = self._client.net.post(challenge.resource.uri, None)
        body = messages.ChallengeBody.from_json(response.json())
        detail = None
        if body.error is not None:
            detail = body.error.detail or str(body.error)
        return body.status.name, detail

    def finalize(self, order: messages.OrderResource) -> messages.OrderResource:
        """Submit the order's CSR; returns the order as reported right after finalization."""
        finalized = self._client.begin_finalization(order)
        logger.info("Submitted finalization for order %s", order.uri)
        return finalized

    def order_status(self, order: messages.OrderResource) -> tuple[str, str | None]:
        """Status and CA error detail of an order as last fetched."""
        error = order.body.error
        detail = None if error is None else (error.detail or str(error))
        return order.body.status.name, detail

    def reload_order(self, order: messages.OrderResource) -> messages.OrderResource:
        response = self._client.net.post(order.uri, None)
        body = messages.Order.from_json(response.json())
        return order.update(body=body)

    def download_certificate(self, order: messages.OrderResource) -> bytes:
        """Fetch the PEM certificate chain of a valid order."""
        if not order.body.certificate:
            raise ValueError(f"Order {order.uri} has no certificate URL")
        response = self._client.net.post(order.body.certificate, None, content_type=_PEM_CHAIN_CONTENT_TYPE)
        return response.text.encode()

    def revoke(self, certificate_pem: bytes, reason: int = 0) -> None:
        cert = x509.load_pem_x509_certificate(certificate_pem)
        self._client.revoke(cert, reason)
        logger.info("Revoked certificate with serial %x", cert.serial_number)

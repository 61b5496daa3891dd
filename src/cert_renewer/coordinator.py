"""Drive DNS-01 challenges of an order: publish, confirm propagation, validate."""

from __future__ import annotations

import logging
from typing import Self

from cert_renewer.acme_client import AcmeClient
from cert_renewer.config import RetryPolicy
from cert_renewer.errors import ChallengeTimeoutError, ChallengeValidationError
from cert_renewer.models import DnsChallenge, RecordGroup
from cert_renewer.propagation import PropagationVerifier
from cert_renewer.waiting import Waiter
from cert_renewer.zone_updater import ZoneUpdater

logger = logging.getLogger(__name__)

_VALID = "valid"
_INVALID = "invalid"


def group_by_record_name(challenges: list[DnsChallenge]) -> list[RecordGroup]:
    """Group challenges sharing a TXT record name, keeping first-seen order.

    ``example.com`` and ``*.example.com`` both validate at
    ``_acme-challenge.example.com``; one UPSERT must carry both values or the
    second write would replace the first.
    """
    groups: dict[str, list[DnsChallenge]] = {}
    for challenge in challenges:
        groups.setdefault(challenge.record_name.lower().rstrip("."), []).append(challenge)
    return [RecordGroup(record_name=name, challenges=tuple(members)) for name, members in groups.items()]


class ChallengeCoordinator:
    def __init__(
        self,
        ca: AcmeClient,
        zone_updater: ZoneUpdater,
        verifier: PropagationVerifier,
        waiter: Waiter,
        poll: RetryPolicy,
        retry: RetryPolicy,
        dns_domain: str | None = None,
    ) -> None:
        self._ca = ca
        self._zone_updater = zone_updater
        self._verifier = verifier
        self._waiter = waiter
        self._poll = poll
        self._retry = retry
        self._dns_domain = dns_domain

    def close(self) -> None:
        """Release the zone provider behind the zone updater."""
        self._zone_updater.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def fulfill_challenges(self, order) -> list[RecordGroup]:
        """Satisfy every pending authorization of ``order`` or raise.

        All groups are published and confirmed before any validation is
        requested; one invalid challenge fails the whole order.
        """
        challenges = self._ca.pending_dns_challenges(order)
        if not challenges:
            logger.info("No pending authorizations; nothing to publish")
            return []

        groups = group_by_record_name(challenges)
        logger.info("Publishing %d TXT record set(s) for %d challenge(s)", len(groups), len(challenges))
        for group in groups:
            self._publish(group)

        for challenge in challenges:
            self._waiter.check()
            self._ca.request_validation(challenge)

        for challenge in challenges:
            self._await_valid(challenge)
        return groups

    def _publish(self, group: RecordGroup) -> None:
        domain = self._dns_domain or group.challenges[0].identifier.removeprefix("*.")
        values = group.values
        logger.info("Updating %s for %s", group.record_name, ", ".join(group.identifiers))
        self._zone_updater.upsert(domain, group.record_name, values)
        self._verifier.wait_for(group.record_name, values)

    def _await_valid(self, challenge: DnsChallenge) -> None:
        """Poll until the challenge leaves pending.

        CA validators sometimes report a transient ``invalid`` before
        succeeding, so ``invalid`` is re-polled with a growing delay up to the
        retry budget before it is treated as final.
        """
        pending_checks = 0
        invalid_checks = 0
        while True:
            self._waiter.check()
            status, detail = self._ca.challenge_status(challenge)
            if status == _VALID:
                logger.info("Challenge for %s is valid", challenge.identifier)
                return

            if status == _INVALID:
                invalid_checks += 1
                if invalid_checks > self._retry.attempts:
                    logger.error("Challenge for %s is invalid: %s", challenge.identifier, detail)
                    raise ChallengeValidationError(challenge.identifier, detail)
                logger.warning(
                    "Challenge for %s reported invalid (%s); re-checking. Retry %d/%d",
                    challenge.identifier,
                    detail,
                    invalid_checks,
                    self._retry.attempts,
                )
                self._waiter.sleep(self._retry.interval * invalid_checks)
                continue

            pending_checks += 1
            if pending_checks >= self._poll.attempts:
                raise ChallengeTimeoutError(
                    f"Challenge for {challenge.identifier} still {status} after {self._poll.attempts} checks"
                )
            logger.debug("Waiting for challenge for %s to complete (status %s)", challenge.identifier, status)
            self._waiter.sleep(self._poll.interval)

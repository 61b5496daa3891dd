"""Confirm TXT values are visible in public DNS before asking the CA to validate."""

from __future__ import annotations

import logging

from cert_renewer.config import RetryPolicy
from cert_renewer.errors import PropagationTimeoutError
from cert_renewer.resolver import PublicResolver, ResolverLookupError
from cert_renewer.waiting import Waiter

logger = logging.getLogger(__name__)


def records_contain(txt_records: list[str], expected: list[str]) -> bool:
    """True when every expected value is contained in at least one TXT record.

    Containment rather than equality, since resolvers may hand back values
    still wrapped in quotes or escaped.
    """
    if not txt_records:
        return False
    return all(any(value in record for record in txt_records) for value in expected)


class PropagationVerifier:
    """Polls public DNS until the expected values appear.

    The zone provider's own "in sync" signal only covers its internal
    replication, not what resolvers used by the CA actually return.
    """

    def __init__(self, resolver: PublicResolver, retry: RetryPolicy, waiter: Waiter, resolve_timeout: float = 5):
        self._resolver = resolver
        self._retry = retry
        self._waiter = waiter
        self._resolve_timeout = resolve_timeout

    def wait_for(self, record_name: str, expected_values: list[str]) -> None:
        for attempt in range(1, self._retry.attempts + 1):
            timeout = self._waiter.attempt_timeout(self._resolve_timeout)
            try:
                txt_records = self._resolver.query_txt(record_name, timeout)
            except ResolverLookupError as exc:
                logger.debug("Lookup of %s not answered yet: %s", record_name, exc)
                txt_records = []

            if records_contain(txt_records, expected_values):
                logger.info("TXT values for %s are visible in public DNS", record_name)
                return

            logger.info(
                "Waiting for %s to resolve with %d expected value(s). Check %d/%d",
                record_name,
                len(expected_values),
                attempt,
                self._retry.attempts,
            )
            if attempt < self._retry.attempts:
                self._waiter.sleep(self._retry.interval)
        raise PropagationTimeoutError(
            f"TXT values for {record_name} not visible in public DNS after {self._retry.attempts} checks"
        )

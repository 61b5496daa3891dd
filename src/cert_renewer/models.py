"""Workflow data types shared between the coordinator, controller and entry points."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class RenewalState(enum.Enum):
    IDLE = "idle"
    CHECKING_VALIDITY = "checking_validity"
    SKIPPED = "skipped"
    ACCOUNT_READY = "account_ready"
    ORDER_CREATED = "order_created"
    CHALLENGES_FULFILLED = "challenges_fulfilled"
    FINALIZING = "finalizing"
    STORED = "stored"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DnsChallenge:
    """A pending DNS-01 challenge for one identifier.

    ``resource`` is the CA client's own challenge handle; only the CA client
    looks inside it.
    """

    identifier: str
    record_name: str
    record_value: str
    resource: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RecordGroup:
    """Challenges whose TXT values must coexist at one record name."""

    record_name: str
    challenges: tuple[DnsChallenge, ...]

    @property
    def identifiers(self) -> list[str]:
        return [c.identifier for c in self.challenges]

    @property
    def values(self) -> list[str]:
        """Distinct TXT values in first-seen order."""
        return list(dict.fromkeys(c.record_value for c in self.challenges))


@dataclass(frozen=True)
class RenewalResult:
    renewed: bool

    def to_dict(self) -> dict:
        return {"renewed": self.renewed}


@dataclass(frozen=True)
class RevocationResult:
    revoked: bool

    def to_dict(self) -> dict:
        return {"revoked": self.revoked}

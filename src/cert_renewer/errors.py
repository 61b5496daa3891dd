"""Exception hierarchy with one distinct error per stage that can stall or fail."""

from __future__ import annotations


class CertRenewerError(Exception):
    """Base class for all fatal workflow errors."""


class ConfigurationError(CertRenewerError, ValueError):
    """A required option is missing or malformed."""


class ZoneLookupError(CertRenewerError):
    """No manageable hosted zone was found for a domain."""


class ZonePropagationError(CertRenewerError):
    """The zone provider never reported the change as synchronized."""


class PropagationTimeoutError(CertRenewerError):
    """Expected TXT values never became visible through public DNS."""


class ChallengeValidationError(CertRenewerError):
    """A DNS-01 challenge ended invalid after its retry budget."""

    def __init__(self, identifier: str, detail: str | None) -> None:
        self.identifier = identifier
        self.detail = detail
        super().__init__(f"Challenge for '{identifier}' is invalid: {detail or 'no detail reported'}")


class ChallengeTimeoutError(CertRenewerError):
    """A DNS-01 challenge never left the pending state."""


class OrderTimeoutError(CertRenewerError):
    """The order stayed in processing longer than its retry budget."""


class OrderFailedError(CertRenewerError):
    """The CA marked the order invalid."""


class ArtifactStoreError(CertRenewerError):
    """Object store I/O failed for a reason other than not-found."""


class WorkflowCancelledError(CertRenewerError):
    """The workflow was cancelled externally."""


class WorkflowDeadlineError(WorkflowCancelledError):
    """The workflow deadline expired while waiting."""

"""Account key, certificate key and certificate chain persistence."""

from __future__ import annotations

import hashlib
import logging

from cert_renewer.storage.base import ObjectStore

logger = logging.getLogger(__name__)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class ArtifactStore:
    """Stable logical names over an object store.

    Every write carries a ``sha256`` metadata digest of the payload so the
    stored copy can be verified outside this process; reads do not verify it.
    """

    def __init__(
        self,
        store: ObjectStore,
        account_key_name: str,
        certificate_key_name: str,
        certificate_name: str,
    ) -> None:
        self._store = store
        self.account_key_name = account_key_name
        self.certificate_key_name = certificate_key_name
        self.certificate_name = certificate_name

    def get(self, name: str) -> bytes | None:
        return self._store.get(name)

    def put(self, name: str, data: bytes, digest: str | None = None, filename: str | None = None) -> None:
        digest = digest or sha256_hex(data)
        self._store.put(name, data, metadata={"sha256": digest}, filename=filename or name.rsplit("/", 1)[-1])

    def load_account_key(self) -> bytes | None:
        return self.get(self.account_key_name)

    def save_account_key(self, private_key_pem: bytes) -> None:
        self.put(self.account_key_name, private_key_pem, filename="key.pem")
        logger.info("Stored ACME account key as %s", self.account_key_name)

    def load_private_key(self) -> bytes | None:
        return self.get(self.certificate_key_name)

    def load_certificate(self) -> bytes | None:
        return self.get(self.certificate_name)

    def save_certificate(self, common_name: str | None, private_key_pem: bytes, chain_pem: bytes) -> None:
        """Store the key, then the chain.

        The two writes are independent. Writing the key first means a crash in
        between leaves the previous chain in place, which the next run's
        validity check still evaluates and, being due, renews again.
        """
        filename = (common_name or "cert").removeprefix("*.")
        self.put(self.certificate_key_name, private_key_pem, filename=f"{filename}.key")
        self.put(self.certificate_name, chain_pem, filename=f"{filename}.crt")
        logger.info("Stored certificate %s and private key %s", self.certificate_name, self.certificate_key_name)

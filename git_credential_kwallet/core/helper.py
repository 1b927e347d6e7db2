"""git credential `get` / `store` / `erase` against KWallet."""

from __future__ import annotations

import logging
from typing import Optional

from git_credential_kwallet.config.settings import HelperConfig
from git_credential_kwallet.protocol.blob import decode_blob, encode_blob
from git_credential_kwallet.protocol.record import CredentialRecord
from git_credential_kwallet.wallet.kwallet import STATUS_OK, KWallet, RemoveResult


class UnknownOperationError(ValueError):
    """Raised for a verb other than get/store/erase."""


class CredentialHelper:
    def __init__(
        self,
        wallet: KWallet,
        config: HelperConfig,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._wallet = wallet
        self._config = config
        self._log = logger or logging.getLogger(__name__)

    def run(self, operation: str, record: CredentialRecord) -> str:
        """Execute one verb and return what should be written to stdout."""
        if operation == "get":
            found = self.get(record)
            return found.format() if found is not None else ""
        if operation == "store":
            self.store(record)
            return ""
        if operation == "erase":
            self.erase(record)
            return ""
        raise UnknownOperationError(f"unknown operation '{operation}'")

    def get(self, record: CredentialRecord) -> Optional[CredentialRecord]:
        host = self._host(record, "get")
        if host is None:
            return None
        session = self._wallet.open_session(self._config.wallet_name)
        blob = self._wallet.read_entry(session, self._config.folder_name, host)
        decoded = decode_blob(blob)
        if decoded is None:
            self._log.debug("no stored credential for host=%s", host)
            return None
        username, password = decoded
        record.set("username", username)
        record.set("password", password)
        return record

    def store(self, record: CredentialRecord) -> bool:
        host = self._host(record, "store")
        if host is None:
            return False
        folder = self._config.folder_name
        session = self._wallet.open_session(self._config.wallet_name)
        if not self._wallet.has_collection(session, folder):
            self._log.debug(
                "creating folder %s (existing: %s)",
                folder,
                ", ".join(self._wallet.list_collections(session)) or "none",
            )
            self._wallet.create_collection(session, folder)
        blob = encode_blob(record.get("username") or "", record.get("password") or "")
        status = self._wallet.write_entry(session, folder, host, blob)
        if status != STATUS_OK:
            self._log.warning("failed to store credential for host=%s (status=%s)", host, status)
            return False
        self._log.debug("stored credential for host=%s", host)
        return True

    def erase(self, record: CredentialRecord) -> Optional[RemoveResult]:
        host = self._host(record, "erase")
        if host is None:
            return None
        session = self._wallet.open_session(self._config.wallet_name)
        result = self._wallet.remove_entry(session, self._config.folder_name, host)
        if result is RemoveResult.REMOVED:
            self._log.info("removed credential for host=%s", host)
        elif result is RemoveResult.NOT_FOUND:
            self._log.info("no credential to remove for host=%s", host)
        else:
            self._log.warning("failed to remove credential for host=%s, wallet access may have been denied", host)
        return result

    def _host(self, record: CredentialRecord, operation: str) -> Optional[str]:
        host = record.get("host")
        if not host:
            self._log.debug("%s skipped: no host in request", operation)
            return None
        return host

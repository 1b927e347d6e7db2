"""KWallet session and folder operations over a SecretServiceClient."""

from __future__ import annotations

from enum import Enum

from git_credential_kwallet.bridge.base import SecretServiceClient

STATUS_OK = "0"
STATUS_NOT_FOUND = "-3"


class RemoveResult(str, Enum):
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    AUTH_FAILED = "auth_failed"


class KWallet:
    """One method per wallet RPC; the app name always goes last."""

    def __init__(self, client: SecretServiceClient, app_name: str) -> None:
        self._client = client
        self._app_name = app_name

    def open_session(self, wallet_name: str) -> str:
        # May block while the daemon shows an unlock prompt.
        return self._client.invoke("open", [wallet_name, "0", self._app_name])

    def has_collection(self, session: str, name: str) -> bool:
        return self._client.invoke("hasFolder", [session, name, self._app_name]) == "true"

    def create_collection(self, session: str, name: str) -> str:
        return self._client.invoke("createFolder", [session, name, self._app_name])

    def read_entry(self, session: str, collection: str, key: str) -> str:
        return self._client.invoke("readEntry", [session, collection, key, self._app_name])

    def write_entry(self, session: str, collection: str, key: str, value: str) -> str:
        return self._client.invoke("writeEntry", [session, collection, key, value, self._app_name])

    def remove_entry(self, session: str, collection: str, key: str) -> RemoveResult:
        status = self._client.invoke("removeEntry", [session, collection, key, self._app_name])
        if status == STATUS_OK:
            return RemoveResult.REMOVED
        if status == STATUS_NOT_FOUND:
            return RemoveResult.NOT_FOUND
        return RemoveResult.AUTH_FAILED

    def list_collections(self, session: str) -> list[str]:
        raw = self._client.invoke("folderList", [session, self._app_name])
        return [line for line in raw.splitlines() if line.strip()]

import logging
from typing import Sequence

import pytest

from git_credential_kwallet.bridge.base import SecretServiceClient
from git_credential_kwallet.config.settings import HelperConfig
from git_credential_kwallet.core.helper import CredentialHelper, UnknownOperationError
from git_credential_kwallet.protocol.record import CredentialRecord
from git_credential_kwallet.wallet.kwallet import KWallet, RemoveResult


class _MemoryWalletClient(SecretServiceClient):
    def __init__(self, write_status: str = "0", remove_failure: bool = False) -> None:
        self.folders: dict[str, dict[str, str]] = {}
        self.calls: list[str] = []
        self._write_status = write_status
        self._remove_failure = remove_failure

    def invoke(self, method: str, args: Sequence[str]) -> str:
        self.calls.append(method)
        if method == "open":
            return "42"
        if method == "hasFolder":
            return "true" if args[1] in self.folders else "false"
        if method == "createFolder":
            self.folders.setdefault(args[1], {})
            return "true"
        if method == "folderList":
            return "\n".join(self.folders)
        if method == "readEntry":
            return self.folders.get(args[1], {}).get(args[2], "")
        if method == "writeEntry":
            if self._write_status == "0":
                self.folders.setdefault(args[1], {})[args[2]] = args[3]
            return self._write_status
        if method == "removeEntry":
            if self._remove_failure:
                return "-1"
            folder = self.folders.get(args[1], {})
            if args[2] in folder:
                del folder[args[2]]
                return "0"
            return "-3"
        raise AssertionError(f"unexpected method: {method}")


def _helper(client: _MemoryWalletClient) -> CredentialHelper:
    config = HelperConfig()
    return CredentialHelper(
        wallet=KWallet(client, app_name=config.app_name),
        config=config,
        logger=logging.getLogger("git_credential_kwallet.tests"),
    )


def test_get_without_prior_store_outputs_nothing() -> None:
    client = _MemoryWalletClient()
    assert _helper(client).run("get", CredentialRecord.parse("host=example.com\n")) == ""


def test_store_then_get_returns_credentials() -> None:
    client = _MemoryWalletClient()
    helper = _helper(client)
    stored = CredentialRecord.parse(
        "protocol=https\nhost=example.com\nusername=alice\npassword=s3cret\n"
    )
    assert helper.run("store", stored) == ""
    assert client.folders == {"git-credentials": {"example.com": "5-alice:s3cret"}}

    output = helper.run("get", CredentialRecord.parse("host=example.com\n"))
    assert output == "host=example.com\nusername=alice\npassword=s3cret\n"


def test_get_preserves_other_keys_in_order() -> None:
    client = _MemoryWalletClient()
    client.folders["git-credentials"] = {"example.com": "5-alice:s3cret"}

    output = _helper(client).run(
        "get",
        CredentialRecord.parse("protocol=https\nhost=example.com\npath=repo.git"),
    )
    assert output.splitlines() == [
        "protocol=https",
        "host=example.com",
        "path=repo.git",
        "username=alice",
        "password=s3cret",
    ]


def test_get_ignores_unparseable_blob() -> None:
    client = _MemoryWalletClient()
    client.folders["git-credentials"] = {"example.com": "garbage"}
    assert _helper(client).run("get", CredentialRecord.parse("host=example.com")) == ""


def test_store_creates_folder_once() -> None:
    client = _MemoryWalletClient()
    helper = _helper(client)
    helper.store(CredentialRecord.parse("host=a.example\nusername=u\npassword=p"))
    helper.store(CredentialRecord.parse("host=b.example\nusername=u\npassword=p"))
    assert client.calls.count("createFolder") == 1
    assert set(client.folders["git-credentials"]) == {"a.example", "b.example"}


def test_store_defaults_missing_username_and_password() -> None:
    client = _MemoryWalletClient()
    assert _helper(client).store(CredentialRecord.parse("host=example.com")) is True
    assert client.folders["git-credentials"]["example.com"] == "0-:"


def test_store_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="git_credential_kwallet")
    client = _MemoryWalletClient(write_status="-1")
    record = CredentialRecord.parse("host=example.com\nusername=alice\npassword=s3cret")

    assert _helper(client).run("store", record) == ""
    assert "failed to store credential for host=example.com" in caplog.text
    assert "s3cret" not in caplog.text


def test_erase_twice_reports_not_found_second_time() -> None:
    client = _MemoryWalletClient()
    helper = _helper(client)
    helper.store(CredentialRecord.parse("host=example.com\nusername=alice\npassword=s3cret"))

    assert helper.erase(CredentialRecord.parse("host=example.com")) is RemoveResult.REMOVED
    assert helper.erase(CredentialRecord.parse("host=example.com")) is RemoveResult.NOT_FOUND
    assert helper.run("get", CredentialRecord.parse("host=example.com")) == ""


def test_erase_auth_failure_only_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="git_credential_kwallet")
    client = _MemoryWalletClient(remove_failure=True)
    assert _helper(client).run("erase", CredentialRecord.parse("host=example.com")) == ""
    assert "access may have been denied" in caplog.text


def test_missing_host_skips_wallet() -> None:
    client = _MemoryWalletClient()
    helper = _helper(client)
    record = CredentialRecord.parse("protocol=https\nusername=alice\npassword=s3cret")
    assert helper.run("get", record) == ""
    assert helper.run("store", record) == ""
    assert helper.run("erase", record) == ""
    assert client.calls == []


def test_unknown_operation_raises() -> None:
    with pytest.raises(UnknownOperationError):
        _helper(_MemoryWalletClient()).run("approve", CredentialRecord())

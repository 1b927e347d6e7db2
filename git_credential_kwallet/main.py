"""git credential helper entrypoint backed by KDE Wallet."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from git_credential_kwallet.bridge.base import SecretServiceError
from git_credential_kwallet.bridge.qdbus_client import QdbusClient
from git_credential_kwallet.config.settings import ConfigLoadError, HelperConfig, default_config_path, resolve_config
from git_credential_kwallet.core.helper import CredentialHelper, UnknownOperationError
from git_credential_kwallet.protocol.record import CredentialRecord
from git_credential_kwallet.wallet.kwallet import KWallet

PROG = "git-credential-kwallet"
USAGE = f"usage: {PROG} <get|store|erase>"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, usage=USAGE, add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("operation", nargs="*")
    return parser


def configure_logging(config: HelperConfig) -> None:
    level = logging.DEBUG if config.verbose else logging.ERROR
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("git_credential_kwallet").setLevel(level)


def build_helper(config: HelperConfig) -> CredentialHelper:
    client = QdbusClient(config)
    return CredentialHelper(wallet=KWallet(client, app_name=config.app_name), config=config)


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    args, extra = _build_parser().parse_known_args(argv)
    if args.help or extra or len(args.operation) != 1:
        print(USAGE, file=stdout)
        return 0

    try:
        config = resolve_config()
    except ConfigLoadError as exc:
        print(
            "Credential helper config is invalid.\n"
            f"- config: {default_config_path()}\n"
            f"- detail: {exc}",
            file=sys.stderr,
        )
        return 2
    configure_logging(config)

    operation = args.operation[0]
    record = CredentialRecord.parse(stdin.read())
    try:
        output = build_helper(config).run(operation, record)
    except UnknownOperationError as exc:
        print(f"internal error: {exc}", file=sys.stderr)
        return 0
    except SecretServiceError as exc:
        print(
            f"Credential helper failed: cannot reach KDE Wallet.\n- detail: {exc}",
            file=sys.stderr,
        )
        return 2

    if output:
        stdout.write(output)
        stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""qdbus command-line bridge to the KWallet daemon."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional, Sequence

from git_credential_kwallet.bridge.base import BridgeInterfaceError, BridgeNotFoundError, SecretServiceClient
from git_credential_kwallet.config.settings import HelperConfig

_INVALID_PARAMS = "invalid number of parameters"


class QdbusClient(SecretServiceClient):
    def __init__(self, config: HelperConfig, logger: Optional[logging.Logger] = None) -> None:
        self._service = config.service
        self._object_path = config.object_path
        self._candidates = tuple(config.bridge_commands)
        self._log = logger or logging.getLogger(__name__)

    def invoke(self, method: str, args: Sequence[str]) -> str:
        cmd = self._build_command(method, args)
        self._log.debug("bridge call %s argc=%d via %s", method, len(args), cmd[0])
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise BridgeNotFoundError(f"bridge executable disappeared: {cmd[0]}") from exc

        # stdout of a successful call is wallet data and must never be classified.
        detail = proc.stderr or ""
        if proc.returncode != 0:
            detail = f"{detail}\n{proc.stdout or ''}"
        if _INVALID_PARAMS in detail.lower():
            raise BridgeInterfaceError(
                f"{cmd[0]} rejected {method}: invalid number of parameters ({len(args)} given)"
            )
        if proc.returncode != 0:
            self._log.debug("bridge call %s exited with code=%d", method, proc.returncode)
        return (proc.stdout or "").rstrip()

    def resolve_executable(self) -> str:
        for name in self._candidates:
            found = shutil.which(name)
            if found:
                return found
        raise BridgeNotFoundError(
            "no D-Bus bridge found on PATH (tried: " + ", ".join(self._candidates) + ")"
        )

    def _build_command(self, method: str, args: Sequence[str]) -> list[str]:
        cmd = [self.resolve_executable(), self._service, self._object_path, method]
        cmd.extend(str(arg) for arg in args)
        return cmd

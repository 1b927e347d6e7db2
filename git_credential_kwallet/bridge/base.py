"""Secret service client abstractions.

The wallet daemon is reached through one opaque operation: invoke a named
method with positional string arguments and get its textual result back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class SecretServiceError(RuntimeError):
    """Raised when the secret service cannot be reached at all."""


class BridgeNotFoundError(SecretServiceError):
    """No bridge executable was found on PATH."""


class BridgeInterfaceError(SecretServiceError):
    """The bridge rejected the call signature."""


class SecretServiceClient(ABC):
    """RPC client interface."""

    @abstractmethod
    def invoke(self, method: str, args: Sequence[str]) -> str:
        """Call `method` and return its trimmed textual result."""

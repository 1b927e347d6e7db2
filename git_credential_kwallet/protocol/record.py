"""Git credential record (`key=value` lines on stdin/stdout)."""

from __future__ import annotations

from typing import Iterator, Optional


class CredentialRecord:
    """Ordered key/value mapping as exchanged with git.

    A value of None marks a key whose input line carried no `=`. Such keys are
    kept for lookups but never written back out.
    """

    def __init__(self) -> None:
        self._items: dict[str, Optional[str]] = {}

    @classmethod
    def parse(cls, text: str) -> "CredentialRecord":
        record = cls()
        for line in text.splitlines():
            key, sep, value = line.partition("=")
            if not key:
                continue
            record._items[key] = value if sep else None
        return record

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def keys(self) -> list[str]:
        return list(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[tuple[str, Optional[str]]]:
        return iter(self._items.items())

    def format(self) -> str:
        lines = [f"{key}={value}" for key, value in self._items.items() if value is not None]
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

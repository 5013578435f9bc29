"""
hostfacts.errors
AUTHOR: carter-vin

Typed collector failures

Every probe-level failure is a CollectError with a kind tag:
- io: pseudo-file unreadable
- subprocess: external command failed, timed out, or emitted unusable output
- parse: raw data too malformed to produce any facts
- no_primary_interface: network aggregation could not pick a primary
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    IO = "io"
    SUBPROCESS = "subprocess"
    PARSE = "parse"
    NO_PRIMARY_INTERFACE = "no_primary_interface"


class CollectError(Exception):
    """
    Base collector failure

    - kind: ErrorKind tag used in diagnostics
    - probe: which probe failed (file path, command, ...)
    """

    kind: ErrorKind = ErrorKind.PARSE

    def __init__(self, probe: str, message: str) -> None:
        super().__init__(f"{probe}: {message}")
        self.probe = probe
        self.message = message


class ProbeIOError(CollectError):
    kind = ErrorKind.IO


class ProbeSubprocessError(CollectError):
    kind = ErrorKind.SUBPROCESS


class ProbeParseError(CollectError):
    kind = ErrorKind.PARSE


class NoPrimaryInterface(CollectError):
    kind = ErrorKind.NO_PRIMARY_INTERFACE

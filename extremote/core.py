# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Optional


# -----------------------------------------------------------------------------
# Utils
# -----------------------------------------------------------------------------
def padded_bytes(buffer: bytes, size: int) -> bytes:
    padding_size = max(size - len(buffer), 0)
    return buffer + bytes(padding_size)


def string_to_bytes(value: str) -> bytes:
    '''Encode a string the way the lingo expects it: UTF-8, NUL-terminated.'''
    return value.encode('utf-8') + b'\x00'


def bytes_to_string(buffer: bytes) -> str:
    '''Decode a NUL-terminated UTF-8 string, ignoring anything after the NUL.'''
    end = buffer.find(0)
    if end >= 0:
        buffer = buffer[:end]
    return buffer.decode('utf-8', errors='replace')


def fixed_width_string(value: str, width: int) -> bytes:
    '''
    Encode a string into a fixed-size field.

    The encoded string (including its NUL terminator) is truncated to `width`
    bytes if it is too long, and padded with NUL bytes if it is too short.
    '''
    return padded_bytes(string_to_bytes(value)[:width], width)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------
class BaseExtRemoteError(Exception):
    """Base Error raised by extremote."""


class BackendError(BaseExtRemoteError):
    """A call to the media control backend failed."""

    def __init__(self, details: str = '', operation: Optional[str] = None):
        super().__init__(details)
        self.details = details
        self.operation = operation

    def __str__(self) -> str:
        return self.details


class BackendUnavailableError(BackendError):
    """There is no active media player."""


class BackendTimeoutError(BackendError):
    """The media control backend did not answer in time."""


class InvalidPacketError(BaseExtRemoteError, ValueError):
    """Invalid Packet Error"""

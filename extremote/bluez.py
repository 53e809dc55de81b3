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

"""
Media control backend for BlueZ media players (org.bluez.MediaPlayer1), over
the system D-Bus.

This requires the `dbus-python` package (install the `bluez` extra).
"""

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations
import asyncio
import functools
import logging
from typing import Any, Dict, Optional

from extremote.backend import BackendHandle, MediaBackend
from extremote.core import BackendError


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
BLUEZ_SERVICE_NAME = 'org.bluez'
MEDIA_PLAYER_INTERFACE = 'org.bluez.MediaPlayer1'
DBUS_OBJECT_MANAGER_INTERFACE = 'org.freedesktop.DBus.ObjectManager'
DBUS_PROPERTIES_INTERFACE = 'org.freedesktop.DBus.Properties'

DEFAULT_DBUS_TIMEOUT = 2.0


# -----------------------------------------------------------------------------
class BluezMediaBackend(MediaBackend):
    '''
    Backend that drives the first BlueZ media player found on the bus.

    dbus-python calls are blocking, so they run in the default executor. Each
    call also carries a D-Bus level timeout.
    '''

    def __init__(self, bus: Any = None, dbus_timeout: float = DEFAULT_DBUS_TIMEOUT):
        self._bus = bus
        self.dbus_timeout = dbus_timeout

    @property
    def bus(self) -> Any:
        if self._bus is None:
            # pylint: disable=import-outside-toplevel
            import dbus

            self._bus = dbus.SystemBus()
        return self._bus

    async def _run(self, function, *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(function, *args))

    def _player_object(self, handle: BackendHandle) -> Any:
        return self.bus.get_object(BLUEZ_SERVICE_NAME, handle.path, introspect=False)

    def _find_player(self) -> Optional[BackendHandle]:
        root = self.bus.get_object(BLUEZ_SERVICE_NAME, '/', introspect=False)
        objects = root.GetManagedObjects(
            dbus_interface=DBUS_OBJECT_MANAGER_INTERFACE, timeout=self.dbus_timeout
        )
        for path, interfaces in objects.items():
            if MEDIA_PLAYER_INTERFACE in interfaces:
                return BackendHandle(str(path))

        return None

    def _get_property(self, handle: BackendHandle, name: str) -> Any:
        return self._player_object(handle).Get(
            MEDIA_PLAYER_INTERFACE,
            name,
            dbus_interface=DBUS_PROPERTIES_INTERFACE,
            timeout=self.dbus_timeout,
        )

    def _call(self, handle: BackendHandle, method: str) -> None:
        getattr(self._player_object(handle), method)(
            dbus_interface=MEDIA_PLAYER_INTERFACE, timeout=self.dbus_timeout
        )

    async def find_player(self) -> Optional[BackendHandle]:
        return await self._run(self._find_player)

    async def get_status(self, handle: BackendHandle) -> str:
        try:
            status = await self._run(self._get_property, handle, 'Status')
        except Exception as error:
            raise BackendError(
                f'could not get player status from dbus: {error}',
                operation='get status',
            ) from error

        return str(status)

    async def get_track(self, handle: BackendHandle) -> Dict[str, str]:
        try:
            track = await self._run(self._get_property, handle, 'Track')
        except Exception as error:
            raise BackendError(
                f'could not get track from dbus: {error}', operation='get track'
            ) from error

        if not hasattr(track, 'get'):
            raise BackendError('could not coerce track to map', operation='get track')

        return {
            'title': str(track.get('Title', '')),
            'artist': str(track.get('Artist', '')),
            'album': str(track.get('Album', '')),
        }

    async def play(self, handle: BackendHandle) -> None:
        await self._run(self._call, handle, 'Play')

    async def pause(self, handle: BackendHandle) -> None:
        await self._run(self._call, handle, 'Pause')

    async def next(self, handle: BackendHandle) -> None:
        await self._run(self._call, handle, 'Next')

    async def previous(self, handle: BackendHandle) -> None:
        await self._run(self._call, handle, 'Previous')

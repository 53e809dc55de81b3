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
Access to the media control backend, i.e the currently active media player.

Every call made through a Player returns a Result instead of raising, so that
a missing or misbehaving backend never fails the command being handled.
"""

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations
from dataclasses import dataclass
import enum
import logging
from typing import Dict, Generic, Optional, TypeVar

from colors import color
from extremote.core import BackendError, BackendUnavailableError
from extremote.lingo import PlayerState
from extremote.utils import with_timeout


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
STATUS_PLAYING = 'playing'


# -----------------------------------------------------------------------------
_T = TypeVar('_T')


@dataclass
class Result(Generic[_T]):
    '''The outcome of a backend call: either a value or an error.'''

    value: Optional[_T] = None
    error: Optional[BackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[_T] = None) -> Result[_T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BackendError) -> Result[_T]:
        return cls(error=error)


# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BackendHandle:
    '''Reference to the active player, valid for the duration of one command.'''

    path: str

    def __str__(self) -> str:
        return self.path


# -----------------------------------------------------------------------------
class TrackField(enum.Enum):
    TITLE = 'title'
    ARTIST = 'artist'
    ALBUM = 'album'


class Action(enum.Enum):
    PLAY = 'Play'
    PAUSE = 'Pause'
    NEXT = 'Next'
    PREVIOUS = 'Previous'


# -----------------------------------------------------------------------------
class MediaBackend:
    """
    Base class for media control backends.

    All the methods are async, even if they don't always need to be, so that
    backends that do need to wait for an async result may do so. Methods
    report failures by raising; Player turns those into Results.
    """

    async def find_player(self) -> Optional[BackendHandle]:
        '''Return the first object advertising the media player capability.'''
        return None

    async def get_status(self, handle: BackendHandle) -> str:
        raise NotImplementedError

    async def get_track(self, handle: BackendHandle) -> Dict[str, str]:
        '''Return a dict with 'title', 'artist' and 'album' keys.'''
        raise NotImplementedError

    async def play(self, handle: BackendHandle) -> None:
        raise NotImplementedError

    async def pause(self, handle: BackendHandle) -> None:
        raise NotImplementedError

    async def next(self, handle: BackendHandle) -> None:
        raise NotImplementedError

    async def previous(self, handle: BackendHandle) -> None:
        raise NotImplementedError


# -----------------------------------------------------------------------------
def to_playback_state(raw: Optional[str], fetch_error: bool) -> PlayerState:
    '''
    Translate a backend status into the lingo's player state.

    A status that could not be fetched maps to STOPPED. Any fetched status
    other than "playing" (including "stopped" and unknown values) maps to
    PAUSED.
    '''
    if fetch_error:
        return PlayerState.STOPPED
    if raw == STATUS_PLAYING:
        return PlayerState.PLAYING
    return PlayerState.PAUSED


# -----------------------------------------------------------------------------
class Player:
    '''
    The active player as seen by one command.

    A Player is resolved fresh for every command and never cached, since the
    active player may come and go between commands. Every call is bounded by
    `timeout` seconds.
    '''

    def __init__(
        self,
        backend: MediaBackend,
        handle: Optional[BackendHandle],
        timeout: Optional[float] = None,
    ) -> None:
        self.backend = backend
        self.handle = handle
        self.timeout = timeout

    @classmethod
    async def resolve(
        cls, backend: MediaBackend, timeout: Optional[float] = None
    ) -> Player:
        try:
            handle = await with_timeout(
                backend.find_player(), timeout, operation='find_player'
            )
        except Exception as error:
            logger.warning(color(f'!!! cannot enumerate players: {error}', 'yellow'))
            handle = None

        logger.debug(f'player: {handle}')
        return cls(backend, handle, timeout)

    @property
    def active(self) -> bool:
        return self.handle is not None

    async def _call(self, operation: str, method, *args) -> Result:
        if self.handle is None:
            return Result.failure(
                BackendUnavailableError('player path is empty', operation=operation)
            )

        try:
            value = await with_timeout(
                method(self.handle, *args), self.timeout, operation=operation
            )
        except BackendError as error:
            error.operation = error.operation or operation
            return Result.failure(error)
        except Exception as error:
            return Result.failure(
                BackendError(
                    f'could not {operation} from backend: {error}',
                    operation=operation,
                )
            )

        return Result.success(value)

    async def get_status(self) -> Result[str]:
        result = await self._call('get status', self.backend.get_status)
        if result.ok:
            logger.debug(f'play status from backend: {result.value}')
        else:
            logger.warning(f'ERROR: getting play status: {result.error}')
        return result

    async def get_playback_state(self) -> PlayerState:
        result = await self.get_status()
        return to_playback_state(result.value, not result.ok)

    async def get_track_field(self, track_field: TrackField) -> Result[str]:
        '''
        Fetch one metadata field.

        Each field is fetched with its own backend call, so a failure for one
        field does not affect the others.
        '''
        result = await self._call('get track', self.backend.get_track)
        if not result.ok:
            logger.warning(
                f'ERROR: getting track {track_field.value}: {result.error}'
            )
            return result

        track = result.value
        if not isinstance(track, dict) or track_field.value not in track:
            error = BackendError(
                f'could not get track {track_field.value}', operation='get track'
            )
            logger.warning(f'ERROR: getting track {track_field.value}: {error}')
            return Result.failure(error)

        value = str(track[track_field.value])
        logger.debug(f'got track {track_field.value}: {value}')
        return Result.success(value)

    async def invoke(self, action: Action) -> Result[None]:
        method = {
            Action.PLAY: self.backend.play,
            Action.PAUSE: self.backend.pause,
            Action.NEXT: self.backend.next,
            Action.PREVIOUS: self.backend.previous,
        }[action]

        logger.debug(f'calling {action.value}')
        result = await self._call(f'call {action.value}', method)
        if not result.ok:
            logger.warning(f'ERROR: calling {action.value}: {result.error}')
        return result

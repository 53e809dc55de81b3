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
Extended Interface command handler.

Each command is handled on its own: the active player is resolved, the handler
for the command ID runs, and at most one response is written back.
"""

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Dict, Optional

import pyee
from colors import color

from extremote import lingo
from extremote.backend import (
    STATUS_PLAYING,
    to_playback_state,
    Action,
    MediaBackend,
    Player,
    Result,
    TrackField,
)
from extremote.config import ExtRemoteConfiguration
from extremote.core import InvalidPacketError
from extremote.lingo import AckStatus, CommandId, PlayControlCommand, TrackInfoType


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
# fmt: off
PLACEHOLDER_TRACK_LENGTH   = 300 * 1000  # ms
PLACEHOLDER_TRACK_POSITION = 20 * 1000   # ms
PLACEHOLDER_TRACK_COUNT    = 10
NO_CURRENT_TRACK_INDEX     = -1
NO_CURRENT_CHAPTER_INDEX   = -1

DISPLAY_IMAGE_MAX_WIDTH    = 640
DISPLAY_IMAGE_MAX_HEIGHT   = 960
DISPLAY_IMAGE_PIXEL_FORMAT = 0x01

CHAPTER_NAME               = 'chapter'
TRACK_INFO_FALLBACK_TEXT   = 'WAT'
# fmt: on

TRACK_INFO_TEXTS: Dict[TrackInfoType, str] = {
    TrackInfoType.ARTIST_NAME: 'GetIndexedPlayingTrackInfo ArtistName',
    TrackInfoType.ALBUM: 'GetIndexedPlayingTrackInfo Album',
    TrackInfoType.GENRE: 'GetIndexedPlayingTrackInfo Genre',
    TrackInfoType.TITLE: 'GetIndexedPlayingTrackInfo Title',
    TrackInfoType.COMPOSER: 'GetIndexedPlayingTrackInfo Composer',
}

DIRECTIONAL_ACTIONS: Dict[PlayControlCommand.Action, Action] = {
    PlayControlCommand.Action.PLAY: Action.PLAY,
    PlayControlCommand.Action.PAUSE: Action.PAUSE,
    PlayControlCommand.Action.NEXT: Action.NEXT,
    PlayControlCommand.Action.NEXT_TRACK: Action.NEXT,
    PlayControlCommand.Action.NEXT_CHAPTER: Action.NEXT,
    PlayControlCommand.Action.PREV: Action.PREVIOUS,
    PlayControlCommand.Action.PREV_TRACK: Action.PREVIOUS,
    PlayControlCommand.Action.PREV_CHAPTER: Action.PREVIOUS,
}


# -----------------------------------------------------------------------------
def indexed_track_info(info_type: TrackInfoType):
    '''Return the info payload for a GetIndexedPlayingTrackInfo info type.'''
    if info_type == TrackInfoType.CAPS:
        return lingo.TrackCaps(
            caps=0, track_length=PLACEHOLDER_TRACK_LENGTH, chapter_count=0
        )
    if info_type in TRACK_INFO_TEXTS:
        return lingo.TrackText(TRACK_INFO_TEXTS[info_type])
    if info_type == TrackInfoType.ARTWORK_COUNT:
        return lingo.TrackArtworkCount()
    if info_type in (TrackInfoType.LYRICS, TrackInfoType.DESCRIPTION):
        return lingo.TrackLongText(flags=0, packet_index=0, text='')
    return lingo.TrackText(TRACK_INFO_FALLBACK_TEXT)


def resolve_toggle(status: Result[str]) -> Action:
    '''
    Decide what a toggle does: pause if the player is playing, play otherwise,
    including when the status could not be fetched.
    '''
    if status.ok and status.value == STATUS_PLAYING:
        return Action.PAUSE
    return Action.PLAY


# -----------------------------------------------------------------------------
@dataclass
class Reply:
    '''A response, correlated with the command it answers.'''

    command: lingo.Command
    response: lingo.Response

    @property
    def transaction_id(self) -> Optional[int]:
        return self.command.transaction_id


ReplyWriter = Callable[[Reply], None]


# -----------------------------------------------------------------------------
class Responder:
    '''Writes replies to a caller-supplied sink, one write per call.'''

    def __init__(self, writer: ReplyWriter) -> None:
        self.writer = writer

    def respond(
        self, command: lingo.Command, response: lingo.Response
    ) -> lingo.Response:
        logger.debug(f'>>> {response}')
        self.writer(Reply(command, response))
        return response

    def ack(
        self, command: lingo.Command, status: AckStatus = AckStatus.SUCCESS
    ) -> lingo.Response:
        return self.respond(command, lingo.Ack(status, command.command_id))


# -----------------------------------------------------------------------------
class ExtRemote(pyee.EventEmitter):
    """
    Extended Interface remote: answers lingo 0x04 commands, driving the active
    media player for playback control.

    Events:
      'response' (reply): a reply was written.
      'backend_error' (command, error): a backend call failed.
    """

    _Handler = Callable[[lingo.Command, Player], Awaitable[Optional[lingo.Response]]]

    backend: MediaBackend
    config: ExtRemoteConfiguration
    responder: Responder
    handlers: Dict[CommandId, _Handler]

    def __init__(
        self,
        backend: MediaBackend,
        writer: ReplyWriter,
        config: Optional[ExtRemoteConfiguration] = None,
    ) -> None:
        super().__init__()
        self.backend = backend
        self.config = config if config else ExtRemoteConfiguration()
        self.writer = writer
        self.responder = Responder(self._write)

        # Commands that are answered with a fixed success acknowledgement.
        ack_only = (
            CommandId.SET_CURRENT_PLAYING_TRACK_CHAPTER,
            CommandId.SET_AUDIOBOOK_SPEED,
            CommandId.RESET_DB_SELECTION,
            CommandId.SELECT_DB_RECORD,
            CommandId.SET_PLAY_STATUS_CHANGE_NOTIFICATION,
            CommandId.PLAY_CURRENT_SELECTION,
            CommandId.SET_SHUFFLE,
            CommandId.SET_REPEAT,
            CommandId.SET_DISPLAY_IMAGE,
        )
        # Commands that are accepted but never answered.
        no_reply = (
            CommandId.SET_CURRENT_PLAYING_TRACK,
            CommandId.SELECT_SORT_DB_RECORD,
            CommandId.GET_DB_ITUNES_INFO,
            CommandId.GET_UID_TRACK_INFO,
            CommandId.GET_DB_TRACK_INFO,
            CommandId.GET_PB_TRACK_INFO,
        )

        self.handlers = {
            CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_INFO: (
                self._on_get_current_playing_track_chapter_info
            ),
            CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_PLAY_STATUS: (
                self._on_get_current_playing_track_chapter_play_status
            ),
            CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_NAME: (
                self._on_get_current_playing_track_chapter_name
            ),
            CommandId.GET_AUDIOBOOK_SPEED: self._on_get_audiobook_speed,
            CommandId.GET_INDEXED_PLAYING_TRACK_INFO: (
                self._on_get_indexed_playing_track_info
            ),
            CommandId.GET_ARTWORK_FORMATS: self._on_get_artwork_formats,
            CommandId.GET_TRACK_ARTWORK_DATA: self._on_get_track_artwork_data,
            CommandId.GET_NUMBER_CATEGORIZED_DB_RECORDS: (
                self._on_get_number_categorized_db_records
            ),
            CommandId.RETRIEVE_CATEGORIZED_DATABASE_RECORDS: (
                self._on_retrieve_categorized_database_records
            ),
            CommandId.GET_PLAY_STATUS: self._on_get_play_status,
            CommandId.GET_CURRENT_PLAYING_TRACK_INDEX: (
                self._on_get_current_playing_track_index
            ),
            CommandId.GET_INDEXED_PLAYING_TRACK_TITLE: (
                self._on_get_indexed_playing_track_title
            ),
            CommandId.GET_INDEXED_PLAYING_TRACK_ARTIST_NAME: (
                self._on_get_indexed_playing_track_artist_name
            ),
            CommandId.GET_INDEXED_PLAYING_TRACK_ALBUM_NAME: (
                self._on_get_indexed_playing_track_album_name
            ),
            CommandId.PLAY_CONTROL: self._on_play_control,
            CommandId.GET_TRACK_ARTWORK_TIMES: self._on_get_track_artwork_times,
            CommandId.GET_SHUFFLE: self._on_get_shuffle,
            CommandId.GET_REPEAT: self._on_get_repeat,
            CommandId.GET_MONO_DISPLAY_IMAGE_LIMITS: (
                self._on_get_mono_display_image_limits
            ),
            CommandId.GET_NUM_PLAYING_TRACKS: self._on_get_num_playing_tracks,
            CommandId.GET_COLOR_DISPLAY_IMAGE_LIMITS: (
                self._on_get_color_display_image_limits
            ),
            CommandId.RESET_DB_SELECTION_HIERARCHY: (
                self._on_reset_db_selection_hierarchy
            ),
        }
        self.handlers.update(
            {command_id: self._on_ack_only for command_id in ack_only}
        )
        self.handlers.update(
            {command_id: self._on_no_reply for command_id in no_reply}
        )

    def _write(self, reply: Reply) -> None:
        self.writer(reply)
        self.emit('response', reply)

    async def handle(self, command: lingo.Command) -> Optional[lingo.Response]:
        '''
        Handle one command.

        Returns the response that was written, or None if the command was not
        answered. Never raises.
        '''
        logger.debug(f'<<< {command}')

        handler = self.handlers.get(command.command_id)
        if handler is None:
            logger.debug(f'unhandled command {command.command_id.name}, ignoring')
            return None

        player = await Player.resolve(self.backend, self.config.backend_timeout)
        try:
            return await handler(command, player)
        except Exception:
            logger.exception(
                color(f'!!! exception while handling {command.command_id.name}', 'red')
            )
            return None

    async def handle_bytes(
        self,
        command_id: int,
        parameter: bytes,
        transaction_id: Optional[int] = None,
    ) -> Optional[lingo.Response]:
        '''Decode a command from its ID and parameter bytes, then handle it.'''
        try:
            command = lingo.Command.from_bytes(command_id, parameter, transaction_id)
        except InvalidPacketError as error:
            logger.warning(f'invalid command 0x{command_id:04X}: {error}')
            return None

        return await self.handle(command)

    def _check(self, command: lingo.Command, result: Result) -> Result:
        if not result.ok:
            self.emit('backend_error', command, result.error)
        return result

    def _metadata_text(self, result: Result[str]) -> str:
        if result.ok:
            return result.value or ''
        if self.config.metadata_error_text is not None:
            return self.config.metadata_error_text
        return str(result.error)

    # -------------------------------------------------------------------------
    # Stubs and plain acknowledgements
    # -------------------------------------------------------------------------
    async def _on_ack_only(self, command: lingo.Command, _: Player):
        return self.responder.ack(command)

    async def _on_no_reply(self, command: lingo.Command, _: Player):
        logger.debug(f'not answering {command.command_id.name}')
        return None

    async def _on_get_current_playing_track_chapter_info(
        self, command: lingo.Command, _: Player
    ):
        return self.responder.respond(
            command,
            lingo.ReturnCurrentPlayingTrackChapterInfo(
                chapter_index=NO_CURRENT_CHAPTER_INDEX, chapter_count=0
            ),
        )

    async def _on_get_current_playing_track_chapter_play_status(
        self, command: lingo.Command, _: Player
    ):
        return self.responder.respond(
            command,
            lingo.ReturnCurrentPlayingTrackChapterPlayStatus(
                chapter_length=0, chapter_position=0
            ),
        )

    async def _on_get_current_playing_track_chapter_name(
        self, command: lingo.Command, _: Player
    ):
        return self.responder.respond(
            command, lingo.ReturnCurrentPlayingTrackChapterName(CHAPTER_NAME)
        )

    async def _on_get_audiobook_speed(self, command: lingo.Command, _: Player):
        return self.responder.respond(command, lingo.ReturnAudiobookSpeed(0))

    async def _on_get_artwork_formats(self, command: lingo.Command, _: Player):
        return self.responder.respond(command, lingo.RetArtworkFormats())

    async def _on_get_track_artwork_data(self, command: lingo.Command, _: Player):
        return self.responder.ack(command, AckStatus.FAILED)

    async def _on_get_track_artwork_times(self, command: lingo.Command, _: Player):
        return self.responder.respond(command, lingo.RetTrackArtworkTimes())

    async def _on_get_shuffle(self, command: lingo.Command, _: Player):
        return self.responder.respond(
            command, lingo.ReturnShuffle(lingo.ShuffleMode.OFF)
        )

    async def _on_get_repeat(self, command: lingo.Command, _: Player):
        return self.responder.respond(command, lingo.ReturnRepeat(lingo.RepeatMode.OFF))

    async def _on_get_mono_display_image_limits(
        self, command: lingo.Command, _: Player
    ):
        return self.responder.respond(
            command,
            lingo.ReturnMonoDisplayImageLimits(
                DISPLAY_IMAGE_MAX_WIDTH,
                DISPLAY_IMAGE_MAX_HEIGHT,
                DISPLAY_IMAGE_PIXEL_FORMAT,
            ),
        )

    async def _on_get_color_display_image_limits(
        self, command: lingo.Command, _: Player
    ):
        return self.responder.respond(
            command,
            lingo.ReturnColorDisplayImageLimits(
                DISPLAY_IMAGE_MAX_WIDTH,
                DISPLAY_IMAGE_MAX_HEIGHT,
                DISPLAY_IMAGE_PIXEL_FORMAT,
            ),
        )

    async def _on_get_indexed_playing_track_info(
        self, command: lingo.Command, _: Player
    ):
        assert isinstance(command, lingo.GetIndexedPlayingTrackInfoCommand)
        return self.responder.respond(
            command,
            lingo.ReturnIndexedPlayingTrackInfo(
                command.info_type, indexed_track_info(command.info_type)
            ),
        )

    async def _on_reset_db_selection_hierarchy(
        self, command: lingo.Command, _: Player
    ):
        assert isinstance(command, lingo.ResetDBSelectionHierarchyCommand)
        if command.selection == 1:
            return self.responder.ack(command)
        return self.responder.ack(command, AckStatus.FAILED)

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    async def _on_get_number_categorized_db_records(
        self, command: lingo.Command, _: Player
    ):
        assert isinstance(command, lingo.GetNumberCategorizedDBRecordsCommand)
        record_count = (
            PLACEHOLDER_TRACK_COUNT
            if command.category == lingo.DbCategory.TRACK
            else 0
        )
        return self.responder.respond(
            command, lingo.ReturnNumberCategorizedDBRecords(record_count)
        )

    async def _on_retrieve_categorized_database_records(
        self, command: lingo.Command, _: Player
    ):
        assert isinstance(command, lingo.RetrieveCategorizedDatabaseRecordsCommand)
        if command.category == lingo.DbCategory.TRACK:
            return self.responder.respond(
                command,
                lingo.ReturnCategorizedDatabaseRecord(
                    command.offset, f'Track {command.offset}'
                ),
            )

        return self.responder.respond(
            command, lingo.ReturnCategorizedDatabaseRecord()
        )

    # -------------------------------------------------------------------------
    # Playback queries
    # -------------------------------------------------------------------------
    async def _on_get_play_status(self, command: lingo.Command, player: Player):
        status = self._check(command, await player.get_status())
        return self.responder.respond(
            command,
            lingo.ReturnPlayStatus(
                track_length=PLACEHOLDER_TRACK_LENGTH,
                track_position=PLACEHOLDER_TRACK_POSITION,
                state=to_playback_state(status.value, not status.ok),
                track_index=0,
            ),
        )

    async def _on_get_current_playing_track_index(
        self, command: lingo.Command, player: Player
    ):
        return self.responder.respond(
            command,
            lingo.ReturnCurrentPlayingTrackIndex(
                0 if player.active else NO_CURRENT_TRACK_INDEX
            ),
        )

    async def _on_get_num_playing_tracks(self, command: lingo.Command, player: Player):
        return self.responder.respond(
            command,
            lingo.ReturnNumPlayingTracks(
                PLACEHOLDER_TRACK_COUNT if player.active else 0
            ),
        )

    async def _get_track_text(
        self, command: lingo.Command, player: Player, track_field: TrackField
    ) -> str:
        result = self._check(command, await player.get_track_field(track_field))
        return self._metadata_text(result)

    async def _on_get_indexed_playing_track_title(
        self, command: lingo.Command, player: Player
    ):
        title = await self._get_track_text(command, player, TrackField.TITLE)
        return self.responder.respond(
            command, lingo.ReturnIndexedPlayingTrackTitle(title)
        )

    async def _on_get_indexed_playing_track_artist_name(
        self, command: lingo.Command, player: Player
    ):
        artist = await self._get_track_text(command, player, TrackField.ARTIST)
        return self.responder.respond(
            command, lingo.ReturnIndexedPlayingTrackArtistName(artist)
        )

    async def _on_get_indexed_playing_track_album_name(
        self, command: lingo.Command, player: Player
    ):
        album = await self._get_track_text(command, player, TrackField.ALBUM)
        return self.responder.respond(
            command, lingo.ReturnIndexedPlayingTrackAlbumName(album)
        )

    # -------------------------------------------------------------------------
    # Playback control
    # -------------------------------------------------------------------------
    async def _invoke(
        self, command: lingo.Command, player: Player, action: Action
    ) -> None:
        # Failures are reported, but the command is still acknowledged.
        self._check(command, await player.invoke(action))

    async def _on_play_control(self, command: lingo.Command, player: Player):
        assert isinstance(command, PlayControlCommand)
        action = command.action
        logger.debug(f'play control: {action.name}')

        if action == PlayControlCommand.Action.TOGGLE:
            if not player.active:
                logger.debug('no active player, not answering toggle')
                return None

            status = self._check(command, await player.get_status())
            target = resolve_toggle(status)
            logger.debug(
                f"current status is '{status.value}', calling '{target.value}'"
            )
            await self._invoke(command, player, target)
            return self.responder.ack(command)

        if (target := DIRECTIONAL_ACTIONS.get(action)) is not None:
            if player.active:
                await self._invoke(command, player, target)
            else:
                logger.debug(f'no active player, skipping {target.value}')
            return self.responder.ack(command)

        # Stop and seek actions have no backend counterpart.
        if not player.active:
            logger.debug(f'no active player, not answering {action.name}')
            return None

        logger.debug(f'no backend action for {action.name}')
        return self.responder.ack(command)

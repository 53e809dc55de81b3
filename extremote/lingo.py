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
Extended Interface (lingo 0x04) commands and responses.

Only the command parameters and response payloads are handled here. Framing
(sync bytes, length, lingo ID and checksum) is the responsibility of the
transport.
"""

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations
from dataclasses import dataclass, field
import logging
import struct
from typing import Dict, List, Optional, Sequence, Type

from extremote.core import (
    InvalidPacketError,
    bytes_to_string,
    fixed_width_string,
    string_to_bytes,
)
from extremote.utils import OpenIntEnum


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
EXTENDED_INTERFACE_LINGO_ID = 0x04

CATEGORIZED_RECORD_TEXT_SIZE = 16


# -----------------------------------------------------------------------------
class CommandId(OpenIntEnum):
    # fmt: off
    ACK                                         = 0x0001
    GET_CURRENT_PLAYING_TRACK_CHAPTER_INFO      = 0x0002
    RETURN_CURRENT_PLAYING_TRACK_CHAPTER_INFO   = 0x0003
    SET_CURRENT_PLAYING_TRACK_CHAPTER           = 0x0004
    GET_CURRENT_PLAYING_TRACK_CHAPTER_PLAY_STATUS    = 0x0005
    RETURN_CURRENT_PLAYING_TRACK_CHAPTER_PLAY_STATUS = 0x0006
    GET_CURRENT_PLAYING_TRACK_CHAPTER_NAME      = 0x0007
    RETURN_CURRENT_PLAYING_TRACK_CHAPTER_NAME   = 0x0008
    GET_AUDIOBOOK_SPEED                         = 0x0009
    RETURN_AUDIOBOOK_SPEED                      = 0x000A
    SET_AUDIOBOOK_SPEED                         = 0x000B
    GET_INDEXED_PLAYING_TRACK_INFO              = 0x000C
    RETURN_INDEXED_PLAYING_TRACK_INFO           = 0x000D
    GET_ARTWORK_FORMATS                         = 0x000E
    RET_ARTWORK_FORMATS                         = 0x000F
    GET_TRACK_ARTWORK_DATA                      = 0x0010
    RET_TRACK_ARTWORK_DATA                      = 0x0011
    RESET_DB_SELECTION                          = 0x0016
    SELECT_DB_RECORD                            = 0x0017
    GET_NUMBER_CATEGORIZED_DB_RECORDS           = 0x0018
    RETURN_NUMBER_CATEGORIZED_DB_RECORDS        = 0x0019
    RETRIEVE_CATEGORIZED_DATABASE_RECORDS       = 0x001A
    RETURN_CATEGORIZED_DATABASE_RECORD          = 0x001B
    GET_PLAY_STATUS                             = 0x001C
    RETURN_PLAY_STATUS                          = 0x001D
    GET_CURRENT_PLAYING_TRACK_INDEX             = 0x001E
    RETURN_CURRENT_PLAYING_TRACK_INDEX          = 0x001F
    GET_INDEXED_PLAYING_TRACK_TITLE             = 0x0020
    RETURN_INDEXED_PLAYING_TRACK_TITLE          = 0x0021
    GET_INDEXED_PLAYING_TRACK_ARTIST_NAME       = 0x0022
    RETURN_INDEXED_PLAYING_TRACK_ARTIST_NAME    = 0x0023
    GET_INDEXED_PLAYING_TRACK_ALBUM_NAME        = 0x0024
    RETURN_INDEXED_PLAYING_TRACK_ALBUM_NAME     = 0x0025
    SET_PLAY_STATUS_CHANGE_NOTIFICATION         = 0x0026
    PLAY_STATUS_CHANGE_NOTIFICATION             = 0x0027
    PLAY_CURRENT_SELECTION                      = 0x0028
    PLAY_CONTROL                                = 0x0029
    GET_TRACK_ARTWORK_TIMES                     = 0x002A
    RET_TRACK_ARTWORK_TIMES                     = 0x002B
    GET_SHUFFLE                                 = 0x002C
    RETURN_SHUFFLE                              = 0x002D
    SET_SHUFFLE                                 = 0x002E
    GET_REPEAT                                  = 0x002F
    RETURN_REPEAT                               = 0x0030
    SET_REPEAT                                  = 0x0031
    SET_DISPLAY_IMAGE                           = 0x0032
    GET_MONO_DISPLAY_IMAGE_LIMITS               = 0x0033
    RETURN_MONO_DISPLAY_IMAGE_LIMITS            = 0x0034
    GET_NUM_PLAYING_TRACKS                      = 0x0035
    RETURN_NUM_PLAYING_TRACKS                   = 0x0036
    SET_CURRENT_PLAYING_TRACK                   = 0x0037
    SELECT_SORT_DB_RECORD                       = 0x0038
    GET_COLOR_DISPLAY_IMAGE_LIMITS              = 0x0039
    RETURN_COLOR_DISPLAY_IMAGE_LIMITS           = 0x003A
    RESET_DB_SELECTION_HIERARCHY                = 0x003B
    GET_DB_ITUNES_INFO                          = 0x003C
    RET_DB_ITUNES_INFO                          = 0x003D
    GET_UID_TRACK_INFO                          = 0x003E
    RET_UID_TRACK_INFO                          = 0x003F
    GET_DB_TRACK_INFO                           = 0x0040
    RET_DB_TRACK_INFO                           = 0x0041
    GET_PB_TRACK_INFO                           = 0x0042
    RET_PB_TRACK_INFO                           = 0x0043
    # fmt: on


# -----------------------------------------------------------------------------
class AckStatus(OpenIntEnum):
    SUCCESS = 0x00
    UNKNOWN_DATABASE_CATEGORY = 0x01
    FAILED = 0x02
    OUT_OF_RESOURCES = 0x03
    BAD_PARAMETER = 0x04
    UNKNOWN_ID = 0x05
    PENDING = 0x06


# -----------------------------------------------------------------------------
class PlayerState(OpenIntEnum):
    STOPPED = 0x00
    PLAYING = 0x01
    PAUSED = 0x02
    ERROR = 0xFF


# -----------------------------------------------------------------------------
class TrackInfoType(OpenIntEnum):
    CAPS = 0x00
    PODCAST_NAME = 0x01
    RELEASE_DATE = 0x02
    DESCRIPTION = 0x03
    LYRICS = 0x04
    GENRE = 0x05
    COMPOSER = 0x06
    ARTWORK_COUNT = 0x07
    TITLE = 0x08
    ARTIST_NAME = 0x09
    ALBUM = 0x0A


# -----------------------------------------------------------------------------
class DbCategory(OpenIntEnum):
    PLAYLIST = 0x01
    ARTIST = 0x02
    ALBUM = 0x03
    GENRE = 0x04
    TRACK = 0x05
    COMPOSER = 0x06
    AUDIOBOOK = 0x07
    PODCAST = 0x08
    NESTED_PLAYLIST = 0x09


# -----------------------------------------------------------------------------
class ShuffleMode(OpenIntEnum):
    OFF = 0x00
    TRACKS = 0x01
    ALBUMS = 0x02


# -----------------------------------------------------------------------------
class RepeatMode(OpenIntEnum):
    OFF = 0x00
    ONE_TRACK = 0x01
    ALL_TRACKS = 0x02


# -----------------------------------------------------------------------------
def _unpack(fmt: str, parameter: bytes, offset: int = 0) -> tuple:
    try:
        return struct.unpack_from(fmt, parameter, offset)
    except struct.error as error:
        raise InvalidPacketError(
            f'parameter too short ({len(parameter)} bytes) for {fmt}'
        ) from error


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------
@dataclass
class Command:
    command_id: CommandId
    parameter: bytes
    transaction_id: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_bytes(
        cls,
        command_id: int,
        parameter: bytes,
        transaction_id: Optional[int] = None,
    ) -> Command:
        command_id = CommandId(command_id)
        subclass = COMMAND_CLASSES.get(command_id)
        if subclass is None:
            command: Command = GenericCommand(command_id, parameter)
        else:
            command = subclass.from_parameter(parameter)
        command.transaction_id = transaction_id
        return command

    def to_string(self, properties: Dict[str, str]) -> str:
        properties_str = ",".join(
            [f"{name}={value}" for name, value in properties.items()]
        )
        return f"Command[{self.command_id.name}]({properties_str})"

    def __bytes__(self) -> bytes:
        return self.parameter

    def __str__(self) -> str:
        return self.to_string({"parameter": self.parameter.hex()})

    def __repr__(self) -> str:
        return str(self)


# -----------------------------------------------------------------------------
class GenericCommand(Command):
    '''A command with no parsed parameters.'''

    def __init__(self, command_id: CommandId, parameter: bytes = b'') -> None:
        super().__init__(CommandId(command_id), parameter)


# -----------------------------------------------------------------------------
class SetCurrentPlayingTrackChapterCommand(Command):
    chapter_index: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SetCurrentPlayingTrackChapterCommand:
        return cls(_unpack('>i', parameter)[0])

    def __init__(self, chapter_index: int) -> None:
        super().__init__(
            CommandId.SET_CURRENT_PLAYING_TRACK_CHAPTER,
            struct.pack('>i', chapter_index),
        )
        self.chapter_index = chapter_index

    def __str__(self) -> str:
        return self.to_string({"chapter_index": str(self.chapter_index)})


# -----------------------------------------------------------------------------
class SetAudiobookSpeedCommand(Command):
    speed: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SetAudiobookSpeedCommand:
        return cls(_unpack('>b', parameter)[0])

    def __init__(self, speed: int) -> None:
        super().__init__(CommandId.SET_AUDIOBOOK_SPEED, struct.pack('>b', speed))
        self.speed = speed

    def __str__(self) -> str:
        return self.to_string({"speed": str(self.speed)})


# -----------------------------------------------------------------------------
class GetIndexedPlayingTrackInfoCommand(Command):
    info_type: TrackInfoType
    track_index: int
    chapter_index: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> GetIndexedPlayingTrackInfoCommand:
        info_type, track_index, chapter_index = _unpack('>BIH', parameter)
        return cls(TrackInfoType(info_type), track_index, chapter_index)

    def __init__(
        self, info_type: TrackInfoType, track_index: int = 0, chapter_index: int = 0
    ) -> None:
        super().__init__(
            CommandId.GET_INDEXED_PLAYING_TRACK_INFO,
            struct.pack('>BIH', int(info_type), track_index, chapter_index),
        )
        self.info_type = info_type
        self.track_index = track_index
        self.chapter_index = chapter_index

    def __str__(self) -> str:
        return self.to_string(
            {
                "info_type": self.info_type.name,
                "track_index": str(self.track_index),
                "chapter_index": str(self.chapter_index),
            }
        )


# -----------------------------------------------------------------------------
class SelectDBRecordCommand(Command):
    category: DbCategory
    record_index: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SelectDBRecordCommand:
        category, record_index = _unpack('>Bi', parameter)
        return cls(DbCategory(category), record_index)

    def __init__(self, category: DbCategory, record_index: int) -> None:
        super().__init__(
            CommandId.SELECT_DB_RECORD,
            struct.pack('>Bi', int(category), record_index),
        )
        self.category = category
        self.record_index = record_index

    def __str__(self) -> str:
        return self.to_string(
            {"category": self.category.name, "record_index": str(self.record_index)}
        )


# -----------------------------------------------------------------------------
class GetNumberCategorizedDBRecordsCommand(Command):
    category: DbCategory

    @classmethod
    def from_parameter(cls, parameter: bytes) -> GetNumberCategorizedDBRecordsCommand:
        return cls(DbCategory(_unpack('>B', parameter)[0]))

    def __init__(self, category: DbCategory) -> None:
        super().__init__(
            CommandId.GET_NUMBER_CATEGORIZED_DB_RECORDS, bytes([int(category)])
        )
        self.category = category

    def __str__(self) -> str:
        return self.to_string({"category": self.category.name})


# -----------------------------------------------------------------------------
class RetrieveCategorizedDatabaseRecordsCommand(Command):
    category: DbCategory
    offset: int
    count: int

    @classmethod
    def from_parameter(
        cls, parameter: bytes
    ) -> RetrieveCategorizedDatabaseRecordsCommand:
        category, offset, count = _unpack('>BII', parameter)
        return cls(DbCategory(category), offset, count)

    def __init__(self, category: DbCategory, offset: int, count: int = 1) -> None:
        super().__init__(
            CommandId.RETRIEVE_CATEGORIZED_DATABASE_RECORDS,
            struct.pack('>BII', int(category), offset, count),
        )
        self.category = category
        self.offset = offset
        self.count = count

    def __str__(self) -> str:
        return self.to_string(
            {
                "category": self.category.name,
                "offset": str(self.offset),
                "count": str(self.count),
            }
        )


# -----------------------------------------------------------------------------
class IndexedPlayingTrackCommand(Command):
    '''Base for the title, artist name and album name queries.'''

    COMMAND_ID: CommandId
    track_index: int

    @classmethod
    def from_parameter(cls, parameter: bytes):
        return cls(_unpack('>I', parameter)[0])

    def __init__(self, track_index: int = 0) -> None:
        super().__init__(self.COMMAND_ID, struct.pack('>I', track_index))
        self.track_index = track_index

    def __str__(self) -> str:
        return self.to_string({"track_index": str(self.track_index)})


class GetIndexedPlayingTrackTitleCommand(IndexedPlayingTrackCommand):
    COMMAND_ID = CommandId.GET_INDEXED_PLAYING_TRACK_TITLE


class GetIndexedPlayingTrackArtistNameCommand(IndexedPlayingTrackCommand):
    COMMAND_ID = CommandId.GET_INDEXED_PLAYING_TRACK_ARTIST_NAME


class GetIndexedPlayingTrackAlbumNameCommand(IndexedPlayingTrackCommand):
    COMMAND_ID = CommandId.GET_INDEXED_PLAYING_TRACK_ALBUM_NAME


# -----------------------------------------------------------------------------
class SetPlayStatusChangeNotificationCommand(Command):
    '''
    Enable or disable play status change notifications.

    The short form carries a single enable byte, the long form a 32-bit event
    mask.
    '''

    event_mask: int
    short: bool

    @classmethod
    def from_parameter(
        cls, parameter: bytes
    ) -> SetPlayStatusChangeNotificationCommand:
        if len(parameter) == 1:
            return cls(parameter[0], short=True)
        return cls(_unpack('>I', parameter)[0])

    def __init__(self, event_mask: int, short: bool = False) -> None:
        super().__init__(
            CommandId.SET_PLAY_STATUS_CHANGE_NOTIFICATION,
            bytes([event_mask]) if short else struct.pack('>I', event_mask),
        )
        self.event_mask = event_mask
        self.short = short

    def __str__(self) -> str:
        return self.to_string(
            {"event_mask": f'0x{self.event_mask:X}', "short": str(self.short)}
        )


# -----------------------------------------------------------------------------
class PlayControlCommand(Command):
    class Action(OpenIntEnum):
        TOGGLE = 0x01
        STOP = 0x02
        NEXT_TRACK = 0x03
        PREV_TRACK = 0x04
        START_FF = 0x05
        START_REW = 0x06
        END_FF_REW = 0x07
        NEXT = 0x08
        PREV = 0x09
        PLAY = 0x0A
        PAUSE = 0x0B
        NEXT_CHAPTER = 0x0C
        PREV_CHAPTER = 0x0D

    action: Action

    @classmethod
    def from_parameter(cls, parameter: bytes) -> PlayControlCommand:
        return cls(cls.Action(_unpack('>B', parameter)[0]))

    def __init__(self, action: Action) -> None:
        super().__init__(CommandId.PLAY_CONTROL, bytes([int(action)]))
        self.action = action

    def __str__(self) -> str:
        return self.to_string({"action": self.action.name})


# -----------------------------------------------------------------------------
class SetShuffleCommand(Command):
    mode: ShuffleMode
    restore_on_exit: bool

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SetShuffleCommand:
        mode = ShuffleMode(_unpack('>B', parameter)[0])
        return cls(mode, len(parameter) > 1 and parameter[1] == 1)

    def __init__(self, mode: ShuffleMode, restore_on_exit: bool = False) -> None:
        super().__init__(
            CommandId.SET_SHUFFLE, bytes([int(mode), 1 if restore_on_exit else 0])
        )
        self.mode = mode
        self.restore_on_exit = restore_on_exit

    def __str__(self) -> str:
        return self.to_string({"mode": self.mode.name})


# -----------------------------------------------------------------------------
class SetRepeatCommand(Command):
    mode: RepeatMode
    restore_on_exit: bool

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SetRepeatCommand:
        mode = RepeatMode(_unpack('>B', parameter)[0])
        return cls(mode, len(parameter) > 1 and parameter[1] == 1)

    def __init__(self, mode: RepeatMode, restore_on_exit: bool = False) -> None:
        super().__init__(
            CommandId.SET_REPEAT, bytes([int(mode), 1 if restore_on_exit else 0])
        )
        self.mode = mode
        self.restore_on_exit = restore_on_exit

    def __str__(self) -> str:
        return self.to_string({"mode": self.mode.name})


# -----------------------------------------------------------------------------
class SetCurrentPlayingTrackCommand(Command):
    track_index: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> SetCurrentPlayingTrackCommand:
        return cls(_unpack('>I', parameter)[0])

    def __init__(self, track_index: int) -> None:
        super().__init__(
            CommandId.SET_CURRENT_PLAYING_TRACK, struct.pack('>I', track_index)
        )
        self.track_index = track_index

    def __str__(self) -> str:
        return self.to_string({"track_index": str(self.track_index)})


# -----------------------------------------------------------------------------
class ResetDBSelectionHierarchyCommand(Command):
    selection: int

    @classmethod
    def from_parameter(cls, parameter: bytes) -> ResetDBSelectionHierarchyCommand:
        return cls(_unpack('>B', parameter)[0])

    def __init__(self, selection: int) -> None:
        super().__init__(CommandId.RESET_DB_SELECTION_HIERARCHY, bytes([selection]))
        self.selection = selection

    def __str__(self) -> str:
        return self.to_string({"selection": str(self.selection)})


# -----------------------------------------------------------------------------
COMMAND_CLASSES: Dict[CommandId, Type] = {
    CommandId.SET_CURRENT_PLAYING_TRACK_CHAPTER: SetCurrentPlayingTrackChapterCommand,
    CommandId.SET_AUDIOBOOK_SPEED: SetAudiobookSpeedCommand,
    CommandId.GET_INDEXED_PLAYING_TRACK_INFO: GetIndexedPlayingTrackInfoCommand,
    CommandId.SELECT_DB_RECORD: SelectDBRecordCommand,
    CommandId.GET_NUMBER_CATEGORIZED_DB_RECORDS: GetNumberCategorizedDBRecordsCommand,
    CommandId.RETRIEVE_CATEGORIZED_DATABASE_RECORDS: (
        RetrieveCategorizedDatabaseRecordsCommand
    ),
    CommandId.GET_INDEXED_PLAYING_TRACK_TITLE: GetIndexedPlayingTrackTitleCommand,
    CommandId.GET_INDEXED_PLAYING_TRACK_ARTIST_NAME: (
        GetIndexedPlayingTrackArtistNameCommand
    ),
    CommandId.GET_INDEXED_PLAYING_TRACK_ALBUM_NAME: (
        GetIndexedPlayingTrackAlbumNameCommand
    ),
    CommandId.SET_PLAY_STATUS_CHANGE_NOTIFICATION: (
        SetPlayStatusChangeNotificationCommand
    ),
    CommandId.PLAY_CONTROL: PlayControlCommand,
    CommandId.SET_SHUFFLE: SetShuffleCommand,
    CommandId.SET_REPEAT: SetRepeatCommand,
    CommandId.SET_CURRENT_PLAYING_TRACK: SetCurrentPlayingTrackCommand,
    CommandId.RESET_DB_SELECTION_HIERARCHY: ResetDBSelectionHierarchyCommand,
}


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
@dataclass
class Response:
    response_id: CommandId
    parameter: bytes

    def to_string(self, properties: Dict[str, str]) -> str:
        properties_str = ",".join(
            [f"{name}={value}" for name, value in properties.items()]
        )
        return f"Response[{self.response_id.name}]({properties_str})"

    def __bytes__(self) -> bytes:
        return self.parameter

    def __str__(self) -> str:
        return self.to_string({"parameter": self.parameter.hex()})

    def __repr__(self) -> str:
        return str(self)


# -----------------------------------------------------------------------------
class Ack(Response):
    status: AckStatus
    command_id: CommandId

    def __init__(self, status: AckStatus, command_id: CommandId) -> None:
        super().__init__(CommandId.ACK, struct.pack('>BH', int(status), command_id))
        self.status = status
        self.command_id = command_id

    def __str__(self) -> str:
        return self.to_string(
            {"status": self.status.name, "command_id": self.command_id.name}
        )


# -----------------------------------------------------------------------------
class _TextResponse(Response):
    '''A response whose whole payload is a single NUL-terminated string.'''

    RESPONSE_ID: CommandId
    text: str

    def __init__(self, text: str) -> None:
        super().__init__(self.RESPONSE_ID, string_to_bytes(text))
        self.text = text

    def __str__(self) -> str:
        return self.to_string({"text": repr(self.text)})


# -----------------------------------------------------------------------------
class ReturnCurrentPlayingTrackChapterInfo(Response):
    chapter_index: int
    chapter_count: int

    def __init__(self, chapter_index: int, chapter_count: int) -> None:
        super().__init__(
            CommandId.RETURN_CURRENT_PLAYING_TRACK_CHAPTER_INFO,
            struct.pack('>ii', chapter_index, chapter_count),
        )
        self.chapter_index = chapter_index
        self.chapter_count = chapter_count

    def __str__(self) -> str:
        return self.to_string(
            {
                "chapter_index": str(self.chapter_index),
                "chapter_count": str(self.chapter_count),
            }
        )


# -----------------------------------------------------------------------------
class ReturnCurrentPlayingTrackChapterPlayStatus(Response):
    chapter_length: int
    chapter_position: int

    def __init__(self, chapter_length: int, chapter_position: int) -> None:
        super().__init__(
            CommandId.RETURN_CURRENT_PLAYING_TRACK_CHAPTER_PLAY_STATUS,
            struct.pack('>II', chapter_length, chapter_position),
        )
        self.chapter_length = chapter_length
        self.chapter_position = chapter_position


# -----------------------------------------------------------------------------
class ReturnCurrentPlayingTrackChapterName(_TextResponse):
    RESPONSE_ID = CommandId.RETURN_CURRENT_PLAYING_TRACK_CHAPTER_NAME


# -----------------------------------------------------------------------------
class ReturnAudiobookSpeed(Response):
    speed: int

    def __init__(self, speed: int) -> None:
        super().__init__(CommandId.RETURN_AUDIOBOOK_SPEED, struct.pack('>b', speed))
        self.speed = speed

    def __str__(self) -> str:
        return self.to_string({"speed": str(self.speed)})


# -----------------------------------------------------------------------------
# Indexed track info variants
# -----------------------------------------------------------------------------
@dataclass
class TrackCaps:
    caps: int
    track_length: int
    chapter_count: int

    def __bytes__(self) -> bytes:
        return struct.pack('>IIH', self.caps, self.track_length, self.chapter_count)


@dataclass
class TrackText:
    text: str

    def __bytes__(self) -> bytes:
        return string_to_bytes(self.text)


@dataclass
class TrackArtworkCount:
    '''Artwork count, as a list of (format ID, count) pairs.'''

    counts: List[tuple] = field(default_factory=list)

    def __bytes__(self) -> bytes:
        return b''.join(
            struct.pack('>HH', format_id, count) for format_id, count in self.counts
        )


@dataclass
class TrackLongText:
    '''One packet of a multi-packet text field (lyrics, description).'''

    flags: int
    packet_index: int
    text: str

    def __bytes__(self) -> bytes:
        return struct.pack('>BH', self.flags, self.packet_index) + string_to_bytes(
            self.text
        )


# -----------------------------------------------------------------------------
class ReturnIndexedPlayingTrackInfo(Response):
    info_type: TrackInfoType
    info: object

    def __init__(self, info_type: TrackInfoType, info) -> None:
        super().__init__(
            CommandId.RETURN_INDEXED_PLAYING_TRACK_INFO,
            bytes([int(info_type)]) + bytes(info),
        )
        self.info_type = info_type
        self.info = info

    def __str__(self) -> str:
        return self.to_string(
            {"info_type": self.info_type.name, "info": str(self.info)}
        )


# -----------------------------------------------------------------------------
@dataclass
class ArtworkFormat:
    format_id: int
    pixel_format: int
    width: int
    height: int

    def __bytes__(self) -> bytes:
        return struct.pack(
            '>HBHH', self.format_id, self.pixel_format, self.width, self.height
        )


class RetArtworkFormats(Response):
    formats: List[ArtworkFormat]

    def __init__(self, formats: Sequence[ArtworkFormat] = ()) -> None:
        super().__init__(
            CommandId.RET_ARTWORK_FORMATS,
            b''.join(bytes(artwork_format) for artwork_format in formats),
        )
        self.formats = list(formats)

    def __str__(self) -> str:
        return self.to_string({"formats": str(self.formats)})


# -----------------------------------------------------------------------------
class ReturnNumberCategorizedDBRecords(Response):
    record_count: int

    def __init__(self, record_count: int) -> None:
        super().__init__(
            CommandId.RETURN_NUMBER_CATEGORIZED_DB_RECORDS,
            struct.pack('>I', record_count),
        )
        self.record_count = record_count

    def __str__(self) -> str:
        return self.to_string({"record_count": str(self.record_count)})


# -----------------------------------------------------------------------------
class ReturnCategorizedDatabaseRecord(Response):
    '''
    A single database record: its index and a fixed-width text field.

    The text is encoded into CATEGORIZED_RECORD_TEXT_SIZE bytes, truncated or
    NUL-padded as needed.
    '''

    record_index: int
    record: bytes

    def __init__(self, record_index: int = 0, text: str = '') -> None:
        self.record = (
            fixed_width_string(text, CATEGORIZED_RECORD_TEXT_SIZE)
            if text
            else bytes(CATEGORIZED_RECORD_TEXT_SIZE)
        )
        super().__init__(
            CommandId.RETURN_CATEGORIZED_DATABASE_RECORD,
            struct.pack('>I', record_index) + self.record,
        )
        self.record_index = record_index

    @property
    def text(self) -> str:
        return bytes_to_string(self.record)

    def __str__(self) -> str:
        return self.to_string(
            {"record_index": str(self.record_index), "text": repr(self.text)}
        )


# -----------------------------------------------------------------------------
class ReturnPlayStatus(Response):
    '''
    Play status of the current track.

    Only the length, position and state go on the wire; the track index is
    kept for callers that track the playing queue position.
    '''

    track_length: int
    track_position: int
    state: PlayerState
    track_index: int

    def __init__(
        self,
        track_length: int,
        track_position: int,
        state: PlayerState,
        track_index: int = 0,
    ) -> None:
        super().__init__(
            CommandId.RETURN_PLAY_STATUS,
            struct.pack('>IIB', track_length, track_position, int(state)),
        )
        self.track_length = track_length
        self.track_position = track_position
        self.state = state
        self.track_index = track_index

    def __str__(self) -> str:
        return self.to_string(
            {
                "state": self.state.name,
                "track_index": str(self.track_index),
                "track_length": str(self.track_length),
                "track_position": str(self.track_position),
            }
        )


# -----------------------------------------------------------------------------
class ReturnCurrentPlayingTrackIndex(Response):
    track_index: int

    def __init__(self, track_index: int) -> None:
        super().__init__(
            CommandId.RETURN_CURRENT_PLAYING_TRACK_INDEX,
            struct.pack('>i', track_index),
        )
        self.track_index = track_index

    def __str__(self) -> str:
        return self.to_string({"track_index": str(self.track_index)})


# -----------------------------------------------------------------------------
class ReturnIndexedPlayingTrackTitle(_TextResponse):
    RESPONSE_ID = CommandId.RETURN_INDEXED_PLAYING_TRACK_TITLE


class ReturnIndexedPlayingTrackArtistName(_TextResponse):
    RESPONSE_ID = CommandId.RETURN_INDEXED_PLAYING_TRACK_ARTIST_NAME


class ReturnIndexedPlayingTrackAlbumName(_TextResponse):
    RESPONSE_ID = CommandId.RETURN_INDEXED_PLAYING_TRACK_ALBUM_NAME


# -----------------------------------------------------------------------------
class RetTrackArtworkTimes(Response):
    times: List[int]

    def __init__(self, times: Sequence[int] = ()) -> None:
        super().__init__(
            CommandId.RET_TRACK_ARTWORK_TIMES,
            b''.join(struct.pack('>I', time) for time in times),
        )
        self.times = list(times)


# -----------------------------------------------------------------------------
class ReturnShuffle(Response):
    mode: ShuffleMode

    def __init__(self, mode: ShuffleMode) -> None:
        super().__init__(CommandId.RETURN_SHUFFLE, bytes([int(mode)]))
        self.mode = mode

    def __str__(self) -> str:
        return self.to_string({"mode": self.mode.name})


class ReturnRepeat(Response):
    mode: RepeatMode

    def __init__(self, mode: RepeatMode) -> None:
        super().__init__(CommandId.RETURN_REPEAT, bytes([int(mode)]))
        self.mode = mode

    def __str__(self) -> str:
        return self.to_string({"mode": self.mode.name})


# -----------------------------------------------------------------------------
class _DisplayImageLimits(Response):
    RESPONSE_ID: CommandId
    max_width: int
    max_height: int
    pixel_format: int

    def __init__(self, max_width: int, max_height: int, pixel_format: int) -> None:
        super().__init__(
            self.RESPONSE_ID,
            struct.pack('>HHB', max_width, max_height, pixel_format),
        )
        self.max_width = max_width
        self.max_height = max_height
        self.pixel_format = pixel_format

    def __str__(self) -> str:
        return self.to_string(
            {
                "max_width": str(self.max_width),
                "max_height": str(self.max_height),
                "pixel_format": f'0x{self.pixel_format:02X}',
            }
        )


class ReturnMonoDisplayImageLimits(_DisplayImageLimits):
    RESPONSE_ID = CommandId.RETURN_MONO_DISPLAY_IMAGE_LIMITS


class ReturnColorDisplayImageLimits(_DisplayImageLimits):
    RESPONSE_ID = CommandId.RETURN_COLOR_DISPLAY_IMAGE_LIMITS


# -----------------------------------------------------------------------------
class ReturnNumPlayingTracks(Response):
    num_tracks: int

    def __init__(self, num_tracks: int) -> None:
        super().__init__(
            CommandId.RETURN_NUM_PLAYING_TRACKS, struct.pack('>I', num_tracks)
        )
        self.num_tracks = num_tracks

    def __str__(self) -> str:
        return self.to_string({"num_tracks": str(self.num_tracks)})

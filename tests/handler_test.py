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
import struct
from unittest.mock import MagicMock

import pytest

from extremote import lingo
from extremote.config import ExtRemoteConfiguration
from extremote.core import BackendError
from extremote.handler import ExtRemote
from extremote.lingo import AckStatus, CommandId, PlayControlCommand, TrackInfoType

from . import test_utils


# -----------------------------------------------------------------------------
@pytest.fixture
def backend():
    return test_utils.FakeBackend()


@pytest.fixture
def recorder():
    return test_utils.ReplyRecorder()


@pytest.fixture
def remote(backend, recorder):
    return ExtRemote(backend, recorder)


async def handle_one(remote, recorder, command):
    response = await remote.handle(command)
    assert len(recorder.replies) == 1
    assert recorder.replies[0].response is response
    assert recorder.replies[0].command is command
    return response


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'command,expected',
    [
        (
            lingo.GenericCommand(CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_INFO),
            lingo.ReturnCurrentPlayingTrackChapterInfo(
                chapter_index=-1, chapter_count=0
            ),
        ),
        (
            lingo.GenericCommand(
                CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_PLAY_STATUS
            ),
            lingo.ReturnCurrentPlayingTrackChapterPlayStatus(0, 0),
        ),
        (
            lingo.GenericCommand(CommandId.GET_CURRENT_PLAYING_TRACK_CHAPTER_NAME),
            lingo.ReturnCurrentPlayingTrackChapterName('chapter'),
        ),
        (
            lingo.GenericCommand(CommandId.GET_AUDIOBOOK_SPEED),
            lingo.ReturnAudiobookSpeed(0),
        ),
        (
            lingo.GenericCommand(CommandId.GET_ARTWORK_FORMATS),
            lingo.RetArtworkFormats(),
        ),
        (
            lingo.GenericCommand(CommandId.GET_TRACK_ARTWORK_TIMES),
            lingo.RetTrackArtworkTimes(),
        ),
        (
            lingo.GenericCommand(CommandId.GET_SHUFFLE),
            lingo.ReturnShuffle(lingo.ShuffleMode.OFF),
        ),
        (
            lingo.GenericCommand(CommandId.GET_REPEAT),
            lingo.ReturnRepeat(lingo.RepeatMode.OFF),
        ),
        (
            lingo.GenericCommand(CommandId.GET_MONO_DISPLAY_IMAGE_LIMITS),
            lingo.ReturnMonoDisplayImageLimits(640, 960, 0x01),
        ),
        (
            lingo.GenericCommand(CommandId.GET_COLOR_DISPLAY_IMAGE_LIMITS),
            lingo.ReturnColorDisplayImageLimits(640, 960, 0x01),
        ),
        (
            lingo.GenericCommand(CommandId.GET_TRACK_ARTWORK_DATA),
            lingo.Ack(AckStatus.FAILED, CommandId.GET_TRACK_ARTWORK_DATA),
        ),
    ],
)
async def test_static_responses(remote, recorder, backend, command, expected):
    assert await handle_one(remote, recorder, command) == expected
    assert backend.calls == []


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'command',
    [
        lingo.SetCurrentPlayingTrackChapterCommand(2),
        lingo.SetAudiobookSpeedCommand(-1),
        lingo.GenericCommand(CommandId.RESET_DB_SELECTION),
        lingo.SelectDBRecordCommand(lingo.DbCategory.TRACK, 3),
        lingo.SetPlayStatusChangeNotificationCommand(1, short=True),
        lingo.SetPlayStatusChangeNotificationCommand(0x0000_0F7F),
        lingo.GenericCommand(CommandId.PLAY_CURRENT_SELECTION),
        lingo.SetShuffleCommand(lingo.ShuffleMode.TRACKS),
        lingo.SetRepeatCommand(lingo.RepeatMode.ALL_TRACKS),
        lingo.GenericCommand(CommandId.SET_DISPLAY_IMAGE, bytes(4)),
    ],
)
async def test_acknowledged_commands(remote, recorder, backend, command):
    response = await handle_one(remote, recorder, command)
    assert response == lingo.Ack(AckStatus.SUCCESS, command.command_id)
    assert backend.calls == []


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'command',
    [
        lingo.SetCurrentPlayingTrackCommand(3),
        lingo.GenericCommand(CommandId.SELECT_SORT_DB_RECORD, bytes(6)),
        lingo.GenericCommand(CommandId.GET_DB_ITUNES_INFO),
        lingo.GenericCommand(CommandId.GET_UID_TRACK_INFO),
        lingo.GenericCommand(CommandId.GET_DB_TRACK_INFO),
        lingo.GenericCommand(CommandId.GET_PB_TRACK_INFO),
        lingo.GenericCommand(CommandId(0x7F)),
        lingo.GenericCommand(CommandId.RETURN_PLAY_STATUS),
    ],
)
async def test_commands_without_reply(remote, recorder, command):
    assert await remote.handle(command) is None
    assert recorder.replies == []


# -----------------------------------------------------------------------------
async def test_number_categorized_db_records(remote, recorder):
    await remote.handle(
        lingo.GetNumberCategorizedDBRecordsCommand(lingo.DbCategory.TRACK)
    )
    await remote.handle(
        lingo.GetNumberCategorizedDBRecordsCommand(lingo.DbCategory.ALBUM)
    )
    assert recorder.responses == [
        lingo.ReturnNumberCategorizedDBRecords(10),
        lingo.ReturnNumberCategorizedDBRecords(0),
    ]


# -----------------------------------------------------------------------------
async def test_retrieve_track_record(remote, recorder):
    response = await handle_one(
        remote,
        recorder,
        lingo.RetrieveCategorizedDatabaseRecordsCommand(lingo.DbCategory.TRACK, 7),
    )
    assert isinstance(response, lingo.ReturnCategorizedDatabaseRecord)
    assert response.record_index == 7
    assert response.text == 'Track 7'
    assert response.record == b'Track 7' + bytes(9)
    assert bytes(response) == struct.pack('>I', 7) + b'Track 7' + bytes(9)


async def test_retrieve_track_record_truncated(remote):
    response = await remote.handle(
        lingo.RetrieveCategorizedDatabaseRecordsCommand(
            lingo.DbCategory.TRACK, 4294967295
        )
    )
    assert response.record == b'Track 4294967295'
    assert response.text == 'Track 4294967295'


async def test_retrieve_other_record(remote):
    response = await remote.handle(
        lingo.RetrieveCategorizedDatabaseRecordsCommand(lingo.DbCategory.ARTIST, 7)
    )
    assert response == lingo.ReturnCategorizedDatabaseRecord()
    assert response.record_index == 0
    assert response.record == bytes(16)


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'status,expected',
    [
        ('playing', lingo.PlayerState.PLAYING),
        ('paused', lingo.PlayerState.PAUSED),
        ('stopped', lingo.PlayerState.PAUSED),
        ('forward-seek', lingo.PlayerState.PAUSED),
    ],
)
async def test_play_status(remote, recorder, backend, status, expected):
    backend.status = status
    response = await handle_one(
        remote, recorder, lingo.GenericCommand(CommandId.GET_PLAY_STATUS)
    )
    assert isinstance(response, lingo.ReturnPlayStatus)
    assert response.state == expected
    assert response.track_index == 0
    assert response.track_length == 300000
    assert response.track_position == 20000


async def test_play_status_fetch_error(remote, backend):
    backend.errors['get_status'] = BackendError('no status')
    response = await remote.handle(lingo.GenericCommand(CommandId.GET_PLAY_STATUS))
    assert response.state == lingo.PlayerState.STOPPED


async def test_play_status_without_player(remote, backend):
    backend.player = None
    response = await remote.handle(lingo.GenericCommand(CommandId.GET_PLAY_STATUS))
    assert response.state == lingo.PlayerState.STOPPED


async def test_play_status_timeout(backend, recorder):
    backend.status = 'playing'
    backend.delays['get_status'] = 1.0
    remote = ExtRemote(
        backend, recorder, ExtRemoteConfiguration(backend_timeout=0.01)
    )
    response = await remote.handle(lingo.GenericCommand(CommandId.GET_PLAY_STATUS))
    assert response.state == lingo.PlayerState.STOPPED


# -----------------------------------------------------------------------------
async def test_track_index_and_count_with_player(remote, recorder):
    await remote.handle(
        lingo.GenericCommand(CommandId.GET_CURRENT_PLAYING_TRACK_INDEX)
    )
    await remote.handle(lingo.GenericCommand(CommandId.GET_NUM_PLAYING_TRACKS))
    assert recorder.responses == [
        lingo.ReturnCurrentPlayingTrackIndex(0),
        lingo.ReturnNumPlayingTracks(10),
    ]


async def test_track_index_and_count_without_player(remote, recorder, backend):
    backend.player = None
    await remote.handle(
        lingo.GenericCommand(CommandId.GET_CURRENT_PLAYING_TRACK_INDEX)
    )
    await remote.handle(lingo.GenericCommand(CommandId.GET_NUM_PLAYING_TRACKS))
    assert recorder.responses == [
        lingo.ReturnCurrentPlayingTrackIndex(-1),
        lingo.ReturnNumPlayingTracks(0),
    ]


async def test_enumeration_failure_means_no_player(remote, recorder, backend):
    backend.errors['find_player'] = RuntimeError('bus is gone')
    await remote.handle(
        lingo.GenericCommand(CommandId.GET_CURRENT_PLAYING_TRACK_INDEX)
    )
    assert recorder.responses == [lingo.ReturnCurrentPlayingTrackIndex(-1)]


async def test_player_resolved_per_command(remote, recorder, backend):
    command = lingo.GenericCommand(CommandId.GET_NUM_PLAYING_TRACKS)
    await remote.handle(command)
    backend.player = None
    await remote.handle(command)
    backend.player = test_utils.PLAYER_PATH
    await remote.handle(command)
    assert [response.num_tracks for response in recorder.responses] == [10, 0, 10]


# -----------------------------------------------------------------------------
async def test_track_metadata(remote, recorder):
    await remote.handle(lingo.GetIndexedPlayingTrackTitleCommand(0))
    await remote.handle(lingo.GetIndexedPlayingTrackArtistNameCommand(0))
    await remote.handle(lingo.GetIndexedPlayingTrackAlbumNameCommand(0))
    assert recorder.responses == [
        lingo.ReturnIndexedPlayingTrackTitle('Title'),
        lingo.ReturnIndexedPlayingTrackArtistName('Artist'),
        lingo.ReturnIndexedPlayingTrackAlbumName('Album'),
    ]


async def test_track_metadata_field_failure_is_isolated(backend, recorder):
    backend.track = {'title': 'Song', 'album': 'Record'}
    remote = ExtRemote(backend, recorder)
    errors = []
    remote.on('backend_error', lambda command, error: errors.append(error))

    await remote.handle(lingo.GetIndexedPlayingTrackTitleCommand(0))
    await remote.handle(lingo.GetIndexedPlayingTrackArtistNameCommand(0))
    await remote.handle(lingo.GetIndexedPlayingTrackAlbumNameCommand(0))

    assert [response.text for response in recorder.responses] == [
        'Song',
        'could not get track artist',
        'Record',
    ]
    assert len(errors) == 1


async def test_track_metadata_configured_error_text(backend, recorder):
    backend.track = {'title': 'Song'}
    remote = ExtRemote(
        backend, recorder, ExtRemoteConfiguration(metadata_error_text='Unknown')
    )
    await remote.handle(lingo.GetIndexedPlayingTrackTitleCommand(0))
    await remote.handle(lingo.GetIndexedPlayingTrackArtistNameCommand(0))
    assert [response.text for response in recorder.responses] == ['Song', 'Unknown']


async def test_track_metadata_error_text_is_surfaced(remote, recorder, backend):
    backend.errors['get_track'] = BackendError('could not get track from dbus: x')
    await remote.handle(lingo.GetIndexedPlayingTrackTitleCommand(0))
    backend.errors['get_track'] = RuntimeError('dbus down')
    await remote.handle(lingo.GetIndexedPlayingTrackArtistNameCommand(0))
    backend.player = None
    await remote.handle(lingo.GetIndexedPlayingTrackAlbumNameCommand(0))
    assert [response.text for response in recorder.responses] == [
        'could not get track from dbus: x',
        'could not get track from backend: dbus down',
        'player path is empty',
    ]


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'info_type,expected',
    [
        (TrackInfoType.CAPS, lingo.TrackCaps(0, 300000, 0)),
        (
            TrackInfoType.ARTIST_NAME,
            lingo.TrackText('GetIndexedPlayingTrackInfo ArtistName'),
        ),
        (TrackInfoType.ALBUM, lingo.TrackText('GetIndexedPlayingTrackInfo Album')),
        (TrackInfoType.GENRE, lingo.TrackText('GetIndexedPlayingTrackInfo Genre')),
        (TrackInfoType.TITLE, lingo.TrackText('GetIndexedPlayingTrackInfo Title')),
        (
            TrackInfoType.COMPOSER,
            lingo.TrackText('GetIndexedPlayingTrackInfo Composer'),
        ),
        (TrackInfoType.ARTWORK_COUNT, lingo.TrackArtworkCount()),
        (TrackInfoType.LYRICS, lingo.TrackLongText(0, 0, '')),
        (TrackInfoType.DESCRIPTION, lingo.TrackLongText(0, 0, '')),
        (TrackInfoType.PODCAST_NAME, lingo.TrackText('WAT')),
        (TrackInfoType(0x42), lingo.TrackText('WAT')),
    ],
)
async def test_indexed_track_info(remote, recorder, info_type, expected):
    response = await handle_one(
        remote, recorder, lingo.GetIndexedPlayingTrackInfoCommand(info_type, 0, 0)
    )
    assert isinstance(response, lingo.ReturnIndexedPlayingTrackInfo)
    assert response.info_type == info_type
    assert response.info == expected
    assert bytes(response) == bytes([info_type]) + bytes(expected)


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'action,call',
    [
        (PlayControlCommand.Action.PLAY, 'play'),
        (PlayControlCommand.Action.PAUSE, 'pause'),
        (PlayControlCommand.Action.NEXT, 'next'),
        (PlayControlCommand.Action.NEXT_TRACK, 'next'),
        (PlayControlCommand.Action.NEXT_CHAPTER, 'next'),
        (PlayControlCommand.Action.PREV, 'previous'),
        (PlayControlCommand.Action.PREV_TRACK, 'previous'),
        (PlayControlCommand.Action.PREV_CHAPTER, 'previous'),
    ],
)
async def test_play_control(remote, recorder, backend, action, call):
    response = await handle_one(remote, recorder, PlayControlCommand(action))
    assert response == lingo.Ack(AckStatus.SUCCESS, CommandId.PLAY_CONTROL)
    assert backend.calls == [call]


async def test_play_control_without_player(remote, recorder, backend):
    backend.player = None
    response = await handle_one(
        remote, recorder, PlayControlCommand(PlayControlCommand.Action.NEXT)
    )
    assert response == lingo.Ack(AckStatus.SUCCESS, CommandId.PLAY_CONTROL)
    assert backend.calls == []


async def test_play_control_backend_failure(remote, recorder, backend):
    backend.errors['play'] = RuntimeError('not allowed')
    errors = []
    remote.on('backend_error', lambda command, error: errors.append(error))

    response = await handle_one(
        remote, recorder, PlayControlCommand(PlayControlCommand.Action.PLAY)
    )
    assert response == lingo.Ack(AckStatus.SUCCESS, CommandId.PLAY_CONTROL)
    assert backend.calls == ['play']
    assert len(errors) == 1


@pytest.mark.parametrize(
    'status,call',
    [
        ('playing', 'pause'),
        ('paused', 'play'),
        ('stopped', 'play'),
        ('error', 'play'),
    ],
)
async def test_toggle(remote, recorder, backend, status, call):
    backend.status = status
    response = await handle_one(
        remote, recorder, PlayControlCommand(PlayControlCommand.Action.TOGGLE)
    )
    assert response == lingo.Ack(AckStatus.SUCCESS, CommandId.PLAY_CONTROL)
    assert backend.calls == [call]


async def test_toggle_status_failure(remote, recorder, backend):
    backend.status = 'playing'
    backend.errors['get_status'] = BackendError('no status')
    await handle_one(
        remote, recorder, PlayControlCommand(PlayControlCommand.Action.TOGGLE)
    )
    assert backend.calls == ['play']


async def test_toggle_without_player(remote, recorder, backend):
    backend.player = None
    command = PlayControlCommand(PlayControlCommand.Action.TOGGLE)
    assert await remote.handle(command) is None
    assert recorder.replies == []
    assert backend.calls == []


async def test_stop(remote, recorder, backend):
    command = PlayControlCommand(PlayControlCommand.Action.STOP)
    response = await handle_one(remote, recorder, command)
    assert response == lingo.Ack(AckStatus.SUCCESS, CommandId.PLAY_CONTROL)
    assert backend.calls == []

    backend.player = None
    recorder.replies.clear()
    assert await remote.handle(command) is None
    assert recorder.replies == []


# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    'selection,status', [(1, AckStatus.SUCCESS), (2, AckStatus.FAILED)]
)
async def test_reset_db_selection_hierarchy(remote, recorder, selection, status):
    response = await handle_one(
        remote, recorder, lingo.ResetDBSelectionHierarchyCommand(selection)
    )
    assert response == lingo.Ack(status, CommandId.RESET_DB_SELECTION_HIERARCHY)


# -----------------------------------------------------------------------------
async def test_handler_exception_is_contained(remote, recorder):
    async def broken(command, player):
        raise RuntimeError('bug')

    remote.handlers[CommandId.GET_SHUFFLE] = broken
    assert await remote.handle(lingo.GenericCommand(CommandId.GET_SHUFFLE)) is None
    assert recorder.replies == []

    # The next command is handled normally.
    assert await remote.handle(lingo.GenericCommand(CommandId.GET_REPEAT))
    assert len(recorder.replies) == 1


# -----------------------------------------------------------------------------
async def test_handle_bytes(remote, recorder):
    response = await remote.handle_bytes(
        0x001A, struct.pack('>BII', 0x05, 7, 1), transaction_id=12
    )
    assert response.text == 'Track 7'
    assert recorder.replies[0].transaction_id == 12


async def test_handle_bytes_truncated(remote, recorder):
    assert await remote.handle_bytes(0x0029, b'') is None
    assert recorder.replies == []


# -----------------------------------------------------------------------------
async def test_response_event(remote):
    listener = MagicMock()
    remote.on('response', listener)
    await remote.handle(lingo.GenericCommand(CommandId.GET_SHUFFLE))
    await remote.handle(lingo.GenericCommand(CommandId.SELECT_SORT_DB_RECORD))
    assert listener.call_count == 1
    assert listener.call_args[0][0].response == lingo.ReturnShuffle(
        lingo.ShuffleMode.OFF
    )

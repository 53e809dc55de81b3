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
import asyncio
from typing import List, Optional

import click
from colors import color

import extremote.logging
from extremote import lingo
from extremote.backend import Player
from extremote.bluez import DEFAULT_DBUS_TIMEOUT, BluezMediaBackend
from extremote.config import ExtRemoteConfiguration
from extremote.handler import ExtRemote, Reply


# -----------------------------------------------------------------------------
QUERY_COMMANDS: List[lingo.Command] = [
    lingo.GenericCommand(lingo.CommandId.GET_PLAY_STATUS),
    lingo.GenericCommand(lingo.CommandId.GET_CURRENT_PLAYING_TRACK_INDEX),
    lingo.GenericCommand(lingo.CommandId.GET_NUM_PLAYING_TRACKS),
    lingo.GetIndexedPlayingTrackTitleCommand(0),
    lingo.GetIndexedPlayingTrackArtistNameCommand(0),
    lingo.GetIndexedPlayingTrackAlbumNameCommand(0),
]


# -----------------------------------------------------------------------------
def print_reply(reply: Reply) -> None:
    print(color(f'<<< {reply.command}', 'cyan'))
    print(color(f'>>> {reply.response}', 'green'))
    print(color(f'    {bytes(reply.response).hex()}', 'white'))


# -----------------------------------------------------------------------------
async def run(config: ExtRemoteConfiguration, action: Optional[str]) -> None:
    backend = BluezMediaBackend(dbus_timeout=config.backend_timeout or DEFAULT_DBUS_TIMEOUT)

    player = await Player.resolve(backend, config.backend_timeout)
    if player.active:
        print(color('### Active player:', 'yellow'), player.handle)
        state = await player.get_playback_state()
        print(color('### Playback state:', 'yellow'), state.name)
    else:
        print(color('### No active player', 'red'))

    remote = ExtRemote(backend, print_reply, config)

    @remote.on('backend_error')
    def on_backend_error(command, error):
        print(color(f'!!! {command.command_id.name}: {error}', 'red'))

    for command in QUERY_COMMANDS:
        await remote.handle(command)

    if action is not None:
        command = lingo.PlayControlCommand(
            lingo.PlayControlCommand.Action[action.upper()]
        )
        if await remote.handle(command) is None:
            print(color(f'--- {action} was not answered', 'yellow'))


# -----------------------------------------------------------------------------
@click.command()
@click.option(
    '--config',
    'config_file',
    help='Configuration file (JSON)',
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    '--action',
    type=click.Choice(
        [action.name.lower() for action in lingo.PlayControlCommand.Action],
        case_sensitive=False,
    ),
    help='Send a PlayControl command with this action after the queries',
)
@click.option(
    '--toggle', is_flag=True, default=False, help='Shortcut for --action toggle'
)
def main(config_file, action, toggle):
    """
    Query the active BlueZ media player through the Extended Interface command
    handler, and optionally drive it.
    """
    extremote.logging.setup_basic_logging()
    config = (
        ExtRemoteConfiguration.from_file(config_file)
        if config_file
        else ExtRemoteConfiguration()
    )
    if toggle:
        action = 'toggle'
    asyncio.run(run(config, action))


# -----------------------------------------------------------------------------
if __name__ == '__main__':
    main()

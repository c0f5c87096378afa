#!/usr/bin/env python3
''' Follow an MPRIS2 player over the session bus

    * VLC: out of the box
    * Mixxx: needs MPRIS2 support enabled

    All addressing goes through mprisbus.names and every numeric
    property or signal argument goes through mprisbus.numeric.
'''

import asyncio
import collections
import contextlib
import dataclasses
import logging
import pathlib
import sys
import urllib.parse
from typing import Any

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus
from dbus_fast.errors import DBusError
from dbus_fast.unpack import unpack_variants
from multidict import CIMultiDict

import mprisbus.bootstrap
import mprisbus.config
import mprisbus.names
import mprisbus.numeric


async def call_bus(  # pylint: disable=too-many-arguments
        bus: MessageBus,
        name: mprisbus.names.DBusName,
        destination: str,
        path: str,
        signature: str = '',
        body: list[Any] | None = None) -> Message:
    ''' call a method addressed by a DBusName, raising DBusError on error replies '''
    reply = await bus.call(
        Message(destination=destination,
                path=path,
                interface=name.interface,
                member=name.member,
                signature=signature,
                body=body or []))
    if reply is None:
        raise DBusError('org.freedesktop.DBus.Error.NoReply', f'No reply to {name}')
    if reply.message_type == MessageType.ERROR:
        text = reply.body[0] if reply.body else ''
        raise DBusError(reply.error_name, text)
    return reply


async def call_daemon(bus: MessageBus,
                      name: mprisbus.names.DBusName,
                      *args: str) -> Message:
    ''' call a method on the bus daemon itself '''
    return await call_bus(bus,
                          name,
                          mprisbus.names.DBUS_INTERFACE,
                          mprisbus.names.DBUS_PATH,
                          signature='s' * len(args),
                          body=list(args))


@dataclasses.dataclass
class PlayerState:
    ''' last known state of the player '''

    status: str = 'Stopped'
    position: int = 0
    rate: float = 1.0
    shuffle: bool = False
    metadata: CIMultiDict = dataclasses.field(default_factory=CIMultiDict)

    @property
    def length(self) -> int:
        ''' track length in microseconds '''
        return mprisbus.numeric.get_long(self.metadata.get('mpris:length'))

    def trackinfo(self) -> dict[str, Any]:
        ''' shape the metadata into a track '''
        builddata: dict[str, Any] = {'artist': None, 'title': None, 'filename': None}

        if artists := self.metadata.get('xesam:artist'):
            if isinstance(artists, str):
                artists = [artists]
            artists = collections.deque(artists)
            artist = str(artists.popleft())
            while len(artists) > 0:
                artist = f'{artist}/{str(artists.popleft())}'
            if artist:
                builddata['artist'] = artist

        title = self.metadata.get('xesam:title')
        if title:
            title = str(title)
            builddata['title'] = title

        if self.metadata.get('xesam:album'):
            builddata['album'] = str(self.metadata.get('xesam:album'))

        if length := self.length:
            builddata['duration'] = length // 1000000

        if tracknumber := self.metadata.get('xesam:trackNumber'):
            with contextlib.suppress(ValueError, TypeError):
                builddata['track'] = int(tracknumber)

        filename = self.metadata.get('xesam:url')
        if filename and 'file://' in filename:
            filename = urllib.parse.unquote(filename)
            builddata['filename'] = filename.replace('file://', '')

        # some MPRIS2 implementations will give the filename as the title
        # if it doesn't have one
        if title == filename or title and pathlib.Path(title).exists():
            builddata['title'] = None

        return builddata


class MPRIS2Handler:  # pylint: disable=too-many-instance-attributes
    ''' Track a single MPRIS2 player '''

    def __init__(self, service: str | None = None, bus: MessageBus | None = None):
        self.service = service
        self.busname: str | None = None
        self.owner: str | None = None
        self.bus = bus
        self.state = PlayerState()
        self.matches: list[str] = []
        self.listening = False
        self.rematch_task: asyncio.Task | None = None

    async def connect(self) -> MessageBus:
        ''' open the session bus if needed '''
        if not self.bus:
            self.bus = await MessageBus(bus_type=BusType.SESSION).connect()
        return self.bus

    async def get_mpris2_services(self) -> list[str]:
        ''' list of all MPRIS2 services '''
        try:
            await self.connect()
            reply = await call_daemon(self.bus, mprisbus.names.METHOD_LIST_NAMES)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logging.error('Error listing MPRIS2 services: %s', error)
            return []

        prefix = f'{mprisbus.names.MPRIS2_BASE}.'
        return [name.replace(prefix, '', 1) for name in reply.body[0] if name.startswith(prefix)]

    async def find_service(self) -> bool:
        ''' try to find our service '''
        services = await self.get_mpris2_services()
        for reglist in services:
            if self.service in reglist:
                self.service = reglist
                return True
        return False

    def _busname(self) -> str:
        prefix = f'{mprisbus.names.MPRIS2_BASE}.'
        if self.service.startswith(prefix):
            return self.service
        return f'{prefix}{self.service}'

    async def resetservice(self, service: str | None = None) -> bool:
        ''' point at a (possibly new) service and resolve its owner '''
        self.service = service
        self.busname = None
        self.owner = None
        self.state = PlayerState()

        if not service:
            return False

        if '.' not in service and not await self.find_service():
            logging.error('%s is not a known MPRIS2 service.', service)
            return False

        busname = self._busname()
        try:
            await self.connect()
            reply = await call_daemon(self.bus, mprisbus.names.METHOD_NAME_HAS_OWNER, busname)
            if not reply.body[0]:
                logging.error('%s has no owner on the bus', busname)
                return False
            reply = await call_daemon(self.bus, mprisbus.names.METHOD_GET_NAME_OWNER, busname)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logging.error('D-Bus connection error: %s', error)
            return False

        self.busname = busname
        self.owner = reply.body[0]
        logging.debug('%s is owned by %s', self.busname, self.owner)
        return True

    @staticmethod
    def _owner_rules(owner: str) -> list[str]:
        return [
            mprisbus.names.SIGNAL_SEEKED.build_match_string(owner),
            mprisbus.names.SIGNAL_PROP_CHANGED.build_match_string(
                owner, mprisbus.names.MPRIS_INTERFACE),
        ]

    def _rules(self) -> list[str]:
        return self._owner_rules(self.owner) + [
            mprisbus.names.SIGNAL_NAME_OWNER_CHANGED.build_match_string(
                mprisbus.names.DBUS_INTERFACE, self.busname),
        ]

    async def subscribe(self) -> bool:
        ''' ask the bus daemon for the player's signals '''
        if not self.bus or not self.owner:
            return False

        if self.matches:
            await self.unsubscribe()

        if not self.listening:
            self.bus.add_message_handler(self.handle_message)
            self.listening = True

        await self._add_matches(self._rules())
        return bool(self.matches)

    async def _add_matches(self, rules: list[str]) -> None:
        for rule in rules:
            try:
                await call_daemon(self.bus, mprisbus.names.METHOD_ADD_MATCH, rule)
            except DBusError as error:
                logging.error('Match rule %s rejected: %s', rule, error)
                continue
            logging.debug('Added match %s', rule)
            self.matches.append(rule)

    async def rematch(self, oldowner: str) -> None:
        ''' move the owner-bound match rules from oldowner to the current owner '''
        if not self.bus:
            return
        for rule in self._owner_rules(oldowner):
            if rule not in self.matches:
                continue
            self.matches.remove(rule)
            try:
                await call_daemon(self.bus, mprisbus.names.METHOD_REMOVE_MATCH, rule)
            except DBusError as error:
                logging.debug('RemoveMatch %s failed: %s', rule, error)
        if self.owner:
            await self._add_matches(self._owner_rules(self.owner))

    def _rematch_done(self, task: asyncio.Task) -> None:
        if self.rematch_task is task:
            self.rematch_task = None
        if task.cancelled():
            return
        if error := task.exception():
            logging.error('Could not move match rules to the new owner: %s', error)

    async def unsubscribe(self) -> None:
        ''' drop any match rules we added '''
        if self.listening and self.bus:
            self.bus.remove_message_handler(self.handle_message)
        self.listening = False

        matches = self.matches
        self.matches = []
        if not self.bus:
            return
        for rule in matches:
            try:
                await call_daemon(self.bus, mprisbus.names.METHOD_REMOVE_MATCH, rule)
            except DBusError as error:
                logging.debug('RemoveMatch %s failed: %s', rule, error)

    async def refresh(self) -> PlayerState:
        ''' read all player properties '''
        reply = await call_bus(self.bus,
                               mprisbus.names.METHOD_PROPERTIES_GET_ALL,
                               self.busname,
                               mprisbus.names.MPRIS_PATH,
                               signature='s',
                               body=[mprisbus.names.MPRIS_INTERFACE])
        self.apply_properties(reply.body[0])
        return self.state

    def apply_properties(self, props: dict[str, Any]) -> None:
        ''' fold a{sv} player properties into the state '''
        if mprisbus.names.MPRIS_STATUS.member in props:
            self.state.status = str(unpack_variants(props[mprisbus.names.MPRIS_STATUS.member]))
        if mprisbus.names.MPRIS_POSITION.member in props:
            self.state.position = mprisbus.numeric.get_long(
                props[mprisbus.names.MPRIS_POSITION.member])
        if mprisbus.names.MPRIS_RATE.member in props:
            self.state.rate = mprisbus.numeric.get_double(props[mprisbus.names.MPRIS_RATE.member])
        if mprisbus.names.MPRIS_SHUFFLE.member in props:
            self.state.shuffle = bool(unpack_variants(props[mprisbus.names.MPRIS_SHUFFLE.member]))
        if mprisbus.names.MPRIS_METADATA.member in props:
            # Convert to case-insensitive dict for robust field lookups
            self.state.metadata = CIMultiDict(
                unpack_variants(props[mprisbus.names.MPRIS_METADATA.member]) or {})

    def handle_message(self, msg: Message) -> None:
        ''' message handler for signals matched by our rules '''
        if msg.message_type != MessageType.SIGNAL:
            return

        name = mprisbus.names.DBusName(msg.interface, msg.member)
        if name == mprisbus.names.SIGNAL_NAME_OWNER_CHANGED:
            # only the bus daemon may announce ownership
            if msg.sender == mprisbus.names.DBUS_INTERFACE:
                self._owner_changed(msg.body)
            return

        if not self.owner or msg.sender != self.owner:
            return

        if name == mprisbus.names.SIGNAL_SEEKED:
            self.state.position = mprisbus.numeric.get_long(msg.body[0] if msg.body else None)
        elif name == mprisbus.names.SIGNAL_PROP_CHANGED:
            if len(msg.body) > 1 and msg.body[0] == mprisbus.names.MPRIS_INTERFACE:
                self.apply_properties(msg.body[1])

    def _owner_changed(self, body: list[Any]) -> None:
        if len(body) != 3 or body[0] != self.busname:
            return
        oldowner = self.owner
        newowner = body[2]
        if newowner:
            logging.info('%s is now owned by %s', self.busname, newowner)
            self.owner = newowner
        else:
            logging.info('%s went away', self.busname)
            self.owner = None
            self.state = PlayerState()

        if oldowner and oldowner != self.owner and self.matches:
            self.rematch_task = asyncio.get_running_loop().create_task(self.rematch(oldowner))
            self.rematch_task.add_done_callback(self._rematch_done)

    async def getplayingtrack(self) -> dict[str, Any]:
        ''' get the currently playing song '''

        # start with a blank slate to prevent data bleeding
        builddata: dict[str, Any] = {'artist': None, 'title': None, 'filename': None}

        # if we are launched before the player...
        if not self.owner:
            await self.resetservice(self.service)
        if not self.owner:
            logging.error('Unknown service: %s', self.service)
            return builddata

        try:
            await self.refresh()
        except Exception as error:  # pylint: disable=broad-exception-caught
            # likely had a service but now it is gone
            logging.error('D-Bus error: %s', error)
            self.owner = None
            self.state = PlayerState()
            self.matches = []
            self.listening = False
            if self.bus:
                self.bus.disconnect()
                self.bus = None
            return builddata

        return self.state.trackinfo()

    async def cleanup(self) -> None:
        ''' Clean up resources '''
        if self.rematch_task:
            self.rematch_task.cancel()
            self.rematch_task = None
        if not self.bus:
            return
        try:
            await self.unsubscribe()
        except Exception as error:  # pylint: disable=broad-exception-caught
            logging.debug('unsubscribe during cleanup failed: %s', error)
        self.bus.disconnect()
        self.bus = None


async def main():
    ''' entry point as a standalone app'''
    mprisbus.bootstrap.set_qt_names()
    config = mprisbus.config.ConfigFile()
    logpath = mprisbus.bootstrap.setuplogging(level=config.loglevel, console=True)
    logging.debug('logging to %s', logpath)

    service = sys.argv[1] if len(sys.argv) == 2 else config.service
    mpris2 = MPRIS2Handler()

    if service:
        await mpris2.resetservice(service)
        if config.subscribe:
            await mpris2.subscribe()
        data = await mpris2.getplayingtrack()

        if data.get('artist') or data.get('title'):
            print(f'Artist: {data.get("artist")} | Title: {data.get("title")} | '
                  f'Filename: {data.get("filename")}')
        print(f'Status: {mpris2.state.status} | Position: {mpris2.state.position} | '
              f'Rate: {mpris2.state.rate} | Shuffle: {mpris2.state.shuffle}')
        print(data)
    else:
        services = await mpris2.get_mpris2_services()
        print('Available MPRIS2 services:')
        for name in services:
            print(f'  {name}')

    await mpris2.cleanup()


def cli():
    ''' console script wrapper '''
    asyncio.run(main())


if __name__ == "__main__":
    cli()

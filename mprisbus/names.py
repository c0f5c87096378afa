#!/usr/bin/env python3
"""D-Bus names used to talk to MPRIS2 players

Every method, property and signal this package touches is listed here.
Nothing else should build interface/member strings by hand.
"""

import dataclasses
from types import MappingProxyType


@dataclasses.dataclass(frozen=True)
class DBusName:
    """a dbus name split into interface + member"""

    interface: str
    member: str

    def __str__(self) -> str:
        return self.canonical()

    def canonical(self) -> str:
        """interface.member"""
        return f"{self.interface}.{self.member}"

    def build_match_string(self, sender: str = "", *args: str) -> str:
        """build a match rule for the bus (Add|Remove)Match methods

        Values are not escaped. Quotes or commas in sender/args give a
        rule the bus daemon will reject.
        """
        conditions = [
            "type='signal'",
            f"interface='{self.interface}'",
            f"member='{self.member}'",
        ]
        if sender:
            conditions.append(f"sender='{sender}'")
        for idx, val in enumerate(args):
            conditions.append(f"arg{idx}='{val}'")
        return ",".join(conditions)


MPRIS2_BASE = "org.mpris.MediaPlayer2"
MPRIS_INTERFACE = f"{MPRIS2_BASE}.Player"
MPRIS_PATH = "/org/mpris/MediaPlayer2"
DBUS_INTERFACE = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"
PROPERTIES_INTERFACE = f"{DBUS_INTERFACE}.Properties"

# dbus methods
METHOD_NAME_HAS_OWNER = DBusName(DBUS_INTERFACE, "NameHasOwner")
METHOD_GET_NAME_OWNER = DBusName(DBUS_INTERFACE, "GetNameOwner")
METHOD_ADD_MATCH = DBusName(DBUS_INTERFACE, "AddMatch")
METHOD_REMOVE_MATCH = DBusName(DBUS_INTERFACE, "RemoveMatch")
METHOD_LIST_NAMES = DBusName(DBUS_INTERFACE, "ListNames")
METHOD_PROPERTIES_GET_ALL = DBusName(PROPERTIES_INTERFACE, "GetAll")

# mpris methods
MPRIS_PLAY = DBusName(MPRIS_INTERFACE, "Play")
MPRIS_PAUSE = DBusName(MPRIS_INTERFACE, "Pause")
MPRIS_PLAY_PAUSE = DBusName(MPRIS_INTERFACE, "PlayPause")
MPRIS_STOP = DBusName(MPRIS_INTERFACE, "Stop")
MPRIS_NEXT = DBusName(MPRIS_INTERFACE, "Next")
MPRIS_PREV = DBusName(MPRIS_INTERFACE, "Previous")
MPRIS_SEEK = DBusName(MPRIS_INTERFACE, "Seek")

# mpris properties
MPRIS_RATE = DBusName(MPRIS_INTERFACE, "Rate")
MPRIS_POSITION = DBusName(MPRIS_INTERFACE, "Position")
MPRIS_SHUFFLE = DBusName(MPRIS_INTERFACE, "Shuffle")
MPRIS_STATUS = DBusName(MPRIS_INTERFACE, "PlaybackStatus")
MPRIS_METADATA = DBusName(MPRIS_INTERFACE, "Metadata")

# signals used for receiving updates about the media player
SIGNAL_SEEKED = DBusName(MPRIS_INTERFACE, "Seeked")
SIGNAL_NAME_OWNER_CHANGED = DBusName(DBUS_INTERFACE, "NameOwnerChanged")
SIGNAL_PROP_CHANGED = DBusName(PROPERTIES_INTERFACE, "PropertiesChanged")

KNOWN_NAMES: "MappingProxyType[str, DBusName]" = MappingProxyType(
    {
        "method_name_has_owner": METHOD_NAME_HAS_OWNER,
        "method_get_name_owner": METHOD_GET_NAME_OWNER,
        "method_add_match": METHOD_ADD_MATCH,
        "method_remove_match": METHOD_REMOVE_MATCH,
        "method_list_names": METHOD_LIST_NAMES,
        "method_properties_get_all": METHOD_PROPERTIES_GET_ALL,
        "mpris_play": MPRIS_PLAY,
        "mpris_pause": MPRIS_PAUSE,
        "mpris_play_pause": MPRIS_PLAY_PAUSE,
        "mpris_stop": MPRIS_STOP,
        "mpris_next": MPRIS_NEXT,
        "mpris_prev": MPRIS_PREV,
        "mpris_seek": MPRIS_SEEK,
        "mpris_rate": MPRIS_RATE,
        "mpris_position": MPRIS_POSITION,
        "mpris_shuffle": MPRIS_SHUFFLE,
        "mpris_status": MPRIS_STATUS,
        "mpris_metadata": MPRIS_METADATA,
        "signal_seeked": SIGNAL_SEEKED,
        "signal_name_owner_changed": SIGNAL_NAME_OWNER_CHANGED,
        "signal_prop_changed": SIGNAL_PROP_CHANGED,
    }
)

#!/usr/bin/env python3
"""
config file parsing/handling
"""

import contextlib
import logging
import sys

from PySide6.QtCore import QCoreApplication, QSettings  # pylint: disable=no-name-in-module


class ConfigFile:
    """read and write the QSettings backed configuration"""

    def __init__(self, reset: bool = False, testmode: bool = False):
        self.testmode: bool = testmode

        self.qsettingsformat: QSettings.Format = QSettings.NativeFormat
        if sys.platform == "win32":
            self.qsettingsformat = QSettings.IniFormat

        self.cparser: QSettings = QSettings(
            self.qsettingsformat,
            QSettings.UserScope,
            QCoreApplication.organizationName(),
            QCoreApplication.applicationName(),
        )
        logging.info("configuration: %s", self.cparser.fileName())

        self.loglevel: str = "DEBUG"
        self.service: str = ""
        self.subscribe: bool = True

        if reset:
            self.cparser.clear()
        self._force_set_statics()
        self.defaults()
        if reset:
            self.save()
        self.get()

    def _force_set_statics(self) -> None:
        """make sure these are always set"""
        if self.testmode:
            self.cparser.setValue("testmode/enabled", True)

    def reset(self) -> None:
        """forcibly go back to defaults"""
        logging.debug("config reset")
        self.cparser.clear()
        self._force_set_statics()
        self.defaults()
        self.save()
        self.get()

    def defaults(self) -> None:
        """default values for things"""
        for key, value in (
            ("mpris2/service", ""),
            ("mpris2/subscribe", True),
            ("settings/loglevel", "DEBUG"),
        ):
            if not self.cparser.contains(key):
                self.cparser.setValue(key, value)

    def get(self) -> None:
        """refresh values"""
        self.cparser.sync()
        with contextlib.suppress(TypeError):
            self.loglevel = self.cparser.value("settings/loglevel", defaultValue="DEBUG")
        self.service = self.cparser.value("mpris2/service", defaultValue="") or ""
        with contextlib.suppress(TypeError):
            self.subscribe = self.cparser.value("mpris2/subscribe", type=bool)

    def save(self) -> None:
        """save the current set"""
        self.cparser.sync()

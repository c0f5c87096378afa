#!/usr/bin/env python3
"""bootstrap Qt names and logging"""

import logging
import logging.handlers
import pathlib

from PySide6.QtCore import QCoreApplication, QStandardPaths  # pylint: disable=no-name-in-module

LOGFORMAT = "%(asctime)s %(levelname)s %(module)s:%(funcName)s:%(lineno)d %(message)s"


def set_qt_names(
    app: QCoreApplication | None = None,
    domain: str = "com.github.mprisbus",
    appname: str = "mprisbus",
):
    """bootstrap Qt for configuration"""
    if not app:
        app = QCoreApplication.instance()
    if not app:
        app = QCoreApplication()
    app.setOrganizationDomain(domain)
    app.setOrganizationName("mprisbus")
    app.setApplicationName(appname)


def loglevel_from_config(level: int | str | None) -> int:
    """turn a settings/loglevel value into a logging level, DEBUG if unknown"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if isinstance(value, int):
        return value
    return logging.DEBUG


def setuplogging(
    logdir: pathlib.Path | str | None = None,
    logname: str = "mprisbus.log",
    level: int | str | None = logging.DEBUG,
    console: bool = False,
) -> pathlib.Path:
    """log to a rotating file under the cache dir, optionally echoing to stderr"""
    if logdir:
        logpath = pathlib.Path(logdir)
    else:
        logpath = pathlib.Path(
            QStandardPaths.standardLocations(QStandardPaths.CacheLocation)[0]
        ).joinpath("logs")
    logpath.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            filename=logpath.joinpath(logname),
            maxBytes=1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        format=LOGFORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S%z",
        handlers=handlers,
        level=loglevel_from_config(level),
        force=True,
    )
    logging.captureWarnings(True)
    return logpath

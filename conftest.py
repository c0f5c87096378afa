#!/usr/bin/env python3
"""pytest fixtures"""

import pathlib
import sys

import pytest
from PySide6.QtCore import (  # pylint: disable=import-error, no-name-in-module
    QCoreApplication,
    QSettings,
)

import mprisbus.bootstrap
import mprisbus.config

# DO NOT CHANGE THIS TO BE com.github.mprisbus
# otherwise your actual settings will disappear!
DOMAIN = "com.github.mprisbus.testsuite"

try:
    from pytest_cov.embed import cleanup_on_sigterm
except ImportError:
    pass
else:
    cleanup_on_sigterm()


@pytest.fixture
def getroot(pytestconfig):
    """get the base of the source tree"""
    return pytestconfig.rootpath


@pytest.fixture
def bootstrap():
    """bootstrap a configuration"""
    mprisbus.bootstrap.set_qt_names(domain=DOMAIN, appname="testsuite")
    config = mprisbus.config.ConfigFile(testmode=True)
    yield config
    config.cparser.clear()
    config.cparser.sync()


@pytest.fixture(autouse=True, scope="function")
def clear_old_testsuite():
    """clear out old testsuite configs"""
    if sys.platform == "win32":
        qsettingsformat = QSettings.IniFormat
    else:
        qsettingsformat = QSettings.NativeFormat

    mprisbus.bootstrap.set_qt_names(domain=DOMAIN, appname="testsuite")
    config = QSettings(
        qsettingsformat,
        QSettings.UserScope,
        QCoreApplication.organizationName(),
        QCoreApplication.applicationName(),
    )
    config.clear()
    config.sync()
    filename = pathlib.Path(config.fileName())
    del config
    if filename.exists():
        filename.unlink()
    yield filename
    if filename.exists():
        filename.unlink()

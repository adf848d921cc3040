"""
Shared test fixtures
"""

import pytest


class RecordingLogger:
    """Logger stand-in that keeps every message by level"""

    def __init__(self):
        self.messages = {"debug": [], "info": [], "warning": [], "error": []}

    def debug(self, message, *args, **kwargs):
        self.messages["debug"].append(message)

    def info(self, message, *args, **kwargs):
        self.messages["info"].append(message)

    def warning(self, message, *args, **kwargs):
        self.messages["warning"].append(message)

    def error(self, message, *args, **kwargs):
        self.messages["error"].append(message)


@pytest.fixture
def recording_log():
    """Fresh RecordingLogger per test"""
    return RecordingLogger()

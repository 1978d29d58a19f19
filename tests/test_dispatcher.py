"""Tests for notification dispatchers."""

from unittest.mock import MagicMock

import pytest
import requests

from fiscalcontrol.notifications.dispatcher import (
    CALLMEBOT_URL,
    CallMeBotDispatcher,
    DispatchError,
    LogDispatcher,
    Notification,
    create_dispatcher,
    dispatch_safely,
)

from conftest import FailingDispatcher

NOTE = Notification(phone="584121234567", message="Recordatorio")


def _session(status_code=200, text="Message queued"):
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.text = text
    session.get.return_value = response
    return session


def test_callmebot_sends_query():
    session = _session()
    dispatcher = CallMeBotDispatcher("secret", timeout=5, session=session)

    dispatcher.send(NOTE)

    session.get.assert_called_once_with(
        CALLMEBOT_URL,
        params={"phone": "584121234567", "text": "Recordatorio", "apikey": "secret"},
        timeout=5,
    )


def test_callmebot_http_error():
    dispatcher = CallMeBotDispatcher("secret", session=_session(status_code=403, text="bad key"))
    with pytest.raises(DispatchError, match="403"):
        dispatcher.send(NOTE)


def test_callmebot_connection_error():
    session = _session()
    session.get.side_effect = requests.ConnectionError("no route")
    dispatcher = CallMeBotDispatcher("secret", session=session)

    with pytest.raises(DispatchError, match="no route"):
        dispatcher.send(NOTE)


def test_dispatch_safely_swallows_failures(caplog):
    session = _session()
    session.get.side_effect = requests.Timeout("slow")
    dispatcher = CallMeBotDispatcher("secret", session=session)

    assert dispatch_safely(dispatcher, NOTE) is False
    assert "Could not notify 584121234567" in caplog.text


def test_dispatch_safely_success():
    dispatcher = LogDispatcher()
    assert dispatch_safely(dispatcher, NOTE) is True
    assert dispatcher.sent == [NOTE]


def test_dispatch_safely_logs_unexpected_errors(caplog):
    dispatcher = FailingDispatcher(ConnectionResetError("socket closed"))

    assert dispatch_safely(dispatcher, NOTE) is False
    assert "Unexpected failure notifying 584121234567" in caplog.text
    assert "socket closed" in caplog.text


def test_create_dispatcher(monkeypatch):
    monkeypatch.delenv("FISCALCONTROL_CALLMEBOT_API_KEY", raising=False)
    assert isinstance(create_dispatcher(), LogDispatcher)

    monkeypatch.setenv("FISCALCONTROL_CALLMEBOT_API_KEY", "from-env")
    dispatcher = create_dispatcher()
    assert isinstance(dispatcher, CallMeBotDispatcher)
    assert dispatcher.api_key == "from-env"

import asyncio
import logging

import pytest
import pytest_asyncio

from tests.fixtures.transport import FakeTransport
from twitch_chat.config import ClientOptions
from twitch_chat.irc import TwitchChatClient


@pytest_asyncio.fixture
async def transport() -> FakeTransport:
    """Fresh in-memory transport bound to the test's event loop."""
    return FakeTransport()


@pytest.fixture
def options() -> ClientOptions:
    return ClientOptions(channels=["foo"], read_timeout=5, write_timeout=1)


@pytest_asyncio.fixture
async def client(transport: FakeTransport, options: ClientOptions):
    """Client wired to the fake transport; any live session is ended on teardown."""
    c = TwitchChatClient(options, transport.factory)
    yield c
    c.disconnect()
    transport.writer.close()
    # Let the sender and receiver observe shutdown before the loop closes
    await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def _capture_chat_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="twitch_chat")
    yield

"""Tests for client disconnects, driven through the raw ASGI interface."""

import asyncio
import json

import pytest

from common.types import SessionState
from engine import emit
from engine.limits import LimitsPolicy
from gateway.main import create_app


def make_scope(method, path, query=b'', headers=()):
    return {
        'type': 'http',
        'asgi': {'version': '3.0'},
        'http_version': '1.1',
        'method': method,
        'scheme': 'http',
        'path': path,
        'raw_path': path.encode(),
        'query_string': query,
        'root_path': '',
        'headers': [(b'host', b'testserver'), *headers],
        'client': ('127.0.0.1', 50000),
        'server': ('testserver', 80),
    }


class DisconnectAfterFirstChunk:
    """ASGI receive/send pair that hangs up once the first body chunk is sent."""

    def __init__(self):
        self.messages = []
        self.first_chunk_sent = asyncio.Event()

    async def receive(self):
        await self.first_chunk_sent.wait()
        return {'type': 'http.disconnect'}

    async def send(self, message):
        self.messages.append(message)
        if message['type'] == 'http.response.body' and message.get('body'):
            self.first_chunk_sent.set()


@pytest.fixture
def created_emitters(monkeypatch):
    """
    Record every emitter the download routes build.

    Returns:
        List filled with TimedEmitter/BoundedEmitter instances as they are created
    """
    created = []

    class RecordingTimedEmitter(emit.TimedEmitter):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    class RecordingBoundedEmitter(emit.BoundedEmitter):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(emit, 'TimedEmitter', RecordingTimedEmitter)
    monkeypatch.setattr(emit, 'BoundedEmitter', RecordingBoundedEmitter)
    return created


@pytest.mark.asyncio
async def test_timed_download_disconnect_releases_session(created_emitters):
    """Test a hang-up mid-download cancels the session and drops the slab at once."""
    app = create_app(LimitsPolicy())
    peer = DisconnectAfterFirstChunk()

    await asyncio.wait_for(
        app(make_scope('GET', '/api/d', b't=60&slabMiB=1'), peer.receive, peer.send),
        timeout=10,
    )

    assert len(created_emitters) == 1
    emitter = created_emitters[0]
    assert emitter.state == SessionState.CANCELLED
    assert emitter.slab is None
    assert peer.messages[0]['status'] == 200


@pytest.mark.asyncio
async def test_legacy_download_disconnect_releases_session(created_emitters):
    """Test a hang-up mid legacy download cancels the bounded session."""
    app = create_app(LimitsPolicy())
    peer = DisconnectAfterFirstChunk()

    await asyncio.wait_for(
        app(make_scope('GET', '/download', b'bytes=1073741824'), peer.receive, peer.send),
        timeout=10,
    )

    assert len(created_emitters) == 1
    emitter = created_emitters[0]
    assert emitter.state == SessionState.CANCELLED
    assert emitter.slab is None
    assert emitter.bytes_emitted < 1073741824


@pytest.mark.asyncio
async def test_upload_interrupted_mid_body():
    """Test a body cut short by a hang-up answers 400 STREAM_READ_FAILED."""
    app = create_app(LimitsPolicy())
    incoming = [
        {'type': 'http.request', 'body': b'x' * 1000, 'more_body': True},
        {'type': 'http.disconnect'},
    ]
    sent = []

    async def receive():
        if incoming:
            return incoming.pop(0)
        await asyncio.Event().wait()

    async def send(message):
        sent.append(message)

    scope = make_scope('POST', '/api/u', b't=5', headers=[(b'content-length', b'5000')])
    await asyncio.wait_for(app(scope, receive, send), timeout=10)

    start = next(m for m in sent if m['type'] == 'http.response.start')
    body = b''.join(m.get('body', b'') for m in sent if m['type'] == 'http.response.body')
    data = json.loads(body)
    assert start['status'] == 400
    assert data['code'] == 'STREAM_READ_FAILED'
    assert data['bytes_received'] == 1000

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from trio.abc import Stream
import pytest

import threading
from typing import List

HUGE_BODY = str([(i + 1) % 256 for i in range(1 << 20)])


class ScriptedStream(Stream):
    """In-memory trio stream replaying a canned response in fixed-size pieces."""

    def __init__(self, data: bytes, chunk_size: int = 1024):
        self._chunks: List[bytes] = [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]
        self.sent = bytearray()
        self.reads = 0
        self.closed = False
        self.connected_to = None

    async def send_all(self, data):
        self.sent += data

    async def wait_send_all_might_not_block(self):
        pass

    async def receive_some(self, max_bytes=None):
        self.reads += 1
        if not self._chunks:
            return b''
        chunk = self._chunks.pop(0)
        if max_bytes is not None and len(chunk) > max_bytes:
            self._chunks.insert(0, chunk[max_bytes:])
            chunk = chunk[:max_bytes]
        return chunk

    async def aclose(self):
        self.closed = True

    async def connect(self, host: str, port: int) -> 'ScriptedStream':
        self.connected_to = (host, port)
        return self


@pytest.fixture
def scripted():
    """Factory for scripted streams; use ``stream.connect`` as the connector."""
    return ScriptedStream


class RouteHandler(BaseHTTPRequestHandler):
    protocol_version = 'HTTP/1.1'

    def _reply(self, status: int, body: str = '', reason: str = None, content_type: str = None):
        data = body.encode()
        self.send_response(status, reason)
        if content_type:
            self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _route(self):
        path = self.path.split('?', 1)[0]
        body = self.rfile.read(int(self.headers.get('Content-Length', 0)))
        if path == '/echo':
            self._reply(200, body.decode() if self.command == 'POST' else '')
        elif path == '/0123456789':
            self._reply(200, '01234567890' if self.command == 'GET' else '')
        elif path == '/reasonformoving':
            self._reply(301, reason="Don't come looking here any more")
        elif path == '/host':
            self._reply(200, '|'.join(self.headers.get_all('Host', [])))
        elif path == '/target':
            self._reply(200, self.path)
        elif path == '/huge':
            self._reply(200, HUGE_BODY)
        else:
            self._reply(404, 'Page not found', content_type='text/html; charset=UTF-8')

    do_GET = do_POST = do_PUT = do_DELETE = _route

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    """Threaded test server; yields its base URL."""
    server = ThreadingHTTPServer(('127.0.0.1', 0), RouteHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f'http://127.0.0.1:{server.server_address[1]}'

    server.shutdown()
    server.server_close()
    thread.join(timeout=5.0)

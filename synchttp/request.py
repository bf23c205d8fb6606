#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import trio

from typing import Optional
from urllib.parse import parse_qsl, quote, urlsplit

from .config import DEFAULT_PORT, PROTOCOL_VERSION
from .connection import Connection, Connector
from .exc import InvalidOperation
from .headers import Headers
from .log import logger
from .response import Response, read_response

QUERY_SAFE = "!*'()"

# method -> whether it carries a body
METHODS = {
    'GET': False,
    'POST': True,
    'PUT': True,
    'DELETE': False,
}


class Request(object):
    protocol_version = PROTOCOL_VERSION
    encoding = 'utf-8'

    def __init__(self, method: str, url: str, connector: Optional[Connector] = None):
        if method not in METHODS:
            raise ValueError(f'Unsupported method: {method}')
        parts = urlsplit(url)
        if parts.scheme != 'http' or not parts.hostname:
            raise ValueError(f'Unsupported URL: {url}')

        self.method = method
        self.url = url
        self.host = parts.hostname
        self.port = parts.port or DEFAULT_PORT
        self.path = parts.path or '/'
        self.query = parts.query
        self._body = bytearray() if METHODS[method] else None
        self._headers = None
        self._connector = connector

    @property
    def has_body(self) -> bool:
        return self._body is not None

    @property
    def content_length(self) -> Optional[int]:
        return len(self._body) if self.has_body else None

    @property
    def headers(self) -> Headers:
        if self._headers is None:
            self._headers = Headers.for_request(self)
        return self._headers

    @property
    def target(self) -> str:
        if not self.query:
            return self.path
        pairs = parse_qsl(self.query, keep_blank_values=True)
        query = '&'.join(f'{quote(name, safe=QUERY_SAFE)}={quote(value, safe=QUERY_SAFE)}' for name, value in pairs)
        return f'{self.path}?{query}' if query else self.path

    def write(self, content):
        if not self.has_body:
            raise InvalidOperation(f'write not allowed for method {self.method}')
        self._body += str(content).encode(self.encoding)

    def encode(self) -> bytes:
        lines = [f'{self.method} {self.target} HTTP/{self.protocol_version}']
        for name, values in self.headers.items():
            for value in values:
                lines.append(f'{name}: {value}')
        head = ('\r\n'.join(lines) + '\r\n\r\n').encode(self.encoding)
        if self.has_body:
            return head + bytes(self._body)
        return head

    def close(self) -> Response:
        payload = self.encode()
        response = trio.run(self._exchange, payload)
        logger.debug(f'{self} -> {response}')
        return response

    async def _exchange(self, payload: bytes) -> Response:
        connection = await Connection.open(self.host, self.port, self._connector)
        try:
            await connection.write(payload)
            logger.debug(f'{self}(length={len(payload)}) sent')
            return await read_response(connection)
        finally:
            await connection.close()

    def __str__(self):
        return f'Request{{{self.method}, {self.url}}}'


__all__ = ['Request', 'METHODS']

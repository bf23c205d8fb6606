#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from trio.abc import Stream
import trio

from typing import Awaitable, Callable, Optional

from .exc import TransportFailure
from .log import logger

Connector = Callable[[str, int], Awaitable[Stream]]

STREAM_ERRORS = (trio.BrokenResourceError, trio.ClosedResourceError, OSError)


class Connection(object):
    def __init__(self, stream: Stream, host: str, port: int):
        self._stream = stream
        self.host = host
        self.port = port
        self.closed = False

    @classmethod
    async def open(cls, host: str, port: int, connector: Optional[Connector] = None) -> 'Connection':
        connector = connector or trio.open_tcp_stream
        try:
            stream = await connector(host, port)
        except OSError as ex:
            raise TransportFailure(f'Unable to connect to {host}:{port}') from ex
        logger.debug(f'Connected to {host}:{port}')
        return cls(stream, host, port)

    async def write(self, data: bytes):
        try:
            await self._stream.send_all(data)
        except STREAM_ERRORS as ex:
            raise TransportFailure(f'Unable to write to {self.host}:{self.port}') from ex

    # the blocking primitive of an exchange, wrap it in trio.fail_after for a timeout
    async def read(self, max_bytes: int) -> bytes:
        try:
            return await self._stream.receive_some(max_bytes)
        except STREAM_ERRORS as ex:
            raise TransportFailure(f'Unable to read from {self.host}:{self.port}') from ex

    async def close(self):
        if self.closed:
            return
        self.closed = True
        await self._stream.aclose()
        logger.debug(f'Connection to {self.host}:{self.port} closed')

    def __str__(self):
        return f'Connection{{{self.host}:{self.port}, closed={self.closed}}}'


__all__ = ['Connection', 'Connector']

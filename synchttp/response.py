#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from enum import Enum
from typing import Optional
import re

from .config import READ_BUFFER_SIZE
from .decoder import Line, LineDecoder
from .exc import IncompleteResponse, ProtocolViolation, UnsupportedFormat, UnsupportedTransferEncoding
from .headers import HeaderMap, Headers
from .log import logger

STATUS_LINE = re.compile(r'HTTP/1\.[01] (?P<code>\d{3})(?: (?P<reason>.*))?')


class Response(object):
    def __init__(self, status_code: int, reason_phrase: str, headers: Headers, body: str):
        self._status_code = status_code
        self._reason_phrase = reason_phrase
        self._headers = headers
        self._body = body

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        return self._reason_phrase

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def body(self) -> str:
        return self._body

    @property
    def content_length(self) -> Optional[int]:
        return self._headers.content_length

    def __str__(self):
        return f'Response{{{self.status_code}, {self.reason_phrase}, {self.headers}}}'


class State(Enum):
    STATUS_LINE = 'status-line'
    HEADERS = 'headers'
    BODY = 'body'
    DONE = 'done'
    FAILED = 'failed'


class ResponseParser(object):
    """Incremental HTTP/1.x response parser, fed with the chunks read from the connection."""

    def __init__(self):
        self.state = State.STATUS_LINE
        self.status_code: Optional[int] = None
        self.reason_phrase: Optional[str] = None
        self.fields = HeaderMap()
        self.content_length: Optional[int] = None
        self.bytes_read = 0
        self._body = bytearray()
        self._decoder = LineDecoder()
        self._handlers = {
            State.STATUS_LINE: self._status_line,
            State.HEADERS: self._header_line,
            State.BODY: self._body_line,
            State.DONE: self._trailing_line,
            State.FAILED: self._dropped_line,
        }

    @property
    def wants_more(self) -> bool:
        if self.state in (State.DONE, State.FAILED):
            return False
        if self.state is not State.BODY or self.content_length is None:
            return True
        return self.bytes_read + self._decoder.buffered_bytes < self.content_length

    def feed(self, chunk: bytes):
        for line in self._decoder.feed(chunk):
            self.handle(line)

    def close(self):
        line = self._decoder.close()
        if line is None:
            return
        if self.state in (State.STATUS_LINE, State.HEADERS):
            # an unterminated line never completes the response head
            self._dropped_line(line)
        else:
            self.handle(line)

    def handle(self, line: Line):
        self._handlers[self.state](line)

    def fail(self):
        self.state = State.FAILED

    def response(self) -> Response:
        if self.state is State.FAILED:
            raise ProtocolViolation('response parsing failed')
        if self.state is State.STATUS_LINE:
            raise IncompleteResponse('connection closed before the status line was received')
        if self.state is State.HEADERS:
            raise IncompleteResponse('connection closed before the end of the headers')
        if self.content_length is not None and self.bytes_read < self.content_length:
            raise IncompleteResponse(f'expected {self.content_length} body bytes, got {self.bytes_read}')
        return Response(self.status_code, self.reason_phrase, Headers.for_response(self.fields),
                        self._body.decode('utf-8'))

    def _status_line(self, line: Line):
        if not line.text.startswith(('HTTP/1.1', 'HTTP/1.0')):
            raise UnsupportedFormat('unsupported http response format')

        match = STATUS_LINE.fullmatch(_strip_terminator(line.text))
        if match is None:
            raise UnsupportedFormat(f'malformed status line: {line.text!r}')

        self.status_code = int(match.group('code'))
        self.reason_phrase = match.group('reason') or ''
        self.state = State.HEADERS
        logger.debug(f'Status line received: {self.status_code} {self.reason_phrase}')

    def _header_line(self, line: Line):
        if not line.text.strip():
            self._end_of_headers()
            return

        name, separator, value = line.text.partition(':')
        if not separator:
            raise ProtocolViolation(f'malformed header line: {line.text!r}')
        name = name.lower().strip()
        value = value.strip()

        if name == 'transfer-encoding' and value.lower() != 'identity':
            raise UnsupportedTransferEncoding('only identity transfer encoding is accepted')
        if name == 'content-length':
            try:
                self.content_length = int(value)
            except ValueError:
                raise ProtocolViolation(f'invalid content-length: {value!r}') from None
            if self.content_length < 0:
                raise ProtocolViolation(f'invalid content-length: {value!r}')

        self.fields.add(name, value)

    def _end_of_headers(self):
        if self.content_length == 0:
            self.state = State.DONE
            return
        if self.content_length is not None:
            self._decoder.expected_byte_count = self.content_length
        self.state = State.BODY

    def _body_line(self, line: Line):
        self._body += line.data
        self.bytes_read += line.size
        if self.content_length is not None and self.bytes_read >= self.content_length:
            self.state = State.DONE
            logger.debug(f'Body complete ({self.bytes_read} bytes)')

    def _trailing_line(self, line: Line):
        logger.warning(f'Discarding {line.size} bytes received after the response body')

    def _dropped_line(self, line: Line):
        logger.debug(f'Dropping {line.size} unprocessed bytes')

    def __str__(self):
        return f'ResponseParser{{{self.state.value}, {self.status_code}, {self.bytes_read}/{self.content_length}}}'


def _strip_terminator(text: str) -> str:
    if text.endswith('\n'):
        text = text[:-1]
    if text.endswith('\r'):
        text = text[:-1]
    return text


async def read_response(connection, buffer_size: int = READ_BUFFER_SIZE) -> Response:
    parser = ResponseParser()
    try:
        while parser.wants_more:
            chunk = await connection.read(buffer_size)
            if not chunk:
                break
            parser.feed(chunk)
    except BaseException:
        parser.fail()
        raise
    finally:
        parser.close()
    return parser.response()


__all__ = ['Response', 'ResponseParser', 'State', 'read_response']

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from typing import Iterator, NamedTuple, Optional

LINE_TERMINATOR = b'\n'


class Line(NamedTuple):
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode('utf-8')

    @property
    def size(self) -> int:
        return len(self.data)


class LineDecoder(object):
    def __init__(self):
        self._unprocessed = bytearray()
        self.expected_byte_count = -1

    @property
    def buffered_bytes(self) -> int:
        return len(self._unprocessed)

    def feed(self, chunk: bytes) -> Iterator[Line]:
        # expected_byte_count is re-read before every split, the consumer may
        # change it between two lines of the same chunk
        start = 0
        while start < len(chunk):
            if self.expected_byte_count > 0:
                split = start + self.expected_byte_count - len(self._unprocessed)
            else:
                split = chunk.find(LINE_TERMINATOR, start) + 1

            if start < split <= len(chunk):
                self._unprocessed += chunk[start:split]
                start = split
                self.expected_byte_count = -1
                yield self._take()
            else:
                self._unprocessed += chunk[start:]
                break

    def close(self) -> Optional[Line]:
        if not self._unprocessed:
            return None
        return self._take()

    def _take(self) -> Line:
        data = bytes(self._unprocessed)
        self._unprocessed.clear()
        return Line(data)

    def __str__(self):
        return f'LineDecoder{{buffered={self.buffered_bytes}, expected={self.expected_byte_count}}}'


__all__ = ['Line', 'LineDecoder']

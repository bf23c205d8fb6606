#!/usr/bin/env python3
# -*- coding: utf-8 -*-


class SyncHttpError(Exception):
    pass


class ProtocolViolation(SyncHttpError):
    pass


class UnsupportedFormat(ProtocolViolation):
    pass


class UnsupportedTransferEncoding(ProtocolViolation):
    pass


class IncompleteResponse(ProtocolViolation):
    pass


class UnsupportedOperation(SyncHttpError):
    pass


class ImmutableHeaders(UnsupportedOperation):
    def __init__(self, message: str = 'Response headers are immutable'):
        super().__init__(message)


class InvalidOperation(UnsupportedOperation):
    pass


class AmbiguousHeader(SyncHttpError):
    def __init__(self, name: str):
        super().__init__(f'header {name} has more than one value')
        self.name = name


class TransportFailure(SyncHttpError):
    pass


__all__ = ['SyncHttpError', 'ProtocolViolation', 'UnsupportedFormat', 'UnsupportedTransferEncoding',
           'IncompleteResponse', 'UnsupportedOperation', 'ImmutableHeaders', 'InvalidOperation',
           'AmbiguousHeader', 'TransportFailure']

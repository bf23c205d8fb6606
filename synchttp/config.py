#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os

READ_BUFFER_SIZE = int(os.getenv('SYNCHTTP_READ_BUFFER_SIZE', 1024))
LOG_LEVEL = os.getenv('SYNCHTTP_LOG_LEVEL')

PROTOCOL_VERSION = '1.1'
DEFAULT_PORT = 80

__all__ = ['READ_BUFFER_SIZE', 'LOG_LEVEL', 'PROTOCOL_VERSION', 'DEFAULT_PORT']

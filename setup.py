#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

setup(
    name='synchttp-python',
    version='1.0.0',
    description='Blocking, single-request-per-connection HTTP/1.1 client built on trio',
    license='BSD 2-Clause',
    packages=find_packages(),
    python_requires='>=3.8',
    install_requires=['trio>=0.10.0', 'loguru>=0.2.5'],
    extras_require={
        'test': ['pytest>=6.0']
    }
)

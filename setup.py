#!/usr/bin/env python
"""
NodeTunnel - Docker engine access to cluster nodes over SSH

Establishes an SSH-tunneled Docker engine API client for each node of a
cluster and checks each engine's version against the supported set for the
Kubernetes release being provisioned.
"""

import os
from setuptools import setup, find_packages

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Version
VERSION = '0.1.0'

setup(
    name='nodetunnel',
    version=VERSION,
    description='Docker engine access to cluster nodes over SSH',
    long_description=long_description,
    long_description_content_type='text/markdown',

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: System :: Clustering',
        'Topic :: System :: Systems Administration',
    ],

    keywords='ssh docker tunnel kubernetes provisioning paramiko',

    packages=find_packages(exclude=['tests', 'tests.*']),

    python_requires='>=3.10',

    install_requires=[
        'paramiko>=3.0',
        'PyYAML>=6.0',
        'cryptography>=41.0',
        'requests>=2.30.0',
        'urllib3>=1.26',
        'docker>=6.1',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },

    # Entry points for CLI commands
    entry_points={
        'console_scripts': [
            'nodetunnel=nodetunnel.cli.main:main',
        ],
    },
)

#!/usr/bin/env python
# Software License Agreement (BSD License)
#
# Copyright (c) 2010, Willow Garage, Inc.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:
#
#  * Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
#  * Redistributions in binary form must reproduce the above
#    copyright notice, this list of conditions and the following
#    disclaimer in the documentation and/or other materials provided
#    with the distribution.
#  * Neither the name of Willow Garage, Inc. nor the names of its
#    contributors may be used to endorse or promote products derived
#    from this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# 'AS IS' AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT OWNER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.
#

'''
.. module:: jenkins_commands.config
    :platform: Unix, Windows
    :synopsis: Immutable connection context shared by every command
'''

import collections
import logging
import os

logger = logging.getLogger(__name__)

JenkinsContext = collections.namedtuple('JenkinsContext', [
    'url',
    'username',
    'password',
    'timeout',
    'verify',
    'extra_headers',
    'crumb',
    'suppress_action_errors',
])


def parse_extra_headers(value):
    '''Parse newline separated ``Header: value`` lines.

    Lines without a colon are ignored.

    :param value: raw header specification, ``str``
    :returns: ``tuple`` of ``(name, value)`` pairs
    '''
    headers = []
    for token in value.split("\n"):
        if ":" in token:
            header, header_value = token.split(":", 1)
            headers.append((header.strip(), header_value.strip()))
    return tuple(headers)


def make_context(url, username=None, password=None, timeout=None,
                 suppress_action_errors=True):
    '''Create the context describing one Jenkins server.

    The environment is consulted the same way for every client:
    ``JENKINS_API_EXTRA_HEADERS`` adds HTTP headers to every request and
    ``PYTHONHTTPSVERIFY=0`` turns off TLS certificate verification.

    :param url: URL of Jenkins server, ``str``
    :param username: Server username, ``str``
    :param password: Server password or API token, ``str``
    :param timeout: Request timeout in secs (default: no timeout), ``float``
    :param suppress_action_errors: Ignore failures reported by stop, toggle
        keep and promote requests (default: ``True``), ``bool``
    :returns: :class:`JenkinsContext`
    '''
    if not url:
        raise ValueError("'url' cannot be empty!")
    if url[-1] != '/':
        url = url + '/'

    extra_headers = os.environ.get("JENKINS_API_EXTRA_HEADERS", "")
    if extra_headers:
        logger.warning("JENKINS_API_EXTRA_HEADERS adds these HTTP headers: %s",
                       extra_headers.split("\n"))

    verify = True
    if os.getenv('PYTHONHTTPSVERIFY', '1') == '0':
        logger.debug('PYTHONHTTPSVERIFY=0 detected so we will '
                     'disable SSL verification.')
        verify = False

    return JenkinsContext(
        url=url,
        username=username,
        password=password,
        timeout=timeout,
        verify=verify,
        extra_headers=parse_extra_headers(extra_headers),
        crumb=None,
        suppress_action_errors=suppress_action_errors,
    )

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
.. module:: jenkins_commands.executor
    :platform: Unix, Windows
    :synopsis: Blocking and cancellable execution of Jenkins commands

A command is executed in two phases. The write phase builds a
``requests.Request`` and hands it to the command's ``prepare_request``.
The read phase wraps whatever the transport returned in a
:class:`ResponseEnvelope` and hands it to ``interpret_response``.
:meth:`CommandExecutor.execute` sends the request with ``requests`` and
:meth:`CommandExecutor.execute_async` sends it with ``httpx``; both run
the same two phases.
'''

import asyncio
import codecs
import io
import logging
from urllib.parse import urljoin

import httpx
import requests
from requests.packages.urllib3.exceptions import InsecureRequestWarning
from requests.structures import CaseInsensitiveDict

from jenkins_commands.exceptions import BadHTTPException
from jenkins_commands.exceptions import JenkinsException
from jenkins_commands.exceptions import NotFoundException

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = 'utf-8'


def charset_from_content_type(content_type):
    '''Return the charset declared by a ``Content-Type`` value, or None.'''
    if not content_type:
        return None
    for param in content_type.split(';')[1:]:
        key, _, value = param.partition('=')
        if key.strip().lower() == 'charset':
            return value.strip().strip('"\'') or None
    return None


def resolve_encoding(name, default=DEFAULT_ENCODING):
    '''Pick the encoding used to decode a response body.

    :param name: declared encoding, ``str`` or None
    :param default: encoding used when ``name`` is missing or unknown
    :returns: ``name`` if Python knows the codec, ``default`` otherwise
    '''
    if not name:
        return default
    try:
        codecs.lookup(name)
    except LookupError:
        return default
    return name


class ResponseEnvelope(object):
    '''Transport independent view of a received HTTP response.'''

    def __init__(self, status_code, reason, headers, body, url=None):
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers)
        self.body = body
        self.url = url
        self.encoding = charset_from_content_type(
            self.headers.get('content-type'))

    @classmethod
    def from_requests(cls, response):
        return cls(response.status_code, response.reason,
                   response.headers, response.content, response.url)

    @classmethod
    def from_httpx(cls, response, body):
        return cls(response.status_code, response.reason_phrase,
                   response.headers.items(), body, str(response.url))

    def open_stream(self):
        '''Return a byte stream over the body, or None for an empty body.'''
        if not self.body:
            return None
        return io.BytesIO(self.body)

    def raise_for_status(self):
        if self.status_code < 400:
            return

        # Jenkins's funky authentication means its nigh impossible to
        # distinguish errors.
        if self.status_code in [401, 403, 500]:
            msg = 'Error in request. ' + \
                  'Possibly authentication failed [%s]: %s' % (
                      self.status_code, self.reason)
            if self.body:
                msg += '\n' + self.body.decode(
                    resolve_encoding(self.encoding), 'replace')
            raise JenkinsException(msg)
        elif self.status_code == 404:
            raise NotFoundException('Requested item could not be found')
        raise BadHTTPException('Error in request [%s]: %s' % (
            self.status_code, self.reason))


class WrappedSession(requests.Session):
    """A wrapper for requests.Session to override 'verify' property, ignoring REQUESTS_CA_BUNDLE environment variable.

    This is a workaround for https://github.com/kennethreitz/requests/issues/3829
    """

    def merge_environment_settings(self, url, proxies, stream, verify, *args,
                                   **kwargs):
        if self.verify is False:
            verify = False

        return super(WrappedSession, self).merge_environment_settings(
            url, proxies, stream, verify, *args, **kwargs)


def make_session(context):
    '''Create the blocking session for a :class:`JenkinsContext`.'''
    session = WrappedSession()
    if context.username is not None and context.password is not None:
        session.auth = requests.auth.HTTPBasicAuth(
            context.username, context.password)
    if not context.verify:
        requests.packages.urllib3.disable_warnings(InsecureRequestWarning)
        session.verify = False
    return session


async def _discard(operation):
    '''Stop an operation whose result nobody will use and close that result.'''
    if not operation.done():
        operation.cancel()
        return
    if operation.cancelled() or operation.exception() is not None:
        return
    aclose = getattr(operation.result(), 'aclose', None)
    if aclose is not None:
        await aclose()


async def _cancellable(awaitable, cancel_event):
    '''Await ``awaitable`` unless ``cancel_event`` is set first.

    When the event wins the in-flight operation is cancelled and
    :class:`asyncio.CancelledError` is raised. A result the operation
    produced anyway (such as a streamed ``httpx.Response``) is closed.
    '''
    if cancel_event is None:
        return await awaitable

    operation = asyncio.ensure_future(awaitable)
    cancelled = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait((operation, cancelled),
                           return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        await _discard(operation)
        raise
    finally:
        cancelled.cancel()

    if operation.done():
        return operation.result()

    operation.cancel()
    try:
        await asyncio.wait((operation,))
    finally:
        await _discard(operation)
    raise asyncio.CancelledError('command cancelled')


class CommandExecutor(object):
    '''Run commands against the server described by a context.

    :param context: :class:`jenkins_commands.config.JenkinsContext`
    :param session: ``requests.Session`` used by :meth:`execute`
    :param async_transport: ``httpx.AsyncBaseTransport`` used by
        :meth:`execute_async` (default: network transport)
    '''

    def __init__(self, context, session=None, async_transport=None):
        self.context = context
        self._session = session if session is not None \
            else make_session(context)
        self._async_transport = async_transport

    def _begin(self, command):
        command.reset()
        request = requests.Request(
            'GET', str(urljoin(self.context.url, command.path)),
            headers=dict(self.context.extra_headers))
        command.prepare_request(request)
        logger.debug('%s %s [%s]', request.method, request.url,
                     command.kind.value)
        return request

    def _finish(self, command, response):
        logger.debug('%s answered [%s] with %d bytes', response.url,
                     response.status_code, len(response.body or b''))
        command.interpret_response(response)
        return command.result

    def _send(self, request):
        prepared = self._session.prepare_request(request)
        # requests.Session.send() does not honor env settings by design
        # see https://github.com/requests/requests/issues/2807
        settings = self._session.merge_environment_settings(
            prepared.url, {}, True, self._session.verify, None)
        settings['timeout'] = self.context.timeout
        response = self._session.send(prepared, **settings)
        try:
            return ResponseEnvelope.from_requests(response)
        finally:
            response.close()

    def _async_client(self):
        kwargs = {'timeout': self.context.timeout,
                  'verify': self.context.verify}
        if self.context.username is not None and \
                self.context.password is not None:
            kwargs['auth'] = httpx.BasicAuth(self.context.username,
                                             self.context.password)
        if self._async_transport is not None:
            kwargs['transport'] = self._async_transport
        return httpx.AsyncClient(**kwargs)

    async def _send_async(self, request, cancel_event):
        async with self._async_client() as client:
            outgoing = client.build_request(
                request.method, request.url, headers=request.headers,
                content=request.data or None)
            response = await _cancellable(
                client.send(outgoing, stream=True), cancel_event)
            try:
                body = await _cancellable(response.aread(), cancel_event)
            finally:
                await response.aclose()
        return ResponseEnvelope.from_httpx(response, body)

    def execute(self, command):
        '''Execute ``command`` and block until it has been interpreted.

        :returns: the command result
        '''
        request = self._begin(command)
        return self._finish(command, self._send(request))

    async def execute_async(self, command, cancel_event=None):
        '''Execute ``command`` without blocking the event loop.

        :param cancel_event: ``asyncio.Event`` which aborts the exchange
            when set
        :returns: the command result
        :raises asyncio.CancelledError: when cancelled before the response
            body has been received
        '''
        if cancel_event is not None and cancel_event.is_set():
            raise asyncio.CancelledError('command cancelled before sending')
        request = self._begin(command)
        response = await self._send_async(request, cancel_event)
        return self._finish(command, response)

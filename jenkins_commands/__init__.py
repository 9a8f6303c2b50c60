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
# Authors:
# Ken Conley <kwc@willowgarage.com>
# James Page <james.page@canonical.com>
# Tully Foote <tfoote@willowgarage.com>
# Matthew Gertner <matthew.gertner@gmail.com>

'''
.. module:: jenkins_commands
    :platform: Unix, Windows
    :synopsis: Python API to run build commands against Jenkins
    :noindex:

Every build operation is available twice: a blocking method and an
``_async`` coroutine which accepts an optional ``asyncio.Event`` that
aborts the request when set.
'''

import logging

from jenkins_commands import commands
from jenkins_commands.commands import CommandKind
from jenkins_commands.config import JenkinsContext  # noqa: F401
from jenkins_commands.config import make_context
from jenkins_commands.exceptions import BadHTTPException  # noqa: F401
from jenkins_commands.exceptions import EmptyResponseException  # noqa: F401
from jenkins_commands.exceptions import JenkinsBuildException
from jenkins_commands.exceptions import JenkinsException  # noqa: F401
from jenkins_commands.exceptions import NotFoundException
from jenkins_commands.executor import CommandExecutor
from jenkins_commands.models import JenkinsBuild  # noqa: F401
from jenkins_commands.models import ProgressiveHtmlResponse  # noqa: F401
from jenkins_commands.models import ProgressiveTextResponse  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


class Jenkins(object):

    def __init__(self, url, username=None, password=None, timeout=None,
                 suppress_action_errors=True, session=None,
                 async_transport=None):
        '''Create handle to Jenkins instance.

        Read operations raise :class:`JenkinsBuildException` on failure.
        Some Jenkins versions answer a successful stop, toggle keep or
        promote request with an error status, so failures of those three
        operations are logged and ignored unless
        ``suppress_action_errors`` is ``False``.

        :param url: URL of Jenkins server, ``str``
        :param username: Server username, ``str``
        :param password: Server password or API token, ``str``
        :param timeout: Request timeout in secs (default: not set), ``float``
        :param suppress_action_errors: Ignore stop/toggle/promote
            failures, ``bool``
        :param session: ``requests.Session`` for blocking calls
        :param async_transport: ``httpx`` transport for ``_async`` calls
        '''
        self._executor = CommandExecutor(
            make_context(url, username, password, timeout,
                         suppress_action_errors),
            session=session, async_transport=async_transport)

    @property
    def context(self):
        ''':class:`JenkinsContext` the commands are built with.'''
        return self._executor.context

    @property
    def server(self):
        return self.context.url

    def _command(self, kind, *args):
        return commands.make_command(kind, self.context, *args)

    def _read(self, operation, command):
        try:
            return self._executor.execute(command)
        except Exception as error:
            raise JenkinsBuildException(operation, command.job_name,
                                        command.build_number,
                                        error) from error

    async def _read_async(self, operation, command, cancel_event):
        try:
            return await self._executor.execute_async(command, cancel_event)
        except Exception as error:
            raise JenkinsBuildException(operation, command.job_name,
                                        command.build_number,
                                        error) from error

    def _action_failed(self, operation, command, error):
        if not self.context.suppress_action_errors:
            raise JenkinsBuildException(operation, command.job_name,
                                        command.build_number,
                                        error) from error
        logger.warning('Ignoring failure to %s for job[%s] number[%s]: %s',
                       operation, command.job_name, command.build_number,
                       error)

    def _act(self, operation, command):
        try:
            self._executor.execute(command)
        except Exception as error:
            self._action_failed(operation, command, error)

    async def _act_async(self, operation, command, cancel_event):
        try:
            await self._executor.execute_async(command, cancel_event)
        except Exception as error:
            self._action_failed(operation, command, error)

    def get_build_info(self, name, number):
        '''Get build information.

        :param name: Job name, ``str``
        :param number: Build number or token such as ``lastBuild``,
            ``int`` or ``str``
        :returns: :class:`JenkinsBuild`

        Example::

            >>> build = server.get_build_info('build_name', 87)
            >>> print(build.result, build.duration)
            SUCCESS 8826
        '''
        return self._read('get build info', self._command(
            CommandKind.BUILD_INFO, name, number))

    async def get_build_info_async(self, name, number, cancel_event=None):
        '''Coroutine version of :meth:`get_build_info`.'''
        return await self._read_async(
            'get build info',
            self._command(CommandKind.BUILD_INFO, name, number),
            cancel_event)

    def get_build_console_output(self, name, number):
        '''Get build console text.

        :param name: Job name, ``str``
        :param number: Build number, ``int``
        :returns: Build console output, ``str``, or None if the server
            sent no body
        '''
        return self._read('get console output', self._command(
            CommandKind.CONSOLE_TEXT, name, number))

    async def get_build_console_output_async(self, name, number,
                                             cancel_event=None):
        return await self._read_async(
            'get console output',
            self._command(CommandKind.CONSOLE_TEXT, name, number),
            cancel_event)

    def get_build_console_html(self, name, number):
        '''Get build console output decorated as HTML.

        :param name: Job name, ``str``
        :param number: Build number, ``int``
        :returns: HTML page, ``str``, or None if the server sent no body
        '''
        return self._read('get console html', self._command(
            CommandKind.CONSOLE_HTML, name, number))

    async def get_build_console_html_async(self, name, number,
                                           cancel_event=None):
        return await self._read_async(
            'get console html',
            self._command(CommandKind.CONSOLE_HTML, name, number),
            cancel_event)

    def get_build_progressive_text(self, name, number, start=0):
        '''Get the console text written since ``start``.

        Poll with the returned ``size`` as the next ``start`` for as long
        as ``more_data`` is true.

        :param name: Job name, ``str``
        :param number: Build number, ``int``
        :param start: Byte offset to read from, ``int``
        :returns: :class:`ProgressiveTextResponse`

        Example::

            >>> start = 0
            >>> while True:
            ...     chunk = server.get_build_progressive_text('job', 42, start)
            ...     print(chunk.text, end='')
            ...     start = chunk.size
            ...     if not chunk.more_data:
            ...         break
        '''
        return self._read(
            'get progressive text',
            self._command(CommandKind.PROGRESSIVE_TEXT, name, number, start))

    async def get_build_progressive_text_async(self, name, number, start=0,
                                               cancel_event=None):
        return await self._read_async(
            'get progressive text',
            self._command(CommandKind.PROGRESSIVE_TEXT, name, number, start),
            cancel_event)

    def get_build_progressive_html(self, name, number, start=0):
        '''Get the console HTML written since ``start``.

        :param name: Job name, ``str``
        :param number: Build number, ``int``
        :param start: Byte offset to read from, ``int``
        :returns: :class:`ProgressiveHtmlResponse`
        '''
        return self._read(
            'get progressive html',
            self._command(CommandKind.PROGRESSIVE_HTML, name, number, start))

    async def get_build_progressive_html_async(self, name, number, start=0,
                                               cancel_event=None):
        return await self._read_async(
            'get progressive html',
            self._command(CommandKind.PROGRESSIVE_HTML, name, number, start),
            cancel_event)

    def stop_build(self, name, number):
        '''Stop a running Jenkins build.

        :param name: Name of Jenkins job, ``str``
        :param number: Jenkins build number for the job, ``int``
        '''
        self._act('stop build', self._command(
            CommandKind.STOP, name, number))

    async def stop_build_async(self, name, number, cancel_event=None):
        await self._act_async(
            'stop build',
            self._command(CommandKind.STOP, name, number),
            cancel_event)

    def toggle_build_keep_log(self, name, number):
        '''Toggle whether Jenkins keeps the build forever.

        :param name: Name of Jenkins job, ``str``
        :param number: Jenkins build number for the job, ``int``
        '''
        self._act('toggle keep log', self._command(
            CommandKind.TOGGLE_KEEP, name, number))

    async def toggle_build_keep_log_async(self, name, number,
                                          cancel_event=None):
        await self._act_async(
            'toggle keep log',
            self._command(CommandKind.TOGGLE_KEEP, name, number),
            cancel_event)

    def promote_build(self, name, number, level):
        '''Promote a build.

        :param name: Name of Jenkins job, ``str``
        :param number: Jenkins build number for the job, ``int``
        :param level: Promotion level, ``int``
        '''
        self._act('promote build', self._command(
            CommandKind.PROMOTE, name, number, level))

    async def promote_build_async(self, name, number, level,
                                  cancel_event=None):
        await self._act_async(
            'promote build',
            self._command(CommandKind.PROMOTE, name, number, level),
            cancel_event)

    def _store_crumb(self, crumb):
        self._executor.context = self.context._replace(crumb=crumb)
        return crumb

    def update_security_crumb(self):
        '''Fetch the CSRF crumb sent along with every POST request.

        :returns: ``(header, crumb)`` tuple, or None when the server has no
            crumb issuer
        '''
        try:
            crumb = self._executor.execute(
                self._command(CommandKind.CRUMB))
        except NotFoundException:
            crumb = None
        return self._store_crumb(crumb)

    async def update_security_crumb_async(self, cancel_event=None):
        try:
            crumb = await self._executor.execute_async(
                self._command(CommandKind.CRUMB), cancel_event)
        except NotFoundException:
            crumb = None
        return self._store_crumb(crumb)

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
.. module:: jenkins_commands.commands
    :platform: Unix, Windows
    :synopsis: One command class per Jenkins build operation

Every command fixes its path and HTTP method when it is constructed and
implements two hooks used by
:class:`jenkins_commands.executor.CommandExecutor`:

``prepare_request(request)``
    shapes the outgoing ``requests.Request`` before it is sent.

``interpret_response(response)``
    consumes the :class:`jenkins_commands.executor.ResponseEnvelope` and
    stores the typed result.
'''

import enum
import logging
from urllib.parse import quote
import xml.etree.ElementTree as ET

from jenkins_commands import endpoints
from jenkins_commands.exceptions import EmptyResponseException
from jenkins_commands.exceptions import JenkinsException
from jenkins_commands.executor import resolve_encoding
from jenkins_commands.models import JenkinsBuild
from jenkins_commands.models import ProgressiveHtmlResponse
from jenkins_commands.models import ProgressiveTextResponse

logger = logging.getLogger(__name__)

_UNSET = object()


class CommandKind(enum.Enum):
    BUILD_INFO = 'build_info'
    CONSOLE_TEXT = 'console_text'
    CONSOLE_HTML = 'console_html'
    PROGRESSIVE_TEXT = 'progressive_text'
    PROGRESSIVE_HTML = 'progressive_html'
    STOP = 'stop'
    TOGGLE_KEEP = 'toggle_keep'
    PROMOTE = 'promote'
    CRUMB = 'crumb'


def get_job_folder(name):
    '''Return the name and folder (see cloudbees plugin).

    Url request should take into account folder path when the job name
    specify it (ex.: 'folder/job')

    :param name: Job name, ``str``
    :returns: Tuple [ 'folder path for Request', 'Name of job without folder path' ]
    '''
    a_path = name.split('/')
    short_name = a_path[-1]
    folder_url = (('job/' + '/job/'.join(a_path[:-1]) + '/')
                  if len(a_path) > 1 else '')

    return folder_url, short_name


def _quote(value):
    return quote(str(value).encode('utf8'))


def _check_position(name, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("'%s' must be an integer not %r" % (name, value))
    if value < 0:
        raise ValueError("'%s' must be >= 0 not %d" % (name, value))


def read_text(response):
    '''Decode the whole response body.

    :returns: body as ``str``, or None when the response has no body
    '''
    stream = response.open_stream()
    if stream is None:
        return None
    with stream:
        return stream.read().decode(resolve_encoding(response.encoding),
                                    'replace')


def read_xml(response):
    '''Parse the response body as XML.

    :returns: root ``Element``, or None when the response has no body
    :raises xml.etree.ElementTree.ParseError: on malformed documents
    '''
    text = read_text(response)
    if text is None:
        return None
    return ET.fromstring(text)


class JenkinsCommand(object):
    '''Base class of all commands.'''

    kind = None
    http_method = 'GET'

    def __init__(self, context, path):
        self.context = context
        self._path = path
        self._result = _UNSET

    def __repr__(self):
        return '<%s %s %s>' % (type(self).__name__, self.method, self.path)

    @property
    def path(self):
        '''Request path relative to the server URL.'''
        return self._path

    @property
    def method(self):
        return self.http_method

    @property
    def result(self):
        '''Interpreted result, None until one has been stored.'''
        if self._result is _UNSET:
            return None
        return self._result

    @property
    def has_result(self):
        return self._result is not _UNSET

    def reset(self):
        '''Forget the result of a previous execution.'''
        self._result = _UNSET

    def _set_result(self, value):
        if self._result is not _UNSET:
            raise JenkinsException('result of %s command already set'
                                   % self.kind.value)
        self._result = value

    def prepare_request(self, request):
        request.method = self.method
        if self.method == 'POST' and self.context.crumb:
            field, crumb = self.context.crumb
            request.headers[field] = crumb

    def interpret_response(self, response):
        response.raise_for_status()


class BuildCommand(JenkinsCommand):
    '''Command addressing one build of one job.

    :param context: :class:`jenkins_commands.config.JenkinsContext`
    :param job_name: Job name, may contain folders, ``str``
    :param build_number: Build number or token such as ``lastBuild``,
        ``int`` or ``str``
    '''

    endpoint = None

    def __init__(self, context, job_name, build_number, **params):
        if not job_name:
            raise ValueError("'job_name' cannot be empty!")
        if build_number is None or build_number == '':
            raise ValueError("'build_number' cannot be empty!")
        self.job_name = job_name
        self.build_number = build_number

        folder_url, short_name = get_job_folder(job_name)
        params.update(folder_url=_quote(folder_url),
                      short_name=_quote(short_name),
                      number=_quote(build_number))
        super(BuildCommand, self).__init__(context, self.endpoint % params)


class BuildGetCommand(BuildCommand):
    kind = CommandKind.BUILD_INFO
    endpoint = endpoints.BUILD_INFO

    def interpret_response(self, response):
        super(BuildGetCommand, self).interpret_response(response)
        try:
            document = read_xml(response)
        except ET.ParseError as e:
            raise JenkinsException(
                'Could not parse XML info for job[%s] number[%s]: %s'
                % (self.job_name, self.build_number, e))
        if document is None:
            raise EmptyResponseException(
                'Error communicating with server[%s]: '
                'empty response' % self.context.url)
        self._set_result(JenkinsBuild(document))


class BuildTextCommand(BuildCommand):
    kind = CommandKind.CONSOLE_TEXT
    endpoint = endpoints.BUILD_CONSOLE_TEXT

    def interpret_response(self, response):
        super(BuildTextCommand, self).interpret_response(response)
        text = read_text(response)
        if text is not None:
            self._set_result(text)


class BuildHtmlCommand(BuildTextCommand):
    kind = CommandKind.CONSOLE_HTML
    endpoint = endpoints.BUILD_CONSOLE_HTML


class BuildProgressiveTextCommand(BuildCommand):
    '''Fetch the console output produced since ``start``.

    Jenkins answers with the new bytes only and reports the offset to ask
    for next in ``X-Text-Size``; ``X-More-Data: true`` means the build is
    still writing output.
    '''

    kind = CommandKind.PROGRESSIVE_TEXT
    endpoint = endpoints.BUILD_PROGRESSIVE_TEXT

    def __init__(self, context, job_name, build_number, start=0):
        _check_position('start', start)
        self.start = start
        super(BuildProgressiveTextCommand, self).__init__(
            context, job_name, build_number, start=start)

    def _next_offset(self, response):
        size = response.headers.get(endpoints.TEXT_SIZE_HEADER)
        if size:
            try:
                return int(size)
            except ValueError:
                logger.debug('Ignoring malformed %s header: %r',
                             endpoints.TEXT_SIZE_HEADER, size)
        return self.start + len(response.body or b'')

    def _more_data(self, response):
        value = response.headers.get(endpoints.MORE_DATA_HEADER, '')
        return value.strip().lower() == 'true'

    def _make_result(self, text, response):
        return ProgressiveTextResponse(text, self._next_offset(response),
                                       self._more_data(response))

    def interpret_response(self, response):
        super(BuildProgressiveTextCommand, self).interpret_response(response)
        text = read_text(response) or ''
        self._set_result(self._make_result(text, response))


class BuildProgressiveHtmlCommand(BuildProgressiveTextCommand):
    kind = CommandKind.PROGRESSIVE_HTML
    endpoint = endpoints.BUILD_PROGRESSIVE_HTML

    def _make_result(self, text, response):
        return ProgressiveHtmlResponse(
            text, self._next_offset(response), self._more_data(response),
            response.headers.get(endpoints.CONSOLE_ANNOTATOR_HEADER))


class BuildStopCommand(BuildCommand):
    kind = CommandKind.STOP
    endpoint = endpoints.STOP_BUILD
    http_method = 'POST'


class BuildToggleKeepCommand(BuildCommand):
    kind = CommandKind.TOGGLE_KEEP
    endpoint = endpoints.TOGGLE_KEEP_BUILD
    http_method = 'POST'

    def interpret_response(self, response):
        super(BuildToggleKeepCommand, self).interpret_response(response)
        # the body only matters when it is an error document
        try:
            document = read_xml(response)
        except (ET.ParseError, ValueError) as e:
            logger.debug('Ignoring unparsable answer to %r: %s', self, e)
            return
        if document is not None:
            logger.debug('%r answered with <%s>', self, document.tag)


class BuildPromoteCommand(BuildToggleKeepCommand):
    kind = CommandKind.PROMOTE
    endpoint = endpoints.PROMOTE_BUILD

    def __init__(self, context, job_name, build_number, level):
        _check_position('level', level)
        self.level = level
        super(BuildPromoteCommand, self).__init__(
            context, job_name, build_number, level=level)


class CrumbGetCommand(JenkinsCommand):
    '''Fetch the CSRF crumb which POST requests have to carry.'''

    kind = CommandKind.CRUMB

    def __init__(self, context):
        super(CrumbGetCommand, self).__init__(context, endpoints.CRUMB_URL)

    def interpret_response(self, response):
        super(CrumbGetCommand, self).interpret_response(response)
        try:
            document = read_xml(response)
        except ET.ParseError as e:
            raise JenkinsException('Could not parse crumb: %s' % e)
        if document is None:
            raise EmptyResponseException(
                'Error communicating with server[%s]: '
                'empty response' % self.context.url)
        field = document.findtext('crumbRequestField')
        crumb = document.findtext('crumb')
        if not field or not crumb:
            raise JenkinsException('Crumb issuer returned an incomplete '
                                   'answer: <%s>' % document.tag)
        self._set_result((field, crumb))


COMMANDS = {
    CommandKind.BUILD_INFO: BuildGetCommand,
    CommandKind.CONSOLE_TEXT: BuildTextCommand,
    CommandKind.CONSOLE_HTML: BuildHtmlCommand,
    CommandKind.PROGRESSIVE_TEXT: BuildProgressiveTextCommand,
    CommandKind.PROGRESSIVE_HTML: BuildProgressiveHtmlCommand,
    CommandKind.STOP: BuildStopCommand,
    CommandKind.TOGGLE_KEEP: BuildToggleKeepCommand,
    CommandKind.PROMOTE: BuildPromoteCommand,
    CommandKind.CRUMB: CrumbGetCommand,
}


def make_command(kind, context, *args, **kwargs):
    '''Construct the command registered for ``kind``.

    :param kind: :class:`CommandKind` member
    :param context: :class:`jenkins_commands.config.JenkinsContext`
    :returns: :class:`JenkinsCommand`
    :raises ValueError: when ``kind`` is unknown or the arguments are
        invalid
    '''
    try:
        command_class = COMMANDS[kind]
    except KeyError:
        raise ValueError('Unknown command kind %r' % (kind,))
    return command_class(context, *args, **kwargs)

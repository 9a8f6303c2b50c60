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
.. module:: jenkins_commands.models
    :platform: Unix, Windows
    :synopsis: Results returned by the build commands
'''

import collections

ProgressiveTextResponse = collections.namedtuple(
    'ProgressiveTextResponse', ['text', 'size', 'more_data'])

ProgressiveHtmlResponse = collections.namedtuple(
    'ProgressiveHtmlResponse', ['html', 'size', 'more_data', 'annotator'])


def _to_bool(value):
    return value is not None and value.strip().lower() == 'true'


def _to_int(value):
    if value is None or not value.strip():
        return None
    return int(value)


class JenkinsBuild(object):
    '''A build document as returned by ``job/<name>/<number>/api/xml``.

    Only the fields shared by every build type are exposed as
    properties; the parsed document stays available as :attr:`element`
    for anything type specific.
    '''

    def __init__(self, element):
        self.element = element

    def __repr__(self):
        return '<JenkinsBuild %s #%s>' % (self.class_name, self.number)

    @property
    def class_name(self):
        '''Jenkins class of the build, e.g. ``hudson.model.FreeStyleBuild``.'''
        return self.element.get('_class') or self.element.tag

    @property
    def number(self):
        return _to_int(self.element.findtext('number'))

    @property
    def building(self):
        return _to_bool(self.element.findtext('building'))

    @property
    def result(self):
        return self.element.findtext('result')

    @property
    def duration(self):
        return _to_int(self.element.findtext('duration'))

    @property
    def timestamp(self):
        return _to_int(self.element.findtext('timestamp'))

    @property
    def url(self):
        return self.element.findtext('url')

    @property
    def keep_log(self):
        return _to_bool(self.element.findtext('keepLog'))

    @property
    def display_name(self):
        return self.element.findtext('displayName')

    @property
    def full_display_name(self):
        return self.element.findtext('fullDisplayName')

    @property
    def description(self):
        return self.element.findtext('description')

    @property
    def built_on(self):
        return self.element.findtext('builtOn')

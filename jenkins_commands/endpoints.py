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
.. module:: jenkins_commands.endpoints
    :platform: Unix, Windows
    :synopsis: Path templates for the Jenkins build endpoints
'''

# REST Endpoints
CRUMB_URL = 'crumbIssuer/api/xml'
BUILD_INFO = '%(folder_url)sjob/%(short_name)s/%(number)s/api/xml'
BUILD_CONSOLE_TEXT = '%(folder_url)sjob/%(short_name)s/%(number)s/consoleText'
BUILD_CONSOLE_HTML = '%(folder_url)sjob/%(short_name)s/%(number)s/consoleFull'
BUILD_PROGRESSIVE_TEXT = '%(folder_url)sjob/%(short_name)s/%(number)s/logText/progressiveText?start=%(start)d'
BUILD_PROGRESSIVE_HTML = '%(folder_url)sjob/%(short_name)s/%(number)s/logText/progressiveHtml?start=%(start)d'
STOP_BUILD = '%(folder_url)sjob/%(short_name)s/%(number)s/stop'
TOGGLE_KEEP_BUILD = '%(folder_url)sjob/%(short_name)s/%(number)s/toggleLogKeep'
PROMOTE_BUILD = '%(folder_url)sjob/%(short_name)s/%(number)s/promote/?level=%(level)d'

# Response headers of the progressive log endpoints
TEXT_SIZE_HEADER = 'X-Text-Size'
MORE_DATA_HEADER = 'X-More-Data'
CONSOLE_ANNOTATOR_HEADER = 'X-ConsoleAnnot'

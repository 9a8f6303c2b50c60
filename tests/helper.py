import io

import httpx
import requests


def build_response_mock(status_code, body=None, headers=None, reason=None,
                        url=None):
    '''Build a real ``requests.Response`` whose body can be streamed.'''
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url

    if headers is not None:
        for k, v in headers.items():
            response.headers[k] = v

    if isinstance(body, str):
        body = body.encode('utf-8')
    response.raw = io.BytesIO(body or b'')

    return response


def build_transport(status_code=200, body=None, headers=None, seen=None):
    '''Build an ``httpx.MockTransport`` answering every request the same.

    Requests are appended to ``seen`` when it is given.
    '''
    if isinstance(body, str):
        body = body.encode('utf-8')

    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, content=body or b'',
                              headers=headers)

    return httpx.MockTransport(handler)


BUILD_XML = '''<?xml version='1.0' encoding='UTF-8'?>
<freeStyleBuild _class="hudson.model.FreeStyleBuild">
  <building>false</building>
  <description>nightly</description>
  <displayName>#87</displayName>
  <duration>8826</duration>
  <fullDisplayName>build_war #87</fullDisplayName>
  <keepLog>false</keepLog>
  <number>87</number>
  <result>SUCCESS</result>
  <timestamp>1324317717000</timestamp>
  <url>http://example.com/job/build_war/87/</url>
  <builtOn></builtOn>
</freeStyleBuild>'''

CRUMB_XML = '''<defaultCrumbIssuer _class="hudson.security.csrf.DefaultCrumbIssuer">
  <crumb>dab177f483b3dd93483ef6716d8e792d</crumb>
  <crumbRequestField>Jenkins-Crumb</crumbRequestField>
</defaultCrumbIssuer>'''

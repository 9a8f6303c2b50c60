import unittest

import requests

from jenkins_commands import commands
from jenkins_commands.config import JenkinsContext
from jenkins_commands.exceptions import JenkinsException
from jenkins_commands.executor import ResponseEnvelope


def make_context(crumb=None):
    return JenkinsContext(url='http://example.com/', username=None,
                          password=None, timeout=None, verify=True,
                          extra_headers=(), crumb=crumb,
                          suppress_action_errors=True)


class JenkinsCommandPathTest(unittest.TestCase):

    def setUp(self):
        super(JenkinsCommandPathTest, self).setUp()
        self.context = make_context()

    def test_build_info(self):
        cmd = commands.BuildGetCommand(self.context, 'deploy-service', 42)
        self.assertEqual(cmd.path, 'job/deploy-service/42/api/xml')
        self.assertEqual(cmd.method, 'GET')
        self.assertEqual(cmd.kind, commands.CommandKind.BUILD_INFO)

    def test_console_text(self):
        cmd = commands.BuildTextCommand(self.context, 'deploy-service', 42)
        self.assertEqual(cmd.path, 'job/deploy-service/42/consoleText')
        self.assertEqual(cmd.method, 'GET')

    def test_console_html(self):
        cmd = commands.BuildHtmlCommand(self.context, 'deploy-service', 42)
        self.assertEqual(cmd.path, 'job/deploy-service/42/consoleFull')
        self.assertEqual(cmd.method, 'GET')
        self.assertEqual(cmd.kind, commands.CommandKind.CONSOLE_HTML)

    def test_progressive_text(self):
        cmd = commands.BuildProgressiveTextCommand(
            self.context, 'deploy-service', 42, start=100)
        self.assertEqual(
            cmd.path,
            'job/deploy-service/42/logText/progressiveText?start=100')
        self.assertEqual(cmd.method, 'GET')

    def test_progressive_html(self):
        cmd = commands.BuildProgressiveHtmlCommand(
            self.context, 'deploy-service', 42)
        self.assertEqual(
            cmd.path,
            'job/deploy-service/42/logText/progressiveHtml?start=0')
        self.assertEqual(cmd.kind, commands.CommandKind.PROGRESSIVE_HTML)

    def test_stop(self):
        cmd = commands.BuildStopCommand(self.context, 'deploy-service', 42)
        self.assertEqual(cmd.path, 'job/deploy-service/42/stop')
        self.assertEqual(cmd.method, 'POST')

    def test_toggle_keep(self):
        cmd = commands.BuildToggleKeepCommand(
            self.context, 'deploy-service', 42)
        self.assertEqual(cmd.path, 'job/deploy-service/42/toggleLogKeep')
        self.assertEqual(cmd.method, 'POST')

    def test_promote(self):
        cmd = commands.BuildPromoteCommand(
            self.context, 'deploy-service', 42, 3)
        self.assertEqual(cmd.path, 'job/deploy-service/42/promote/?level=3')
        self.assertEqual(cmd.method, 'POST')

    def test_crumb(self):
        cmd = commands.CrumbGetCommand(self.context)
        self.assertEqual(cmd.path, 'crumbIssuer/api/xml')
        self.assertEqual(cmd.method, 'GET')

    def test_build_token(self):
        cmd = commands.BuildTextCommand(
            self.context, 'deploy-service', 'lastSuccessfulBuild')
        self.assertEqual(cmd.path,
                         'job/deploy-service/lastSuccessfulBuild/consoleText')

    def test_in_folder(self):
        cmd = commands.BuildStopCommand(self.context, 'a Folder/Test Job', 52)
        self.assertEqual(cmd.path, 'job/a%20Folder/job/Test%20Job/52/stop')

    def test_no_query_without_parameters(self):
        for cls in (commands.BuildGetCommand, commands.BuildTextCommand,
                    commands.BuildHtmlCommand, commands.BuildStopCommand,
                    commands.BuildToggleKeepCommand):
            cmd = cls(self.context, 'deploy-service', 42)
            self.assertNotIn('?', cmd.path)

    def test_path_is_read_only(self):
        cmd = commands.BuildStopCommand(self.context, 'deploy-service', 42)
        with self.assertRaises(AttributeError):
            cmd.path = 'job/other/1/stop'
        with self.assertRaises(AttributeError):
            cmd.method = 'GET'


class JenkinsCommandValidationTest(unittest.TestCase):

    def setUp(self):
        super(JenkinsCommandValidationTest, self).setUp()
        self.context = make_context()

    def test_empty_job_name(self):
        for job_name in ('', None):
            with self.assertRaises(ValueError) as context_manager:
                commands.BuildStopCommand(self.context, job_name, 42)
            self.assertEqual(str(context_manager.exception),
                             "'job_name' cannot be empty!")

    def test_empty_build_number(self):
        for number in ('', None):
            with self.assertRaises(ValueError) as context_manager:
                commands.BuildTextCommand(self.context, 'deploy-service',
                                          number)
            self.assertEqual(str(context_manager.exception),
                             "'build_number' cannot be empty!")

    def test_build_number_zero_is_valid(self):
        cmd = commands.BuildTextCommand(self.context, 'deploy-service', 0)
        self.assertEqual(cmd.path, 'job/deploy-service/0/consoleText')

    def test_negative_start(self):
        with self.assertRaises(ValueError) as context_manager:
            commands.BuildProgressiveTextCommand(
                self.context, 'deploy-service', 42, start=-1)
        self.assertEqual(str(context_manager.exception),
                         "'start' must be >= 0 not -1")

    def test_non_integer_level(self):
        with self.assertRaises(ValueError):
            commands.BuildPromoteCommand(
                self.context, 'deploy-service', 42, '1')


class JenkinsCommandHooksTest(unittest.TestCase):

    def test_prepare_post(self):
        cmd = commands.BuildStopCommand(make_context(), 'deploy-service', 42)
        request = requests.Request('GET', 'http://example.com/')

        cmd.prepare_request(request)

        self.assertEqual(request.method, 'POST')
        self.assertEqual(request.headers, {})

    def test_prepare_post_with_crumb(self):
        cmd = commands.BuildToggleKeepCommand(
            make_context(crumb=('Jenkins-Crumb', 'abc')), 'deploy-service', 42)
        request = requests.Request('GET', 'http://example.com/')

        cmd.prepare_request(request)

        self.assertEqual(request.method, 'POST')
        self.assertEqual(request.headers['Jenkins-Crumb'], 'abc')

    def test_prepare_get_ignores_crumb(self):
        cmd = commands.BuildTextCommand(
            make_context(crumb=('Jenkins-Crumb', 'abc')), 'deploy-service', 42)
        request = requests.Request('GET', 'http://example.com/')

        cmd.prepare_request(request)

        self.assertEqual(request.method, 'GET')
        self.assertNotIn('Jenkins-Crumb', request.headers)

    def test_text_empty_body(self):
        cmd = commands.BuildTextCommand(make_context(), 'deploy-service', 42)

        cmd.interpret_response(ResponseEnvelope(200, 'OK', {}, b''))

        self.assertFalse(cmd.has_result)
        self.assertIsNone(cmd.result)

    def test_text_declared_encoding(self):
        cmd = commands.BuildTextCommand(make_context(), 'deploy-service', 42)
        response = ResponseEnvelope(
            200, 'OK', {'Content-Type': 'text/plain; charset=iso-8859-1'},
            u'caf\xe9'.encode('iso-8859-1'))

        cmd.interpret_response(response)

        self.assertEqual(cmd.result, u'caf\xe9')

    def test_text_unknown_encoding_falls_back_to_utf8(self):
        cmd = commands.BuildTextCommand(make_context(), 'deploy-service', 42)
        response = ResponseEnvelope(
            200, 'OK', {'Content-Type': 'text/plain; charset=klingon'},
            u'caf\xe9'.encode('utf-8'))

        cmd.interpret_response(response)

        self.assertEqual(cmd.result, u'caf\xe9')

    def test_text_undecodable_bytes_are_replaced(self):
        cmd = commands.BuildTextCommand(make_context(), 'deploy-service', 42)
        response = ResponseEnvelope(
            200, 'OK', {'Content-Type': 'text/plain'},
            b'compiling caf\xe9.c\n')

        cmd.interpret_response(response)

        self.assertEqual(cmd.result, u'compiling caf\ufffd.c\n')

    def test_progressive_text_split_character(self):
        body = u'€ ok'.encode('utf-8')[1:]
        cmd = commands.BuildProgressiveTextCommand(
            make_context(), 'deploy-service', 42, start=101)

        cmd.interpret_response(ResponseEnvelope(200, 'OK', {}, body))

        self.assertEqual(cmd.result.text, u'\ufffd\ufffd ok')
        self.assertEqual(cmd.result.size, 101 + len(body))

    def test_progressive_text(self):
        new_output = b'x' * 36 + b'\n'
        cmd = commands.BuildProgressiveTextCommand(
            make_context(), 'deploy-service', 42, start=100)
        response = ResponseEnvelope(
            200, 'OK', {'X-Text-Size': '137', 'X-More-Data': 'true'},
            new_output)

        cmd.interpret_response(response)

        self.assertEqual(cmd.result.text, new_output.decode('utf-8'))
        self.assertEqual(cmd.result.size, 137)
        self.assertTrue(cmd.result.more_data)

    def test_progressive_text_without_size_header(self):
        new_output = b'y' * 37
        cmd = commands.BuildProgressiveTextCommand(
            make_context(), 'deploy-service', 42, start=100)

        cmd.interpret_response(ResponseEnvelope(200, 'OK', {}, new_output))

        self.assertEqual(cmd.result.size, 137)
        self.assertFalse(cmd.result.more_data)

    def test_progressive_text_no_new_output(self):
        cmd = commands.BuildProgressiveTextCommand(
            make_context(), 'deploy-service', 42, start=512)

        cmd.interpret_response(ResponseEnvelope(
            200, 'OK', {'X-Text-Size': '512'}, b''))

        self.assertEqual(cmd.result,
                         commands.ProgressiveTextResponse('', 512, False))

    def test_progressive_html_annotator(self):
        cmd = commands.BuildProgressiveHtmlCommand(
            make_context(), 'deploy-service', 42, start=0)

        cmd.interpret_response(ResponseEnvelope(
            200, 'OK', {'X-Text-Size': '11', 'X-More-Data': 'TRUE',
                        'X-ConsoleAnnot': 'state'},
            b'<b>hi</b>\n'))

        self.assertEqual(cmd.result.html, '<b>hi</b>\n')
        self.assertEqual(cmd.result.size, 11)
        self.assertTrue(cmd.result.more_data)
        self.assertEqual(cmd.result.annotator, 'state')

    def test_toggle_swallows_parse_errors(self):
        cmd = commands.BuildToggleKeepCommand(
            make_context(), 'deploy-service', 42)

        cmd.interpret_response(ResponseEnvelope(
            200, 'OK', {'Content-Type': 'text/html'}, b'<html><body>'))

        self.assertFalse(cmd.has_result)

    def test_promote_raises_on_error_status(self):
        cmd = commands.BuildPromoteCommand(
            make_context(), 'deploy-service', 42, 1)

        with self.assertRaises(JenkinsException):
            cmd.interpret_response(ResponseEnvelope(
                403, 'Forbidden', {}, b''))

    def test_build_info_invalid_xml(self):
        cmd = commands.BuildGetCommand(make_context(), 'deploy-service', 42)

        with self.assertRaises(JenkinsException) as context_manager:
            cmd.interpret_response(ResponseEnvelope(200, 'OK', {}, b'{}'))
        self.assertIn('Could not parse XML info for job[deploy-service] '
                      'number[42]', str(context_manager.exception))

    def test_result_is_write_once(self):
        cmd = commands.BuildTextCommand(make_context(), 'deploy-service', 42)
        response = ResponseEnvelope(200, 'OK', {}, b'first')
        cmd.interpret_response(response)

        with self.assertRaises(JenkinsException):
            cmd.interpret_response(response)
        self.assertEqual(cmd.result, 'first')

        cmd.reset()
        self.assertFalse(cmd.has_result)


class MakeCommandTest(unittest.TestCase):

    def test_every_kind_is_registered(self):
        self.assertEqual(set(commands.COMMANDS), set(commands.CommandKind))
        for kind, command_class in commands.COMMANDS.items():
            self.assertEqual(command_class.kind, kind)

    def test_build_command(self):
        cmd = commands.make_command(commands.CommandKind.PROGRESSIVE_HTML,
                                    make_context(), 'deploy-service', 42,
                                    start=7)

        self.assertIsInstance(cmd, commands.BuildProgressiveHtmlCommand)
        self.assertEqual(
            cmd.path,
            'job/deploy-service/42/logText/progressiveHtml?start=7')

    def test_crumb_command(self):
        cmd = commands.make_command(commands.CommandKind.CRUMB,
                                    make_context())

        self.assertIsInstance(cmd, commands.CrumbGetCommand)
        self.assertEqual(cmd.path, 'crumbIssuer/api/xml')

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            commands.make_command('stop', make_context(), 'deploy-service',
                                  42)

    def test_validation_still_applies(self):
        with self.assertRaises(ValueError):
            commands.make_command(commands.CommandKind.PROMOTE,
                                  make_context(), 'deploy-service', 42, -1)

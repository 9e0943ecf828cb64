import base64
import unittest

from judge.pipeline.execution import (DEFAULT_LANGUAGE_ID, NO_OUTPUT, ExecutionResult, Judge0Client,
                                      decode, encode, language_id)


def b64(text: str) -> str:
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


class LanguageTableTest(unittest.TestCase):

    def test_known_languages(self):
        self.assertEqual(language_id('java'), 62)
        self.assertEqual(language_id('python'), 71)
        self.assertEqual(language_id('python3'), 71)
        self.assertEqual(language_id('cpp'), 54)
        self.assertEqual(language_id('c++'), 54)
        self.assertEqual(language_id('c'), 50)

    def test_case_insensitive(self):
        self.assertEqual(language_id('Python'), 71)
        self.assertEqual(language_id('C++'), 54)

    def test_fallback(self):
        self.assertEqual(language_id(None), DEFAULT_LANGUAGE_ID)
        self.assertEqual(language_id('brainfuck'), DEFAULT_LANGUAGE_ID)
        self.assertEqual(DEFAULT_LANGUAGE_ID, language_id('java'))


class EncodingTest(unittest.TestCase):

    def test_encode(self):
        self.assertEqual(encode('1 2'), b64('1 2'))
        self.assertEqual(encode(None), '')
        self.assertEqual(encode('zażółć'), b64('zażółć'))

    def test_decode(self):
        self.assertEqual(decode(b64('3\n')), '3\n')
        self.assertEqual(decode(None), '')
        self.assertEqual(decode(''), '')

    def test_decode_wrapped_lines(self):
        output = ' '.join(str(i) for i in range(30)) + '\n'
        wrapped = base64.encodebytes(output.encode('utf-8')).decode('ascii')
        self.assertIn('\n', wrapped.rstrip('\n'))
        self.assertEqual(decode(wrapped), output)

        result = Judge0Client.parse_result({'stdout': wrapped, 'stderr': None, 'compile_output': None})
        self.assertEqual(result.text, output.strip())

    def test_decode_falls_back_to_raw(self):
        self.assertEqual(decode('not base64!'), 'not base64!')
        self.assertEqual(decode('3'), '3')


class ExecutionResultTest(unittest.TestCase):

    def test_compile_output_wins(self):
        result = ExecutionResult(stdout='3', stderr='boom', compile_output='error: x')
        self.assertTrue(result.compilation_failed)
        self.assertEqual(result.text, 'Compilation Error:\nerror: x')

    def test_stderr_before_stdout(self):
        result = ExecutionResult(stdout='3', stderr='Traceback')
        self.assertFalse(result.compilation_failed)
        self.assertEqual(result.text, 'Runtime Error:\nTraceback')

    def test_stdout_trimmed(self):
        self.assertEqual(ExecutionResult(stdout='  3\n').text, '3')

    def test_no_output(self):
        self.assertEqual(ExecutionResult().text, NO_OUTPUT)


class Judge0PayloadTest(unittest.TestCase):

    def test_payload(self):
        payload = Judge0Client.make_payload('print(1)', 'Python', '1 2')
        self.assertEqual(payload, {'source_code': b64('print(1)'), 'language_id': 71, 'stdin': b64('1 2')})

    def test_parse_result(self):
        result = Judge0Client.parse_result({'stdout': b64('3\n'), 'stderr': None, 'compile_output': 'raw'})
        self.assertEqual(result, ExecutionResult(stdout='3\n', stderr='', compile_output='raw'))

    def test_headers(self):
        client = Judge0Client('http://judge/', timeout=None, logger=None, api_key='key', api_host='host')
        self.assertEqual(client.submissions_url, 'http://judge/submissions')
        self.assertEqual(client.headers['X-RapidAPI-Key'], 'key')
        self.assertEqual(client.headers['X-RapidAPI-Host'], 'host')
        self.assertNotIn('X-RapidAPI-Key', Judge0Client('http://judge', None, None).headers)


if __name__ == '__main__':
    unittest.main()

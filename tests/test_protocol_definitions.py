#!/usr/bin/env python3
"""
Unit tests for the wire protocol helpers.

Covers:
- HTML escaping of user supplied text
- Server frame construction
- Client-side frame decoding and DecodeError
"""

import json
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.protocol_definitions import (
    ChatMessage, DecodeError, sanitize, encode_frame, parse_server_frame,
    create_color_message, create_history_message, create_chat_message, create_error_message
)


class TestSanitize(unittest.TestCase):
    """Test cases for sanitize()."""

    def test_escapes_html_characters(self):
        self.assertEqual(
            sanitize('<b>hi</b> & "quote"'),
            '&lt;b&gt;hi&lt;/b&gt; &amp; &quot;quote&quot;'
        )

    def test_is_idempotent(self):
        samples = [
            '<b>hi</b> & "quote"',
            'fish & chips',
            '&amp; already escaped',
            'a && b',
            '&#39; and &#x27;',
            '&copy; stays bare',
            '',
        ]
        for sample in samples:
            once = sanitize(sample)
            self.assertEqual(sanitize(once), once, sample)

    def test_plain_text_unchanged(self):
        self.assertEqual(sanitize('hello world'), 'hello world')

    def test_non_string_input(self):
        self.assertEqual(sanitize(42), '42')

    def test_unknown_entity_ampersand_escaped(self):
        self.assertEqual(sanitize('&copy;'), '&amp;copy;')


class TestServerFrames(unittest.TestCase):
    """Test cases for outbound frame construction."""

    def setUp(self):
        self.message = ChatMessage(time=1700000000123, text='hello', author='Alice', color='red')

    def test_color_frame(self):
        self.assertEqual(json.loads(encode_frame(create_color_message('red'))),
                         {"type": "color", "data": "red"})

    def test_message_frame(self):
        frame = json.loads(encode_frame(create_chat_message(self.message)))
        self.assertEqual(frame, {
            "type": "message",
            "data": {"time": 1700000000123, "text": "hello", "author": "Alice", "color": "red"}
        })

    def test_history_frame(self):
        frame = json.loads(encode_frame(create_history_message([self.message, self.message])))
        self.assertEqual(frame["type"], "history")
        self.assertEqual(len(frame["data"]), 2)
        self.assertEqual(frame["data"][0]["author"], "Alice")

    def test_error_frame(self):
        self.assertEqual(create_error_message('full'), {"type": "error", "data": "full"})


class TestParseServerFrame(unittest.TestCase):
    """Test cases for parse_server_frame()."""

    def test_parses_message(self):
        raw = '{"type": "message", "data": {"time": 5, "text": "hi", "author": "Bob", "color": "blue"}}'
        event = parse_server_frame(raw)
        self.assertEqual(event["type"], "message")
        self.assertEqual(event["data"], ChatMessage(5, "hi", "Bob", "blue"))

    def test_parses_history(self):
        raw = json.dumps({"type": "history", "data": [
            {"time": 1, "text": "a", "author": "A", "color": "red"},
            {"time": 2, "text": "b", "author": "B", "color": "blue"},
        ]})
        event = parse_server_frame(raw)
        self.assertEqual([m.text for m in event["data"]], ["a", "b"])

    def test_parses_bytes(self):
        event = parse_server_frame(b'{"type": "color", "data": "plum"}')
        self.assertEqual(event, {"type": "color", "data": "plum"})

    def test_invalid_json_raises(self):
        with self.assertRaises(DecodeError):
            parse_server_frame('not json {')

    def test_missing_type_raises(self):
        with self.assertRaises(DecodeError):
            parse_server_frame('{"data": 1}')

    def test_bad_message_payload_raises(self):
        with self.assertRaises(DecodeError):
            parse_server_frame('{"type": "message", "data": {"text": "no author"}}')

    def test_unrepresentable_time_raises(self):
        for time_value in ('100000000000000000000', '1e400', '-1e400'):
            raw = '{"type": "message", "data": {"time": %s, "text": "a", "author": "A", "color": "red"}}' % time_value
            with self.assertRaises(DecodeError, msg=time_value):
                parse_server_frame(raw)

    def test_bad_history_payload_raises(self):
        with self.assertRaises(DecodeError):
            parse_server_frame('{"type": "history", "data": "nope"}')


if __name__ == '__main__':
    unittest.main()

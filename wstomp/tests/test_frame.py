"""
Tests for the frame codec.
"""
from unittest import TestCase

from wstomp import frame
from wstomp.frame import Command, Frame, FrameBuffer

__authors__ = ['"Hans Lellelid" <hans@xmpl.org>']
__copyright__ = "Copyright 2010 Hans Lellelid"
__license__ = """Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

  http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License."""

class RenderTest(TestCase):

    def test_no_body(self):
        """ Test that a frame without headers or body is just the command and a blank line. """
        self.assertEqual("SEND\n\n", frame.render(frame.build("SEND", {}, None)))
        self.assertEqual("SEND\n\n", frame.render(frame.build("SEND", None, None)))

    def test_headers_in_order(self):
        """ Test header lines are rendered in the order supplied. """
        f = frame.build(Command.SEND, {'receipt': 'r-1', 'destination': '/queue/a'}, 'hello')
        self.assertEqual("SEND\nreceipt: r-1\ndestination: /queue/a\n\nhello", frame.render(f))

    def test_marshall(self):
        """ Test marshall appends the terminator. """
        self.assertEqual("DISCONNECT\n\n\x00", frame.marshall(Command.DISCONNECT))
        self.assertEqual("ACK\nmessage-id: m1\n\n\x00", frame.marshall('ACK', {'message-id': 'm1'}))

    def test_non_string_header_value(self):
        f = Frame('SEND', {'count': 3})
        self.assertEqual("SEND\ncount: 3\n\n", str(f))

class ParseTest(TestCase):

    def test_first_colon_split(self):
        """ Test that header values keep colons after the first one. """
        f = frame.parse("MESSAGE\ncontent-type: text/plain; charset=utf-8\n\nbody")
        self.assertEqual("text/plain; charset=utf-8", f.headers['content-type'])

        f = frame.parse("MESSAGE\nmessage-id: ID:host-1:2:3\ndestination:/queue/a\n\nbody")
        self.assertEqual("ID:host-1:2:3", f.headers['message-id'])
        self.assertEqual("/queue/a", f.headers['destination'])
        self.assertEqual("body", f.body)

    def test_command(self):
        f = frame.parse("CONNECTED\nsession: s-1\n\n")
        self.assertIs(Command.CONNECTED, f.command)
        self.assertEqual({'session': 's-1'}, f.headers)
        self.assertIsNone(f.body)

    def test_unknown_command(self):
        """ Test that unknown commands are kept as plain text. """
        f = frame.parse("BOGUS\n\nbody")
        self.assertEqual("BOGUS", f.command)
        self.assertNotIsInstance(f.command, Command)
        self.assertEqual("body", f.body)

    def test_header_without_colon(self):
        """ Test that a header line without a colon becomes a header with an empty value. """
        f = frame.parse("MESSAGE\n  flagged  \ndestination: /queue/a\n\n")
        self.assertEqual({'flagged': '', 'destination': '/queue/a'}, f.headers)

    def test_multiline_body(self):
        f = frame.parse("MESSAGE\ndestination: /queue/a\n\nline 1\n\nline 3\n")
        self.assertEqual("line 1\n\nline 3\n", f.body)

    def test_blank_line_after_headers(self):
        """ Test that a blank line right after the header block means the frame has no body. """
        f = frame.parse("SEND\ndestination: /q\n\n\nfoo")
        self.assertEqual({'destination': '/q'}, f.headers)
        self.assertIsNone(f.body)

        f = frame.unmarshall(frame.marshall(Command.SEND, {}, '\nstarts with a newline'))
        self.assertIsNone(f.body)

    def test_no_blank_line(self):
        """ Test that a frame ending inside its headers has no body. """
        f = frame.parse("RECEIPT\nreceipt-id: 77")
        self.assertEqual({'receipt-id': '77'}, f.headers)
        self.assertIsNone(f.body)

    def test_empty_input(self):
        f = frame.parse("")
        self.assertEqual("", f.command)
        self.assertEqual({}, f.headers)
        self.assertIsNone(f.body)

    def test_unmarshall(self):
        """ Test that the terminator (and trailing EOLs) are removed. """
        f = frame.unmarshall("MESSAGE\ndestination: /queue/a\n\nhi\x00\n")
        self.assertEqual("hi", f.body)
        f = frame.unmarshall("RECEIPT\nreceipt-id: 1\n\n\x00")
        self.assertIsNone(f.body)
        f = frame.unmarshall("ERROR\nmessage: bad\n\noops")
        self.assertEqual("oops", f.body)

    def test_round_trip(self):
        """ Test that parse(render(f)) reproduces command, headers and body. """
        frames = [
            Frame(Command.SEND, {'destination': '/queue/a', 'receipt': 'x:y'}, 'payload'),
            Frame(Command.SUBSCRIBE, {'destination': '/topic/b', 'ack': 'client'}),
            Frame(Command.MESSAGE, {'message-id': 'm-1'}, 'first\n\nthird'),
            Frame(Command.CONNECT),
        ]
        for f in frames:
            self.assertEqual(f, frame.parse(frame.render(f)))
            self.assertEqual(f, frame.unmarshall(f.pack()))

class FrameTest(TestCase):

    def test_attribute_headers(self):
        f = Frame('MESSAGE', headers={'message-id': 'id-here', 'other_header': 'value'})
        self.assertEqual('id-here', f.message_id)
        self.assertEqual('value', f.other_header)
        self.assertIsNone(f.destination)

    def test_equality(self):
        self.assertEqual(Frame('SEND', {'a': '1'}, 'x'), Frame(Command.SEND, {'a': '1'}, 'x'))
        self.assertNotEqual(Frame('SEND', {'a': '1'}, 'x'), Frame('SEND', {'a': '1'}, None))
        self.assertNotEqual(Frame('SEND'), Frame('ACK'))

    def test_command_lookup(self):
        self.assertIs(Command.ABORT, Command.lookup('ABORT'))
        self.assertIs(Command.ABORT, Command.lookup(Command.ABORT))
        self.assertEqual('abort', Command.lookup('abort'))
        self.assertEqual('ABORT', str(Command.ABORT))

class FrameBufferTest(TestCase):

    def test_partial_frames(self):
        """ Test that frames split across chunks are reassembled. """
        buf = FrameBuffer()
        buf.append("MESSAGE\ndestination: /queue/a\n\nhel")
        self.assertEqual([], list(buf))
        buf.append("lo\x00\nRECEIPT\nreceipt-id: 1\n\n\x00\nERR")
        self.assertEqual(["MESSAGE\ndestination: /queue/a\n\nhello",
                          "RECEIPT\nreceipt-id: 1\n\n"], list(buf))
        self.assertEqual("ERR", buf.buffer)

    def test_eol_between_frames(self):
        buf = FrameBuffer()
        buf.append("\n\r\nCONNECTED\n\n\x00\n")
        self.assertEqual(["CONNECTED\n\n"], list(buf))
        self.assertEqual([], list(buf))
        self.assertEqual("", buf.buffer)

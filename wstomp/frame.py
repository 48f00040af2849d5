"""
Classes and functions to support reading and writing STOMP frames.

The codec is deliberately permissive on the way in: L{parse} never raises,
malformed fragments are kept best-effort and unknown commands are carried as
plain strings (and subsequently ignored by the client).  It is not a protocol
validator.
"""
import enum
import logging
import re

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

# Marks the end of a frame on the wire.
TERMINATOR = '\x00'

class Command(str, enum.Enum):
    """
    The STOMP commands understood by this client.

    Members are also C{str} instances and render as the bare wire token.
    """
    CONNECT = 'CONNECT'
    SEND = 'SEND'
    SUBSCRIBE = 'SUBSCRIBE'
    UNSUBSCRIBE = 'UNSUBSCRIBE'
    BEGIN = 'BEGIN'
    COMMIT = 'COMMIT'
    ABORT = 'ABORT'
    ACK = 'ACK'
    DISCONNECT = 'DISCONNECT'
    CONNECTED = 'CONNECTED'
    MESSAGE = 'MESSAGE'
    RECEIPT = 'RECEIPT'
    ERROR = 'ERROR'

    def __str__(self):
        return self.value

    @classmethod
    def lookup(cls, token):
        """
        Convert a textual command token to a L{Command}.

        @param token: The command token (e.g. 'MESSAGE').
        @type token: C{str}

        @return: The matching member, or the token itself if it is not a known command.
        @rtype: L{Command} or C{str}
        """
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError:
            return token

class Frame(object):
    """
    Class to hold a STOMP message frame.

    @ivar command: The STOMP command (a L{Command} for known commands).
    @type command: L{Command}

    @ivar headers: An (ordered) dictionary of headers for this frame.
    @type headers: C{dict}

    @ivar body: The body of the message, or C{None} if the frame has no body.
    @type body: C{str}
    """
    def __init__(self, command, headers=None, body=None):
        if headers is None:
            headers = {}
        self.command = Command.lookup(command)
        self.headers = headers
        self.body = body

    def render(self):
        """
        Create the wire text for this frame, without the frame terminator.

        @rtype: C{str}
        """
        headerparts = ''.join('%s: %s\n' % (name, value) for name, value in self.headers.items())
        out = '%s\n%s\n' % (self.command, headerparts)
        if self.body is not None:
            out += self.body
        return out

    def pack(self):
        """
        Create the string to hand to a transport (rendered frame + terminator).

        @rtype: C{str}
        """
        return self.render() + TERMINATOR

    def __getattr__(self, name):
        """ Convenience way to return header values as if they're object attributes.

        We replace '_' chars with '-' to make the headers python-friendly.  For example:

            frame.headers['message-id'] == frame.message_id

        >>> f = Frame('MESSAGE', headers={'message-id': 'id-here', 'other_header': 'value'})
        >>> f.message_id
        'id-here'
        >>> f.other_header
        'value'
        """
        if name.startswith('_') or name in ('command', 'headers', 'body'):
            raise AttributeError(name)

        try:
            return self.headers[name]
        except KeyError:
            return self.headers.get(name.replace('_', '-'))

    def __eq__(self, other):
        """ Override equality checking to test for matching command, headers, and body. """
        return (isinstance(other, Frame) and
                self.command == other.command and
                self.headers == other.headers and
                self.body == other.body)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return '<%s command=%s headers=%d body=%s>' % (self.__class__.__name__, self.command,
                                                       len(self.headers),
                                                       None if self.body is None else len(self.body))

def build(command, headers=None, body=None):
    """
    Construct a frame; all inputs are taken as-is.

    @rtype: L{Frame}
    """
    return Frame(command, headers=headers, body=body)

def render(frame):
    """
    Render a frame to wire text (without the terminator).

    @rtype: C{str}
    """
    return frame.render()

def marshall(command, headers=None, body=None):
    """
    Build a frame and return its complete wire text, terminator included.

    @rtype: C{str}
    """
    return build(command, headers, body).pack()

def parse(text):
    """
    Parse wire text (without terminator) into a frame.

    Header lines are split on the first colon only, so values may contain colons.
    A header line without any colon becomes a header with an empty value.  If
    the line right after the blank line that ends the headers is itself empty
    (or missing), the frame has no body; so a body cannot start with a newline.

    This function does not raise on malformed input.

    @param text: The frame text.
    @type text: C{str}

    @rtype: L{Frame}
    """
    lines = text.split('\n')
    command = lines[0]
    headers = {}
    pos = 1
    while pos < len(lines):
        line = lines[pos]
        pos += 1
        if line == '':
            break
        (name, _, value) = line.partition(':')
        headers[name.strip()] = value.strip()

    body = None
    if pos < len(lines) and lines[pos] != '':
        body = '\n'.join(lines[pos:])
    return Frame(command, headers=headers, body=body)

# Trailing terminator, plus any EOLs a broker sends after it.
_terminator_re = re.compile('\x00\n*$')

def unmarshall(data):
    """
    Parse a frame as received from a transport (terminator optional).

    @rtype: L{Frame}
    """
    return parse(_terminator_re.sub('', data, count=1))

class FrameBuffer(object):
    """
    A buffer that smooths over a transport that may provide partial frames (or
    multiple frames in one chunk of data).

    Frames are delimited by the \\x00 terminator only; bodies with a
    content-length header are not treated specially.  The EOL characters that
    some brokers put between frames are discarded.

    Iterating over the buffer yields the text of each complete frame (without
    its terminator) and removes it from the buffer.

    @ivar buffer: The internal text buffer.
    @type buffer: C{str}
    """

    def __init__(self):
        self.buffer = ''
        self.log = logging.getLogger('%s.%s' % (self.__module__, self.__class__.__name__))

    def append(self, data):
        """
        Appends text to the internal buffer (may or may not contain full frames).

        @param data: The text to append.
        @type data: C{str}
        """
        self.buffer += data

    def extract_message(self):
        """
        Pulls the text of one complete frame off the buffer and returns it.

        @return: The next complete frame text, or C{None} if there is none.
        @rtype: C{str}
        """
        stripped = self.buffer.lstrip('\r\n')
        if len(stripped) != len(self.buffer):
            self.log.debug("Discarding %d EOL chars between frames." % (len(self.buffer) - len(stripped)))
            self.buffer = stripped
        (msgdata, sep, rest) = self.buffer.partition(TERMINATOR)
        if not sep:
            return None
        self.buffer = rest
        return msgdata

    def __iter__(self):
        return self

    def __next__(self):
        msg = self.extract_message()
        if msg is None:
            raise StopIteration()
        return msg

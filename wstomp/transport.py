"""
Transports that carry STOMP frame text between the client and the server.

The client only depends on the L{Transport} interface; L{SocketTransport} is a
plain TCP implementation.
"""
import abc
import codecs
import errno
import logging
import socket
import threading
from urllib.parse import urlsplit

from wstomp.frame import FrameBuffer
from wstomp.exceptions import ConnectionError, ConnectionTimeoutError, NotConnectedError

__authors__ = ['"Hans Lellelid" <hans@xmpl.org>', 'Andy McCurdy (redis)']
__copyright__ = "Copyright 2010 Hans Lellelid, Copyright 2010 Andy McCurdy"
__license__ = """Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

  http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License."""

DEFAULT_PORT = 61613

class Transport(metaclass=abc.ABCMeta):
    """
    A message-oriented, bidirectional connection to a STOMP server.

    Implementations must deliver events one at a time; the client does no
    locking of its own.
    """

    @abc.abstractmethod
    def open(self, url, on_open, on_message, on_close):
        """
        Start opening a connection to C{url}; returns without waiting.

        @param on_open: Called (no args) once the connection is usable.
        @type on_open: C{callable}

        @param on_message: Called with the text of each received frame.
        @type on_message: C{callable}

        @param on_close: Called (no args) once, when the connection is gone or could not be made.
        @type on_close: C{callable}
        """

    @abc.abstractmethod
    def send(self, text):
        """
        Transmit one text payload.

        @param text: The complete frame text (including terminator).
        @type text: C{str}
        """

    @abc.abstractmethod
    def close(self):
        """
        Request that the connection be closed.
        """

class SocketTransport(Transport):
    """
    Carries STOMP frames over a TCP socket.

    A listener thread (started by L{open}) connects the socket, and then reads
    from it and splits the data into frames.  All event callbacks are invoked from
    that thread.

    @ivar listener: The thread running L{listen_forever}.
    @type listener: C{threading.Thread}
    """

    def __init__(self, socket_timeout=None):
        self.log = logging.getLogger('%s.%s' % (self.__class__.__module__, self.__class__.__name__))
        self.socket_timeout = socket_timeout
        self.host = None
        self.port = None
        self.buffer = FrameBuffer()
        self.shutdown_event = threading.Event()
        self.listener = None
        self.on_open = None
        self.on_message = None
        self.on_close = None
        self._sock = None

    @staticmethod
    def parse_url(url):
        """
        Split a C{tcp://host:port} (or C{stomp://host:port}) URL.

        @return: A (host, port) tuple.
        @rtype: C{tuple}

        @raise ValueError: If the URL scheme is not supported.
        """
        parts = urlsplit(url)
        if parts.scheme not in ('tcp', 'stomp'):
            raise ValueError("Unsupported URL scheme for %s: %r" % (url, parts.scheme))
        return (parts.hostname, parts.port or DEFAULT_PORT)

    def open(self, url, on_open, on_message, on_close):
        if self.listener is not None and self.listener.is_alive():
            raise ConnectionError("Transport is already open (%s:%s)" % (self.host, self.port))
        (self.host, self.port) = self.parse_url(url)
        self.on_open = on_open
        self.on_message = on_message
        self.on_close = on_close
        self.shutdown_event.clear()
        self.listener = threading.Thread(target=self.listen_forever,
                                         name='StompListener-%s:%s' % (self.host, self.port))
        self.listener.daemon = True
        self.listener.start()

    def connect(self):
        """
        Connects to the STOMP server if not already connected.
        """
        if self._sock:
            return
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.settimeout(self.socket_timeout)
            sock.connect((self.host, self.port))
        except socket.timeout as exc:
            raise ConnectionTimeoutError(*exc.args)
        except socket.error as exc:
            raise ConnectionError(*exc.args)

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._sock = sock

    def disconnect(self):
        """
        Close the socket, if connected.
        """
        if self._sock is None:
            return
        try:
            self._sock.close()
        except socket.error:
            pass
        self._sock = None

    def read(self, length):
        """
        Blocking call to read length bytes from underlying socket.

        @return: The bytes read, or C{None} if the socket timed out.
        @rtype: C{bytes}
        """
        try:
            return self._sock.recv(length)
        except socket.timeout:
            return None

    def listen_forever(self):
        """
        Connect, then read frames from the socket until EOF, error or L{close}.

        This blocks, so it runs in the listener thread.
        """
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        try:
            try:
                self.connect()
            except (ConnectionError, ConnectionTimeoutError) as e:
                self.log.warning("Unable to connect to %s:%s: %s" % (self.host, self.port, e))
                return
            self.log.debug("Connected to %s:%s" % (self.host, self.port))
            self.on_open()
            while not self.shutdown_event.is_set():
                data = self.read(8192)
                if data is None:
                    continue
                if not data:
                    self.log.debug("Server closed the connection.")
                    break
                self.buffer.append(decoder.decode(data))
                for text in self.buffer:
                    self.on_message(text)
        except Exception:
            if self.shutdown_event.is_set():
                self.log.debug("Listening loop stopped by close().")
            else:
                self.log.exception("Error receiving data; aborting listening loop.")
                raise
        finally:
            self.disconnect()
            self.buffer = FrameBuffer()
            self.on_close()

    def send(self, text):
        if self._sock is None:
            raise NotConnectedError("Not connected to %s:%s" % (self.host, self.port))
        try:
            self._sock.sendall(text.encode('utf-8'))
        except socket.error as e:
            if e.errno == errno.EPIPE:
                self.disconnect()
            raise ConnectionError("Error %s while writing to socket. %s." % (e.errno, e.strerror))

    def close(self):
        self.shutdown_event.set()
        if self._sock is None:
            return
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except socket.error as e:
            self.log.debug("Error shutting down socket: %s" % e)

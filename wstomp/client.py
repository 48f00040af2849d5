"""
The STOMP client session: connection lifecycle, outbound commands and dispatch
of inbound frames to application callbacks.
"""
import enum
import functools
import logging

from wstomp import frame
from wstomp.frame import Command
from wstomp.transport import SocketTransport
from wstomp.exceptions import AlreadyConnectedError, NotConnectedError

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

class State(enum.Enum):
    DISCONNECTED = 'DISCONNECTED'
    CONNECTING = 'CONNECTING'
    CONNECTED = 'CONNECTED'

class Client(object):
    """
    A STOMP client that supports both producer and consumer roles, dispatching
    received frames to callbacks.

    All operations are fire-and-forget: a frame is written to the transport and
    the method returns; anything the server sends back arrives later through the
    callbacks.

    The client does no locking.  Calls into it must not overlap with the events
    delivered by the transport (the transport delivers one event at a time, and
    the application calls from the same logical context).

    Only one connection attempt may be active at a time: calling L{connect}
    again before the session is disconnected raises L{AlreadyConnectedError}.

    Each destination has at most one message callback; subscribing again to the
    same destination replaces the previous callback.

    @ivar url: The server URL handed to the transport.
    @type url: C{str}

    @ivar transport_factory: Zero-argument callable returning a new L{wstomp.transport.Transport}.
    @type transport_factory: C{callable}

    @ivar debug: (optional) Callable receiving the wire text of every frame,
                    prefixed with '>>> ' (sent) or '<<< ' (received).
    @type debug: C{callable}

    @ivar on_receipt: (optional) Callable receiving RECEIPT frames.
    @type on_receipt: C{callable}

    @ivar on_error: (optional) Callable receiving ERROR frames.
    @type on_error: C{callable}
    """

    def __init__(self, url, transport_factory=None, debug=None):
        self.log = logging.getLogger('%s.%s' % (self.__class__.__module__, self.__class__.__name__))
        self.url = url
        self.transport_factory = transport_factory if transport_factory else SocketTransport
        self.debug = debug
        self.on_receipt = None
        self.on_error = None
        self.transport = None
        self.login = None
        self.passcode = None
        self.connect_callback = None
        self.error_callback = None
        self.disconnect_callback = None
        self._state = State.DISCONNECTED
        self._subscriptions = {}
        self._routes = {
            Command.CONNECTED: self._handle_connected,
            Command.MESSAGE: self._handle_message,
            Command.RECEIPT: self._handle_receipt,
            Command.ERROR: self._handle_error,
        }

    @property
    def state(self):
        """
        The current L{State} of the session.
        """
        return self._state

    @property
    def connected(self):
        return self._state is State.CONNECTED

    @property
    def subscriptions(self):
        """
        A copy of the destination -> callback registry.
        @rtype: C{dict}
        """
        return dict(self._subscriptions)

    def connect(self, login=None, passcode=None, connect_callback=None, error_callback=None):
        """
        Open the transport; the CONNECT frame is sent once the transport is open.

        @param connect_callback: Called with the CONNECTED frame from the server.
        @type connect_callback: C{callable}

        @param error_callback: Called with a message if the connection is lost.
        @type error_callback: C{callable}

        @raise AlreadyConnectedError: If the session is not disconnected.
        """
        if self._state is not State.DISCONNECTED:
            raise AlreadyConnectedError("Cannot connect to %s; session is %s" % (self.url, self._state.value))
        self.log.info("Opening connection to %s" % self.url)
        self.login = login
        self.passcode = passcode
        self.connect_callback = connect_callback
        self.error_callback = error_callback
        self.disconnect_callback = None
        self._subscriptions.clear()
        self._state = State.CONNECTING
        transport = self.transport = self.transport_factory()
        # Events are tagged with their transport; a previous transport may
        # still report a late close or frame after a reconnect.
        try:
            transport.open(self.url,
                           on_open=functools.partial(self._transport_opened, transport),
                           on_message=functools.partial(self._transport_message, transport),
                           on_close=functools.partial(self._transport_closed, transport))
        except Exception:
            self._state = State.DISCONNECTED
            raise

    def disconnect(self, disconnect_callback=None):
        """
        Send DISCONNECT, close the transport and then call C{disconnect_callback}.

        Does nothing if the session is already disconnected.
        """
        if self._state is State.DISCONNECTED:
            self.log.debug("Ignoring disconnect(); not connected.")
            return
        self.disconnect_callback = disconnect_callback
        try:
            self.transmit(Command.DISCONNECT)
        except NotConnectedError:
            # transport never finished opening
            self.log.debug("Transport to %s not open; no DISCONNECT frame sent." % self.url)
        finally:
            self._state = State.DISCONNECTED
            self.transport.close()
            self.log.info("Disconnected from %s" % self.url)
        if disconnect_callback:
            disconnect_callback()

    def send(self, destination, headers=None, body=None):
        """
        Sends a message to STOMP server.

        @param destination: The destination "path" for message.
        @type destination: C{str}

        @param headers: Additional headers (e.g. 'transaction', 'receipt').
        @type headers: C{dict}

        @param body: The body of the message.
        @type body: C{str}
        """
        headers = self._copy_headers(headers)
        headers['destination'] = destination
        self.transmit(Command.SEND, headers, body)

    def subscribe(self, destination, headers=None, callback=None):
        """
        Subscribe to a given destination; MESSAGE frames for it are passed to C{callback}.

        Replaces any callback already registered for the destination.

        @param destination: The destination "path" to subscribe to.
        @type destination: C{str}
        """
        self._require_transport()
        headers = self._copy_headers(headers)
        headers['destination'] = destination
        self._subscriptions[destination] = callback
        self.transmit(Command.SUBSCRIBE, headers)

    def unsubscribe(self, destination, headers=None):
        """
        Unsubscribe from a given destination.

        @param destination: The destination to unsubscribe from.
        @type destination: C{str}
        """
        self._require_transport()
        headers = self._copy_headers(headers)
        headers['destination'] = destination
        self._subscriptions.pop(destination, None)
        self.transmit(Command.UNSUBSCRIBE, headers)

    def begin(self, transaction, headers=None):
        """
        Begin transaction.

        @param transaction: The transaction ID.
        @type transaction: C{str}
        """
        self._transaction(Command.BEGIN, transaction, headers)

    def commit(self, transaction, headers=None):
        """
        Commit transaction.

        @param transaction: The transaction ID.
        @type transaction: C{str}
        """
        self._transaction(Command.COMMIT, transaction, headers)

    def abort(self, transaction, headers=None):
        """
        Abort (rollback) transaction.

        @param transaction: The transaction ID.
        @type transaction: C{str}
        """
        self._transaction(Command.ABORT, transaction, headers)

    def ack(self, message_id, headers=None):
        """
        Acknowledge receipt of a message.

        @param message_id: The 'message-id' header of the received message.
        @type message_id: C{str}
        """
        headers = self._copy_headers(headers)
        headers['message-id'] = message_id
        self.transmit(Command.ACK, headers)

    def transmit(self, command, headers=None, body=None):
        """
        Serialize a frame and write it to the transport.

        @raise NotConnectedError: If there is no open session.
        """
        self._require_transport()
        out = frame.marshall(command, headers, body)
        self._debug('>>> ' + out)
        self.transport.send(out)

    def _transaction(self, command, transaction, headers):
        headers = self._copy_headers(headers)
        headers['transaction'] = transaction
        self.transmit(command, headers)

    def _copy_headers(self, headers):
        return dict(headers) if headers else {}

    def _require_transport(self):
        if self._state is State.DISCONNECTED:
            raise NotConnectedError("Not connected to %s" % self.url)

    def _debug(self, text):
        if self.debug:
            self.debug(text)

    def _stale(self, transport, event):
        if transport is self.transport:
            return False
        self.log.debug("Ignoring %s from a previous transport to %s" % (event, self.url))
        return True

    def _transport_opened(self, transport):
        if self._stale(transport, 'open'):
            return
        self.log.debug("Transport to %s opened; sending CONNECT." % self.url)
        headers = {}
        if self.login is not None:
            headers['login'] = self.login
        if self.passcode is not None:
            headers['passcode'] = self.passcode
        self.transmit(Command.CONNECT, headers)

    def _transport_message(self, transport, data):
        if self._stale(transport, 'frame'):
            return
        self._debug('<<< ' + data)
        received = frame.unmarshall(data)
        handler = self._routes.get(received.command)
        if handler is None:
            self.log.debug("Ignoring frame from server: %r" % received)
            return
        handler(received)

    def _transport_closed(self, transport):
        if self._stale(transport, 'close'):
            return
        if self._state is State.DISCONNECTED:
            self.log.debug("Transport to %s closed." % self.url)
            return
        self._state = State.DISCONNECTED
        msg = "Whoops! Lost connection to %s" % self.url
        self.log.warning(msg)
        if self.error_callback:
            self.error_callback(msg)

    def _handle_connected(self, received):
        if self._state is not State.CONNECTING:
            self.log.warning("Ignoring CONNECTED frame received while %s" % self._state.value)
            return
        self._state = State.CONNECTED
        self.log.info("Connected to %s" % self.url)
        if self.connect_callback:
            self.connect_callback(received)

    def _handle_message(self, received):
        callback = self._subscriptions.get(received.headers.get('destination'))
        if callback is None:
            self.log.debug("Ignoring frame for unsubscribed destination: %r" % received)
            return
        callback(received)

    def _handle_receipt(self, received):
        if self.on_receipt:
            self.on_receipt(received)

    def _handle_error(self, received):
        if self.on_error:
            self.on_error(received)

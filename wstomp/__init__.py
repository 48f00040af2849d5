"""
wstomp is a callback-driven STOMP client that runs over any message-oriented transport.
"""
from wstomp.frame import Command, Frame, FrameBuffer, build, render, parse, marshall, unmarshall, TERMINATOR
from wstomp.client import Client, State
from wstomp.transport import Transport, SocketTransport
from wstomp.exceptions import NotConnectedError, AlreadyConnectedError, ConnectionError, ConnectionTimeoutError

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

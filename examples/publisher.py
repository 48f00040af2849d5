"""
An example publishing a message every second until interrupted.

The CONNECT handshake happens in the transport's listener thread, so the
sends are started from the connect callback.
"""
import json
import logging
import threading
import time
from datetime import datetime

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

from wstomp import Client

connected = threading.Event()

def on_connected(frame):
    logger.info("Got session response from connect: {0}".format(frame.session))
    connected.set()

def on_lost(msg):
    logger.error(msg)
    connected.set()

client = Client('tcp://127.0.0.1:61613', debug=logger.debug)
client.connect('guest', 'guest', on_connected, on_lost)
connected.wait()
if not client.connected:
    raise SystemExit("Could not connect to the broker.")

try:
    payload = {'key': 'value', 'counter': 0, 'list': ['a', 'b', 'c']}
    while client.connected:
        payload['date'] = datetime.now().isoformat()
        logger.debug("Sending message: {0}".format(payload))
        client.send('/queue/example', {'content-type': 'application/json'}, json.dumps(payload))
        time.sleep(1.0)
        payload['counter'] += 1
finally:
    client.disconnect(lambda: logger.info("Disconnected."))

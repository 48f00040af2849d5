"""
An example subscribing to a queue and acknowledging every received message.
"""
import json
import logging
import threading

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)
from wstomp import Client

client = Client('tcp://127.0.0.1:61613')
done = threading.Event()

def frame_received(frame):
    # Do something with the frame!
    payload = json.loads(frame.body)
    logger.info("Received data: {0!r}".format(payload))
    client.ack(frame.message_id)

def on_connected(frame):
    client.subscribe('/queue/example', {'ack': 'client'}, frame_received)

def on_lost(msg):
    logger.error(msg)
    done.set()

client.on_error = lambda frame: logger.error("Server error: %s" % frame.message)
client.connect('guest', 'guest', on_connected, on_lost)

try:
    done.wait()
except KeyboardInterrupt:
    client.disconnect()

"""
wstomp is a callback-driven STOMP client written in Python.
"""
import os.path
import re
import warnings

from setuptools import setup, find_packages

__authors__ = ['"Hans Lellelid" <hans@xmpl.org>']
__copyright__ = "Copyright 2010 Hans Lellelid"

version = '0.1'

news = os.path.join(os.path.dirname(__file__), 'docs', 'news.txt')
with open(news) as fp:
    news = fp.read()
parts = re.split(r'([0-9\.]+)\s*\n\r?-+\n\r?', news)
found_news = ''
for i in range(len(parts)-1):
    if parts[i] == version:
        found_news = parts[i+1]
        break
if not found_news:
    warnings.warn('No news for this version found.')

long_description="""
wstomp connects to a STOMP broker over any message-oriented transport (TCP
sockets out of the box, or a WebSocket via a small adapter) and reports
everything the server sends through callbacks: CONNECTED frames to the connect
callback, MESSAGE frames to the callback registered for their destination, and
RECEIPT and ERROR frames to session-level handlers.
"""

if found_news:
    title = 'Changes in %s' % version
    long_description += "\n%s\n%s\n" % (title, '-'*len(title))
    long_description += found_news

setup(name='wstomp',
      version=version,
      description=__doc__,
      long_description=long_description,
      author="Hans Lellelid",
      author_email="hans@xmpl.org",
      packages = find_packages(exclude=['tests', '*.tests.*', 'tests.*', '*.tests']),
      license='Apache',
      keywords='stomp client websocket',
      python_requires='>=3.6',
      extras_require={'test': ['pytest', 'mock']},
      classifiers=["Development Status :: 3 - Alpha",
                   "Intended Audience :: Developers",
                   "License :: OSI Approved :: Apache Software License",
                   "Operating System :: OS Independent",
                   "Programming Language :: Python :: 3",
                   "Topic :: Software Development :: Libraries :: Python Modules",
                   ],
     )

"""HTTP Top - Constants and patterns"""

import re
from http import HTTPStatus

VERSION = "1.0.0"

# Pipeline sizing
QUEUE_SIZE = 1024
CHUNK_SIZE = 1024

# Defaults for the command line
DEFAULT_LOG_FILE = "access.log"
DEFAULT_TRIGGER = 20
DEFAULT_RATE = 10.0
DEFAULT_WINDOW = 120.0
DEFAULT_COALESCE = 0.035

HTTP_METHODS = frozenset({
    'GET',
    'HEAD',
    'POST',
    'PUT',
    'DELETE',
    'OPTIONS',
    'TRACE',
    'CONNECT',
})

# Status codes accepted in a log line
HTTP_STATUSES = frozenset(int(s) for s in (
    HTTPStatus.CONTINUE,
    HTTPStatus.SWITCHING_PROTOCOLS,
    HTTPStatus.OK,
    HTTPStatus.CREATED,
    HTTPStatus.ACCEPTED,
    HTTPStatus.NON_AUTHORITATIVE_INFORMATION,
    HTTPStatus.NO_CONTENT,
    HTTPStatus.RESET_CONTENT,
    HTTPStatus.PARTIAL_CONTENT,
    HTTPStatus.MULTIPLE_CHOICES,
    HTTPStatus.MOVED_PERMANENTLY,
    HTTPStatus.FOUND,
    HTTPStatus.SEE_OTHER,
    HTTPStatus.NOT_MODIFIED,
    HTTPStatus.USE_PROXY,
    HTTPStatus.TEMPORARY_REDIRECT,
)) | frozenset(range(400, 419)) | frozenset(range(500, 506))

# Accepted status codes that count as errors
HTTP_ERROR_STATUSES = frozenset(range(400, 419)) | frozenset(range(500, 506))

TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"
TIMESTAMP_PATTERN = re.compile(
    r'^[0-9]{2}/[A-Z][a-z]{2}/[0-9]{4}:[0-9]{2}:[0-9]{2}:[0-9]{2} [+-][0-9]{4}$'
)

# RFC 1123, used for every line printed to the operator
DISPLAY_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S %Z"

STATUS_PATTERN = re.compile(r'[0-9]+')
BYTES_PATTERN = re.compile(r'-?[0-9]+')

# Quoted fields may contain backslash escaped quotes
_QUOTED = r'(?:[^"\\]|\\.)*'

_CLF = (
    r'^(?P<host>\S+) (?P<ident>\S+) (?P<auth>\S+) \[(?P<timestamp>[^\]]*)\] '
    r'"(?P<request>' + _QUOTED + r')" (?P<status>\S+) (?P<bytes>\S+)'
)

# Log format patterns, tried in order
LOG_PATTERNS = {
    'extended': re.compile(
        _CLF + r' "(?P<referer>' + _QUOTED + r')" "(?P<user_agent>' + _QUOTED + r')"$'
    ),
    'common': re.compile(_CLF + r'$'),
}

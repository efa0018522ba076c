import re
from urllib.parse import quote

from flask import Request

from .exception import RequestDumpError

_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_PROTOCOL_RE = re.compile(r'HTTP/([0-9])(?:\.([0-9]))?')
_URI_INVALID_RE = re.compile(r'[\x00-\x20\x7f]')
_NEWLINE_RE = re.compile(r'\r\n|\r|\n')

# written separately or not at all
_EXCLUDED_HEADERS = {'host', 'transfer-encoding', 'trailer'}

_PATH_SAFE = "/:@!$&'()*+,;=-._~"


def request_uri(request: Request) -> str:
    environ = request.environ
    raw = environ.get('RAW_URI') or environ.get('REQUEST_URI')
    query = environ.get('QUERY_STRING', '')
    if raw:
        # some servers report the path alone
        if query and '?' not in raw:
            raw = f'{raw}?{query}'
        return raw
    path = request.script_root + request.path
    uri = quote(path, safe=_PATH_SAFE) or '/'
    if query:
        uri = f'{uri}?{query}'
    return uri


def _protocol(request: Request) -> str:
    protocol = request.environ.get('SERVER_PROTOCOL', 'HTTP/1.1')
    m = _PROTOCOL_RE.fullmatch(protocol)
    if m is None:
        raise RequestDumpError(f'malformed HTTP version "{protocol}"')
    return f'HTTP/{m.group(1)}.{m.group(2) or 0}'


def _header_value(value: str) -> str:
    return _NEWLINE_RE.sub(' ', value).strip(' \t')


def dump_request(request: Request) -> str:
    """
    Write the request back as an HTTP/1.x request head, without its body.

    The request line comes first, then ``Host`` (left out when the
    request URI is already absolute) and ``Transfer-Encoding`` when
    present, then every other header sorted by name, then the blank line
    ending the head. Lines end with CRLF.
    """
    method = request.method
    if not _TOKEN_RE.fullmatch(method):
        raise RequestDumpError(f'invalid method "{method}"')
    uri = request_uri(request)
    if _URI_INVALID_RE.search(uri):
        raise RequestDumpError(f'invalid request URI {uri!r}')
    lines = [f'{method} {uri} {_protocol(request)}']

    host = request.environ.get('HTTP_HOST') or request.host
    if host and not uri.startswith(('http://', 'https://')):
        lines.append(f'Host: {_header_value(host)}')
    transfer_encoding = request.headers.get('Transfer-Encoding')
    if transfer_encoding:
        lines.append(f'Transfer-Encoding: {_header_value(transfer_encoding)}')

    headers = sorted(
        (key, value) for key, value in request.headers.items()
        if key.lower() not in _EXCLUDED_HEADERS)
    for key, value in headers:
        lines.append(f'{key}: {_header_value(value)}')
    return '\r\n'.join(lines) + '\r\n\r\n'

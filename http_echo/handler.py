import time

from flask import Request, Response

from . import sections
from .config import ServerConfig
from .dump import dump_request
from .exception import RequestDumpError
from .params import ResponseParams
from .utils import logger


class EchoHandler:
    """
    Answer a request with a text report of the request itself.

    The report holds the request head, the peer address, the process
    environment when ``config.include_env`` is set, and a block of random
    data when the ``payload`` query parameter asks for one. The ``delay``
    and ``status`` query parameters hold the response back and pick its
    status code.
    """

    def __init__(self, config: ServerConfig, sleep=time.sleep):
        self.config = config
        self._sleep = sleep

    def __call__(self, request: Request) -> Response:
        params = ResponseParams.from_query(request.args)
        logger().debug(
            f'{request.method} {request.full_path} '
            f'[delay={params.delay}, status={params.status}, '
            f'payload={params.payload}]')
        delay = params.delay.total_seconds()
        if delay > 0:
            self._sleep(delay)

        try:
            dump = dump_request(request)
        except RequestDumpError as e:
            logger().warning(f'failed to dump request: {e}')
            return Response(str(e) + '\n', 500, mimetype='text/plain')

        head = sections.request_section(dump)
        body = [sections.client_section(request.environ)]
        if self.config.include_env:
            body.append(sections.environment_section())
        if params.payload > 0:
            body.append(sections.payload_section(params.payload))
        # WSGI hands over the request head as latin-1 text; environment
        # values may carry undecodable bytes
        data = head.encode('latin-1', 'replace')
        data += ''.join(body).encode('utf-8', 'surrogateescape')
        return Response(data, params.status, mimetype='text/plain')

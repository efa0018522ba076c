from enum import Enum

VERSION = '0.1.0'

DEFAULT_SERVICE_PORT = ':8080'
DEFAULT_METRICS_PORT = ':8081'

DEFAULT_STATUS = 200
SEPARATOR = '-' * 20


class Section(str, Enum):
    REQUEST = 'Request'
    CLIENT = 'Client'
    ENVIRONMENT = 'Environment'
    PAYLOAD = 'Payload'

#
#
#

from octodns.provider import ProviderException


class DnspodClientException(ProviderException):
    pass


class DnspodClientNotFound(DnspodClientException):
    def __init__(self):
        super().__init__('Not Found')


class DnspodClientUnauthorized(DnspodClientException):
    def __init__(self):
        super().__init__('Unauthorized')


class DnspodClientDecodeError(DnspodClientException):
    def __init__(self, method):
        super().__init__(f'{method}: response is not a JSON object')
        self.method = method


class DnspodApiError(DnspodClientException):
    """The HTTP call succeeded but the API answered with a failure status."""

    def __init__(self, action, code, message):
        super().__init__(f'could not {action}: {message}')
        self.code = code
        self.message = message

class Go2WebError(Exception):
    """Base class for every error that ends a fetch."""


class MalformedResponse(Go2WebError):
    pass


class RedirectWithoutLocation(Go2WebError):
    pass


class TooManyRedirects(Go2WebError):
    pass


class TransportFailure(Go2WebError):
    pass


class UnsupportedURL(Go2WebError):
    pass

"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class SearchTransportError(ServiceError):
    """Network, HTTP status or payload failure while querying the search API."""


class StoreUnavailable(ServiceError):
    pass

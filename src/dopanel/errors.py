from typing import List, Sequence


class PanelError(Exception):
    """
    Base for every error the droplets panel knows how to display
    """


class ClientUnavailable(PanelError):
    """
    The API client was never built, most likely because the token is missing
    """


class PaginationError(PanelError):
    """
    The pagination links of a listing could not be followed
    """


class FetchError(PanelError):
    """
    Listing the droplets failed midway. Whatever was gathered before the
    failure is available in `droplets`, the original error is the cause.
    """

    def __init__(self, message: str, droplets: Sequence = ()):
        super().__init__(message)
        self.droplets: List = list(droplets)

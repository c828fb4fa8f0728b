from functools import cached_property
from os import getenv
from typing import Text


class DoApi:
    """
    Root class for the DigitalOcean sub apis used by the panel.
    """

    def __init__(
        self,
        api_token: Text = getenv("DO_API_TOKEN", ""),
        per_page: int = 20,
        timeout: float = 30.0,
    ):
        super().__init__()
        self.api_token = api_token
        self.per_page = per_page
        self.timeout = timeout

    @cached_property
    def droplet(self):
        from .droplet.api import DropletApi

        return DropletApi(self)

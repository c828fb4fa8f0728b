from logging import getLogger
from typing import Any, Optional, Text

from httpx import HTTPError, Timeout
from typefit import api
from typefit import httpx_models as hm

logger = getLogger("dopanel.api")


class DoApiMixin(api.SyncClient):
    BASE_URL = "https://api.digitalocean.com/v2/"

    def __init__(self, api_token: Text, timeout: float = 30.0):
        super().__init__()
        self.api_token = api_token
        self.helper.http.timeout = Timeout(timeout)

    def headers(self) -> Optional[hm.HeaderTypes]:
        """
        The API expects the token in the headers
        """

        return {"Authorization": f"Bearer {self.api_token}"}

    def extract(self, data: Any, hint: Any) -> Any:
        """
        Every DigitalOcean response is wrapped into a dictionary, with the
        actual content living under a key named after the resource. By
        example, if the hint is "action" the response is expected to be
        something like

        >>> {
        >>>     "action": {
        >>>         # actual action content
        >>>     }
        >>> }

        If no hint is given, data is returned as-is (which is what you want
        for collections, since the pagination links are next to the items).

        Parameters
        ----------
        data
            Data to extract from
        hint
            Name of the key to look for
        """

        if hint:
            return data[hint]

        return data

    def decode(self, resp: hm.Response, hint: Any) -> Any:
        """
        Deletions answer 204 without any content, in that case don't try
        anything. Everything else is JSON.
        """

        if resp.status_code != 204:
            return resp.json()

    def raise_errors(self, resp: hm.Response, hint: Any) -> None:
        """
        Logs the API error body before letting the HTTP error go up
        """

        try:
            super().raise_errors(resp, hint)
        except HTTPError:
            try:
                logger.error("API error: %s", resp.json())
            except ValueError:
                logger.error("API error: %s %s", resp.status_code, resp.text)

            raise

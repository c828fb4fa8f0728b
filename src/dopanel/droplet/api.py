from typing import Optional, Text

from typefit import api

from .. import DoApiMixin
from ..api import DoApi
from ..errors import PaginationError
from .models import *
from .models import DropletCollection


class DropletApi(DoApiMixin):
    def __init__(self, root: DoApi):
        super().__init__(root.api_token, timeout=root.timeout)
        self.api = root
        self.per_page = max(1, min(200, root.per_page))

    @api.get("droplets?page={page}&per_page={per_page}")
    def _droplet_list(self, page: int, per_page: int) -> DropletCollection:
        """
        Lists droplets on a specific page of the list
        """

    def list_page(self, page: Optional[int] = None) -> DropletPage:
        """
        Gets one page of droplets along with the number of the page to ask
        for next.

        Parameters
        ----------
        page
            Page to get, None meaning the first one

        Returns
        -------
        The droplets of that page and the next page number, which is None
        when there is no more page to get.
        """

        page = page or 1
        collection = self._droplet_list(page=page, per_page=self.per_page)
        next_page = collection.next_page()

        if next_page is not None and next_page <= page:
            raise PaginationError(f"page {page} points back to page {next_page}")

        return DropletPage(list(collection.droplets), next_page)

    @api.delete("droplets/{droplet_id}")
    def droplet_delete(self, droplet_id: int) -> None:
        """
        Deletes a droplet. The API only acknowledges the request, the droplet
        might still be around for a little while.
        """

    @api.post(
        "droplets/{droplet_id}/actions",
        json=lambda action_type: {"type": action_type},
        hint="action",
    )
    def _droplet_action(self, droplet_id: int, action_type: Text) -> Action:
        """
        Initiates an action on a droplet
        """

    def droplet_action(self, droplet_id: int, kind: ActionKind) -> Action:
        """
        Initiates a reboot, a shutdown or the activation of private
        networking on a droplet. Like deletion, this returns as soon as the
        action is accepted and does not wait for it to complete.

        Parameters
        ----------
        droplet_id
            ID of the targeted droplet
        kind
            Which action to start
        """

        return self._droplet_action(droplet_id=droplet_id, action_type=kind.value)

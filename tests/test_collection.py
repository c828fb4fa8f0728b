import httpx
import pytest

from dopanel.errors import FetchError, PaginationError
from dopanel.droplet.models import DropletPage
from dopanel.panel.collection import DropletList, fetch_all

from .conftest import FakeClient, make_droplet, paged


def test_fetch_all_concatenates_pages_in_order():
    pages = [[make_droplet(1), make_droplet(2)], [make_droplet(3)], [make_droplet(4)]]
    client = FakeClient(paged(*pages))

    result = fetch_all(client.list_page)

    assert [d.id for d in result] == [1, 2, 3, 4]
    assert client.calls == [("list_page", None), ("list_page", 2), ("list_page", 3)]


def test_fetch_all_stops_on_page_without_next():
    client = FakeClient(
        [
            DropletPage([make_droplet(1)], None),
            DropletPage([make_droplet(2)], None),
        ]
    )

    result = fetch_all(client.list_page)

    assert [d.id for d in result] == [1]
    assert len(client.calls) == 1


def test_fetch_all_keeps_partial_result_on_error():
    client = FakeClient(paged([make_droplet(1)], [make_droplet(2)], [make_droplet(3)]))
    cause = httpx.ConnectError("connection refused")
    client.list_errors[1] = cause

    with pytest.raises(FetchError) as info:
        fetch_all(client.list_page)

    assert [d.id for d in info.value.droplets] == [1]
    assert info.value.__cause__ is cause
    assert "connection refused" in str(info.value)


def test_fetch_all_wraps_pagination_errors():
    client = FakeClient(paged([make_droplet(1)]))
    client.list_errors[0] = PaginationError("cannot find next page number")

    with pytest.raises(FetchError):
        fetch_all(client.list_page)


def test_fetch_all_gives_up_on_endless_links():
    def endless(page):
        return DropletPage([make_droplet(page or 1)], (page or 1) + 1)

    with pytest.raises(FetchError) as info:
        fetch_all(endless, max_pages=5)

    assert isinstance(info.value.__cause__, PaginationError)
    assert len(info.value.droplets) == 5


def test_swap_remove_moves_last_into_slot():
    a, b, c, d = (make_droplet(i, n) for i, n in enumerate("ABCD"))
    droplets = DropletList([a, b, c, d])

    removed = droplets.swap_remove(1)

    assert removed is b
    assert list(droplets) == [a, d, c]


def test_swap_remove_last_and_only():
    a, b = make_droplet(1), make_droplet(2)
    droplets = DropletList([a, b])

    droplets.swap_remove(1)
    assert list(droplets) == [a]

    droplets.swap_remove(0)
    assert len(droplets) == 0


def test_replace_discards_previous_content():
    droplets = DropletList([make_droplet(1), make_droplet(2)])
    droplets.replace([make_droplet(3)])

    assert [d.id for d in droplets] == [3]


def test_index_of():
    droplets = DropletList([make_droplet(5), make_droplet(8)])

    assert droplets.index_of(8) == 1
    assert droplets.index_of(9) is None

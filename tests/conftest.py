import pytest

from tabbysplit.config import get_settings
from tabbysplit.models import Bill, Item, ItemShare, Person, SplitPolicy


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def policy():
    return SplitPolicy()


@pytest.fixture
def uber_eats_items():
    return [
        Item(id="item-1", label="Mapo Tofu", price="13.75"),
        Item(id="item-2", label="Vegetable Fried Rice", price="11.55"),
        Item(id="item-3", label="Vegetables Spring Roll", price="2.20"),
        Item(id="item-4", label="Chicken with Cashew Nuts", price="15.35"),
        Item(id="item-5", label="Shanghai Spring Roll", price="2.30"),
        Item(id="item-6", label="Wonton Soup", price="3.30"),
        Item(id="item-7", label="Chicken with Broccoli", price="15.35"),
    ]


@pytest.fixture
def uber_eats_people():
    return [Person(id="peyton", name="Peyton"), Person(id="maggie", name="Maggie")]


@pytest.fixture
def uber_eats_shares():
    peyton = ["item-4", "item-5", "item-6", "item-7"]
    maggie = ["item-1", "item-2", "item-3"]
    return [ItemShare(item_id=item_id, person_id="peyton", weight=1) for item_id in peyton] + [
        ItemShare(item_id=item_id, person_id="maggie", weight=1) for item_id in maggie
    ]


@pytest.fixture
def uber_eats_bill():
    return Bill(
        subtotal="63.80",
        tax="6.38",
        tip="8.31",
        service_fee="11.48",
        delivery_fee="1.49",
        discount="-8.19",
        total="83.27",
    )

import pytest

from conftest import make_item, make_restaurant
from foodcourt.core.errors import NotFoundError, PreconditionError, ValidationError
from foodcourt.models import MenuCategory, MenuItem
from foodcourt.services import MenuCatalog


async def test_add_item_applies_defaults(store):
    restaurant = await make_restaurant(store, owner_id="owner-1")

    item = await MenuCatalog(store).add_item("owner-1", {"name": "Dal Makhani", "price": 9})

    assert item.restaurant_id == restaurant.id
    assert item.price == 9.0
    assert item.is_veg is True
    assert item.is_available is True
    assert item.category == MenuCategory.OTHER
    assert item.description == ""
    assert item.image


async def test_add_item_without_restaurant(store):
    with pytest.raises(PreconditionError, match="You need to create a restaurant first"):
        await MenuCatalog(store).add_item("owner-1", {"name": "Dal Makhani", "price": 9})


@pytest.mark.parametrize("fields, message", [
    ({"price": 9}, "Name and price are required"),
    ({"name": "Dal Makhani"}, "Name and price are required"),
    ({"name": "Dal Makhani", "price": -1}, "Price cannot be negative"),
    ({"name": "Dal Makhani", "price": 9, "category": "Soups"}, "Invalid category"),
])
async def test_add_item_validation(store, fields, message):
    await make_restaurant(store, owner_id="owner-1")

    with pytest.raises(ValidationError, match=message):
        await MenuCatalog(store).add_item("owner-1", fields)


async def test_update_item(store):
    await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1")

    updated = await MenuCatalog(store).update_item("owner-1", item.id, {
        "price": 0,
        "category": "Appetizers",
        "is_veg": False,
    })

    assert updated.price == 0.0
    assert updated.category == MenuCategory.APPETIZERS
    assert updated.is_veg is False
    assert updated.name == "Paneer Tikka"


async def test_update_rejects_negative_price(store):
    await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1")

    with pytest.raises(ValidationError, match="Price cannot be negative"):
        await MenuCatalog(store).update_item("owner-1", item.id, {"price": -5})


@pytest.mark.parametrize("fields", [
    {"name": "Renamed", "description": "changed", "price": -1},
    {"name": "Renamed", "description": "changed", "category": "Soups"},
])
async def test_rejected_update_is_not_saved_by_later_commit(store, session_maker, fields):
    catalog = MenuCatalog(store)
    await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1", name="Item A")
    other = await make_item(store, "owner-1", name="Item B")

    with pytest.raises(ValidationError):
        await catalog.update_item("owner-1", item.id, fields)
    await catalog.toggle_availability("owner-1", other.id, False)

    async with session_maker() as session:
        reloaded = await session.get(MenuItem, item.id)
    assert reloaded.name == "Item A"
    assert reloaded.description == ""


async def test_toggle_availability_sets_or_flips(store):
    catalog = MenuCatalog(store)
    await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1")

    item = await catalog.toggle_availability("owner-1", item.id, False)
    assert item.is_available is False

    item = await catalog.toggle_availability("owner-1", item.id)
    assert item.is_available is True


async def test_other_owners_item_looks_missing(store):
    catalog = MenuCatalog(store)
    await make_restaurant(store, owner_id="owner-1")
    await make_restaurant(store, owner_id="owner-2", name="Rival")
    item = await make_item(store, "owner-1")

    with pytest.raises(NotFoundError, match="Menu item not found"):
        await catalog.update_item("owner-2", item.id, {"price": 1})
    with pytest.raises(NotFoundError, match="Menu item not found"):
        await catalog.toggle_availability("owner-2", item.id)
    with pytest.raises(NotFoundError, match="Menu item not found"):
        await catalog.delete_item("owner-2", item.id)

    assert len(await catalog.list_mine("owner-1")) == 1


async def test_delete_item(store):
    catalog = MenuCatalog(store)
    restaurant = await make_restaurant(store, owner_id="owner-1")
    item = await make_item(store, "owner-1")

    await catalog.delete_item("owner-1", item.id)

    assert await catalog.list_for_restaurant(restaurant.id) == []
    with pytest.raises(NotFoundError):
        await catalog.delete_item("owner-1", item.id)


async def test_public_menu_includes_unavailable_items(store):
    catalog = MenuCatalog(store)
    restaurant = await make_restaurant(store, owner_id="owner-1")
    await make_item(store, "owner-1", name="Samosa")
    await make_item(store, "owner-1", name="Kulfi", is_available=False)

    names = {i.name for i in await catalog.list_for_restaurant(restaurant.id)}

    assert names == {"Samosa", "Kulfi"}

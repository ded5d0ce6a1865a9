import pytest

from routebid.core.exceptions import OrderValidationError
from routebid.modules.drivers.schemas import DriverLocationUpdate
from routebid.modules.drivers.service import DriverService
from routebid.modules.orders.service import OrderService

from conftest import run, TIMES_SQUARE, NEAR_PICKUP

FAR_PICKUP = (41.2090, -73.9850)


@pytest.fixture
def scenario(customer, create_order):
    near = create_order(customer, pickup=NEAR_PICKUP, title="Cerca")
    far = create_order(customer, pickup=FAR_PICKUP, title="Lejos")
    return near, far


def test_driver_sees_only_nearby_orders(db, make_user, scenario):
    near, far = scenario
    driver = make_user("driver", lat=TIMES_SQUARE[0], lng=TIMES_SQUARE[1])

    result = run(OrderService(db).list_orders(driver))

    assert [o["id"] for o in result.orders] == [near["id"]]
    assert result.orders[0]["distance_km"] == pytest.approx(0.14, abs=0.01)
    assert result.filters["radius_km"] == 5.0


def test_larger_radius_sorted_nearest_first(db, make_user, scenario):
    near, far = scenario
    driver = make_user("driver", lat=TIMES_SQUARE[0], lng=TIMES_SQUARE[1])

    result = run(OrderService(db).list_orders(driver, radius_km=60))

    assert [o["id"] for o in result.orders] == [near["id"], far["id"]]
    assert result.orders[1]["distance_km"] == pytest.approx(50.0, abs=0.5)


def test_customer_sees_all_own_orders(db, customer, scenario):
    result = run(OrderService(db).list_orders(customer))
    assert result.count == 2
    assert all("distance_km" not in o for o in result.orders)


def test_driver_without_location_sees_everything(db, make_user, scenario):
    driver = make_user("driver")
    result = run(OrderService(db).list_orders(driver))

    assert result.count == 2
    assert result.filters["driver_location"] is None
    assert all("distance_km" not in o for o in result.orders)


def test_only_open_orders_are_listed(db, customer, make_user, scenario):
    near, far = scenario
    run(OrderService(db).cancel_order(near["id"], customer))
    driver = make_user("driver", lat=TIMES_SQUARE[0], lng=TIMES_SQUARE[1])

    assert run(OrderService(db).list_orders(driver, radius_km=100)).count == 1


def test_invalid_radius(db, make_user):
    with pytest.raises(OrderValidationError):
        run(OrderService(db).list_available_orders(make_user("driver"), radius_km=0))


def test_reported_location_drives_discovery(db, make_user, scenario):
    near, far = scenario
    driver = make_user("driver")

    response = run(DriverService(db).update_location(
        DriverLocationUpdate(latitude=FAR_PICKUP[0], longitude=FAR_PICKUP[1]), driver
    ))
    assert response.latitude == FAR_PICKUP[0]

    result = run(OrderService(db).list_orders(driver))
    assert [o["id"] for o in result.orders] == [far["id"]]
    assert result.orders[0]["distance_km"] == 0.0

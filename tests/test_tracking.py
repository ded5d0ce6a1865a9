import pytest

from routebid.core.exceptions import ForbiddenError, InvalidTransitionError, NotFoundError
from routebid.modules.orders.service import OrderService
from routebid.modules.tracking.schemas import LocationReport
from routebid.modules.tracking.service import TrackingService
from routebid.shared.database.models import User

from conftest import run


def report(db, order_id, driver, lat, lng):
    return run(TrackingService(db).report_location(order_id, LocationReport(lat=lat, lng=lng), driver))


def test_report_updates_projection_and_history(db, assigned_order, customer, drivers):
    driver = drivers[0]
    report(db, assigned_order["id"], driver, 40.7590, -73.9850)
    run(OrderService(db).mark_picked_up(assigned_order["id"], driver))
    last = report(db, assigned_order["id"], driver, 40.7400, -73.9900)

    assert last.current_location["lat"] == 40.7400
    assert last.status == "picked_up"

    tracking = run(TrackingService(db).get_tracking(assigned_order["id"], customer))
    assert tracking.status == "picked_up"
    assert tracking.current_location["lng"] == -73.9900
    assert [(p["lat"], p["status"]) for p in tracking.history] == [
        (40.7590, "accepted"),
        (40.7400, "picked_up"),
    ]
    assert tracking.timeline["accepted_at"] is not None
    assert tracking.timeline["picked_up_at"] is not None
    assert tracking.timeline["delivered_at"] is None

    db.expire_all()
    stored = db.get(User, driver.id)
    assert (stored.last_lat, stored.last_lng) == (40.7400, -73.9900)
    assert stored.location_updated_at is not None


def test_other_driver_cannot_report(db, assigned_order, drivers):
    with pytest.raises(ForbiddenError):
        report(db, assigned_order["id"], drivers[1], 40.0, -73.0)


def test_no_reports_before_assignment(db, customer, drivers, create_order):
    order = create_order(customer)
    with pytest.raises(ForbiddenError):
        report(db, order["id"], drivers[0], 40.0, -73.0)


def test_no_reports_after_delivery(db, assigned_order, drivers):
    service = OrderService(db)
    run(service.mark_picked_up(assigned_order["id"], drivers[0]))
    run(service.mark_delivered(assigned_order["id"], drivers[0]))

    with pytest.raises(InvalidTransitionError) as exc_info:
        report(db, assigned_order["id"], drivers[0], 40.0, -73.0)
    assert exc_info.value.current_status == "delivered"


def test_unknown_order(db, drivers):
    with pytest.raises(NotFoundError):
        report(db, "missing", drivers[0], 40.0, -73.0)


def test_tracking_visibility(db, assigned_order, customer, drivers, make_user):
    run(TrackingService(db).get_tracking(assigned_order["id"], drivers[0]))
    with pytest.raises(ForbiddenError):
        run(TrackingService(db).get_tracking(assigned_order["id"], drivers[1]))
    with pytest.raises(ForbiddenError):
        run(TrackingService(db).get_tracking(assigned_order["id"], make_user("customer")))


def test_tracking_without_reports(db, assigned_order, customer):
    tracking = run(TrackingService(db).get_tracking(assigned_order["id"], customer))
    assert tracking.current_location is None
    assert tracking.history == []

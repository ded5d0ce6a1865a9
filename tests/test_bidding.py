from decimal import Decimal

import pytest
from pydantic import ValidationError

from routebid.core.exceptions import (
    NotFoundError, ForbiddenError, InvalidTransitionError, ConflictError, OrderValidationError
)
from routebid.modules.bidding.schemas import BidCreate
from routebid.modules.bidding.service import BiddingService
from routebid.modules.orders.repository import OrderRepository
from routebid.modules.orders.service import OrderService
from routebid.shared.database.models import Bid, Notification, Order

from conftest import run


def notifications_of(db, user_id, type_=None):
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if type_:
        query = query.filter(Notification.type == type_)
    return query.all()


class TestPlaceBid:
    def test_creates_bid_and_notifies_customer(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        result = place_bid(order["id"], drivers[0], price="18.50", message="  Llego en 10 min  ")

        assert result.created is True
        assert result.bid["status"] == "pending"
        assert result.bid["bid_price"] == 18.5
        assert result.bid["driver_name"] == "Luis Test"
        assert result.bid["message"] == "Llego en 10 min"

        inbox = notifications_of(db, customer.id, "new_bid")
        assert len(inbox) == 1
        assert "18.50" in inbox[0].message
        assert order["order_number"] in inbox[0].message

    def test_rebid_updates_in_place(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        first = place_bid(order["id"], drivers[0], price="18.00")
        second = place_bid(order["id"], drivers[0], price="16.00")

        assert second.created is False
        assert second.bid["id"] == first.bid["id"]
        assert second.bid["bid_price"] == 16.0
        assert db.query(Bid).filter(Bid.order_id == order["id"]).count() == 1

    def test_customer_cannot_bid(self, customer, create_order, place_bid):
        order = create_order(customer)
        with pytest.raises(ForbiddenError):
            place_bid(order["id"], customer)

    def test_unknown_order(self, drivers, place_bid):
        with pytest.raises(NotFoundError):
            place_bid("0" * 32, drivers[0])

    def test_non_positive_price_is_rejected(self, db, customer, drivers, create_order):
        order = create_order(customer)
        with pytest.raises(ValidationError):
            BidCreate(bid_price=Decimal("0"))

        data = BidCreate.model_construct(bid_price=Decimal("0"))
        with pytest.raises(OrderValidationError) as exc_info:
            run(BiddingService(db).place_bid(order["id"], data, drivers[0]))
        assert exc_info.value.field == "bid_price"

    def test_delivery_estimate_before_pickup_is_invalid(self):
        with pytest.raises(ValidationError):
            BidCreate(
                bid_price=Decimal("10"),
                estimated_pickup_time="2026-01-01T12:00:00",
                estimated_delivery_time="2026-01-01T11:00:00"
            )

    def test_bidding_closes_after_assignment(self, assigned_order, make_user, place_bid):
        latecomer = make_user("driver")
        with pytest.raises(InvalidTransitionError) as exc_info:
            place_bid(assigned_order["id"], latecomer)
        assert exc_info.value.current_status == "accepted"

    def test_bidding_closed_after_cancel(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        run(OrderService(db).cancel_order(order["id"], customer))
        with pytest.raises(InvalidTransitionError):
            place_bid(order["id"], drivers[0])


class TestListBids:
    def test_customer_sees_all_sorted_by_price(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0], price="25.00")
        place_bid(order["id"], drivers[1], price="15.00")
        place_bid(order["id"], drivers[2], price="20.00")

        result = run(BiddingService(db).list_bids(order["id"], customer))
        assert [b["bid_price"] for b in result.bids] == [15.0, 20.0, 25.0]

    def test_driver_sees_only_own_bid(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0])
        place_bid(order["id"], drivers[1])

        result = run(BiddingService(db).list_bids(order["id"], drivers[1]))
        assert result.count == 1
        assert result.bids[0]["user_id"] == drivers[1].id

    def test_other_customer_is_forbidden(self, db, customer, make_user, create_order):
        order = create_order(customer)
        with pytest.raises(ForbiddenError):
            run(BiddingService(db).list_bids(order["id"], make_user("customer")))


class TestAcceptBid:
    def test_exclusive_assignment_and_fan_out(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        for i, driver in enumerate(drivers):
            place_bid(order["id"], driver, price=f"{20 + i}.00")

        result = run(BiddingService(db).accept_bid(order["id"], drivers[1].id, customer))

        assert result.order["status"] == "accepted"
        assert result.order["assigned_driver_id"] == drivers[1].id
        assert result.order["assigned_driver_name"] == "Marta Test"
        assert result.order["assigned_bid_price"] == 21.0
        assert result.order["accepted_at"] is not None
        assert result.accepted_bid["status"] == "accepted"
        assert result.rejected_count == 2

        db.expire_all()
        statuses = {b.user_id: b.status for b in db.query(Bid).filter(Bid.order_id == order["id"])}
        assert statuses == {
            drivers[0].id: "rejected",
            drivers[1].id: "accepted",
            drivers[2].id: "rejected",
        }

        outcome = db.query(Notification).filter(
            Notification.order_id == order["id"],
            Notification.type.in_(["bid_accepted", "bid_rejected"])
        ).all()
        assert len(outcome) == len(drivers)
        assert [n.user_id for n in outcome if n.type == "bid_accepted"] == [drivers[1].id]
        assert sorted(n.user_id for n in outcome if n.type == "bid_rejected") == sorted(
            [drivers[0].id, drivers[2].id]
        )

        # Las notificaciones new_bid previas siguen intactas
        new_bids = notifications_of(db, customer.id, "new_bid")
        assert len(new_bids) == 3
        assert not any(n.is_read for n in new_bids)

    def test_second_accept_conflicts(self, db, assigned_order, customer, drivers):
        with pytest.raises(ConflictError) as exc_info:
            run(BiddingService(db).accept_bid(assigned_order["id"], drivers[2].id, customer))
        assert exc_info.value.status_code == 409
        assert exc_info.value.current_status == "accepted"

        db.expire_all()
        order = db.query(Order).filter(Order.id == assigned_order["id"]).one()
        assert order.assigned_driver_id == drivers[0].id

    def test_only_owner_can_accept(self, db, customer, drivers, make_user, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0])
        with pytest.raises(ForbiddenError):
            run(BiddingService(db).accept_bid(order["id"], drivers[0].id, make_user("customer")))

    def test_driver_cannot_accept(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0])
        with pytest.raises(ForbiddenError):
            run(BiddingService(db).accept_bid(order["id"], drivers[0].id, drivers[0]))

    def test_driver_without_bid(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0])
        with pytest.raises(NotFoundError) as exc_info:
            run(BiddingService(db).accept_bid(order["id"], drivers[1].id, customer))
        assert exc_info.value.detail["field"] == "user_id"

        db.expire_all()
        assert db.query(Order.status).filter(Order.id == order["id"]).scalar() == "pending_bids"

    def test_cancelled_order_cannot_be_accepted(self, db, customer, drivers, create_order, place_bid):
        order = create_order(customer)
        place_bid(order["id"], drivers[0])
        run(OrderService(db).cancel_order(order["id"], customer))

        with pytest.raises(InvalidTransitionError) as exc_info:
            run(BiddingService(db).accept_bid(order["id"], drivers[0].id, customer))
        assert not isinstance(exc_info.value, ConflictError)
        assert exc_info.value.current_status == "cancelled"


def test_conditional_write_refuses_stale_status(db, assigned_order):
    repository = OrderRepository(db)
    changed = repository.compare_and_set_status(
        assigned_order["id"], "pending_bids", {"status": "accepted", "assigned_driver_id": None}
    )
    db.commit()

    assert changed is False
    db.expire_all()
    assert repository.get_order(assigned_order["id"]).assigned_driver_id is not None

# orders/tests/test_order_service.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from delivery.models import Motoboy
from delivery.services.calculator import DeliveryCalculation
from orders.models import Order, OrderItem, OrderStatusEvent
from orders.services import (
    InvalidFeeError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionFailedError,
    assign_courier,
    attach_delivery_calculation,
    create_order,
    override_delivery_fee,
    request_transition,
)
from products.models import Product, StockLog

User = get_user_model()


class RequestTransitionTests(TestCase):
    """
    GUARANTEES:
    - a valid transition updates status and stamps its timestamp once
    - an invalid transition changes nothing
    - every successful change writes one status event
    """

    def setUp(self):
        self.user = User.objects.create_user(email="kitchen@example.com", password="x", role="kitchen")
        self.order = Order.objects.create()

    def test_forward_transition_stamps_timestamp(self):
        order = request_transition(self.order, Order.STATUS_ACCEPTED, user=self.user)

        self.assertEqual(order.status, Order.STATUS_ACCEPTED)
        self.assertIsNotNone(order.accepted_at)
        self.assertIsNone(order.preparing_at)

        event = OrderStatusEvent.objects.get(order=order)
        self.assertEqual((event.from_status, event.to_status), ("pending", "accepted"))
        self.assertEqual(event.actor, self.user)

    def test_timestamp_is_not_overwritten(self):
        order = Order.objects.create(order_type=Order.TYPE_COUNTER, status=Order.STATUS_ACCEPTED)
        order = request_transition(order, Order.STATUS_PREPARING)
        stamped = order.preparing_at

        order = request_transition(order, Order.STATUS_READY)
        order = request_transition(order, Order.STATUS_DELIVERED)

        self.assertEqual(order.preparing_at, stamped)
        self.assertIsNotNone(order.ready_at)
        self.assertIsNotNone(order.delivered_at)
        self.assertIsNone(order.dispatched_at)

    def test_delivery_stamps_are_ordered_and_never_rewritten(self):
        motoboy = Motoboy.objects.create(name="Carlos", whatsapp="11988887777")
        steps = [
            ("accepted_at", lambda o: request_transition(o, Order.STATUS_ACCEPTED)),
            ("preparing_at", lambda o: request_transition(o, Order.STATUS_PREPARING)),
            ("ready_at", lambda o: request_transition(o, Order.STATUS_READY)),
            ("dispatched_at", lambda o: assign_courier(o, motoboy.id)),
            ("arrived_at", lambda o: request_transition(o, Order.STATUS_ARRIVED)),
            ("delivered_at", lambda o: request_transition(o, Order.STATUS_DELIVERED)),
        ]
        all_fields = [name for name, _ in steps]

        seen = {}
        order = self.order
        for field, step in steps:
            step(order)
            order = Order.objects.get(pk=self.order.pk)

            stamp = getattr(order, field)
            self.assertIsNotNone(stamp, field)
            for earlier_field, earlier_stamp in seen.items():
                self.assertEqual(getattr(order, earlier_field), earlier_stamp, earlier_field)
                self.assertGreaterEqual(stamp, earlier_stamp, field)
            for later_field in all_fields[len(seen) + 1:]:
                self.assertIsNone(getattr(order, later_field), later_field)

            seen[field] = stamp

        self.assertEqual(order.status, Order.STATUS_DELIVERED)

    def test_cancel_has_no_timestamp(self):
        order = request_transition(self.order, Order.STATUS_CANCELLED)
        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertIsNone(order.accepted_at)

    def test_invalid_transition_changes_nothing(self):
        with self.assertRaises(InvalidTransitionError):
            request_transition(self.order, Order.STATUS_DELIVERED)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)
        self.assertFalse(OrderStatusEvent.objects.exists())

    def test_terminal_order_cannot_move(self):
        order = Order.objects.create(status=Order.STATUS_DELIVERED)
        with self.assertRaises(InvalidTransitionError) as ctx:
            request_transition(order, Order.STATUS_CANCELLED)
        self.assertEqual(ctx.exception.allowed, [])

    def test_stale_instance_is_validated_against_stored_status(self):
        stale = Order.objects.get(pk=self.order.pk)
        request_transition(self.order, Order.STATUS_ACCEPTED)

        # stale copy still says "pending"; accepting again must fail
        with self.assertRaises(InvalidTransitionError) as ctx:
            request_transition(stale, Order.STATUS_ACCEPTED)
        self.assertEqual(ctx.exception.current_status, Order.STATUS_ACCEPTED)

    def test_missing_order(self):
        with self.assertRaises(NotFoundError):
            request_transition(uuid.uuid4(), Order.STATUS_ACCEPTED)


class AssignCourierTests(TestCase):
    """
    GUARANTEES:
    - only ready orders can be assigned
    - status is checked before the courier
    - assignment dispatches the order and stamps dispatched_at
    """

    def setUp(self):
        self.motoboy = Motoboy.objects.create(name="Carlos", whatsapp="11988887777")

    def test_assign_ready_order(self):
        order = Order.objects.create(status=Order.STATUS_READY)

        order = assign_courier(order, self.motoboy.id)

        self.assertEqual(order.status, Order.STATUS_DISPATCHED)
        self.assertEqual(order.motoboy, self.motoboy)
        self.assertIsNotNone(order.dispatched_at)
        self.assertTrue(
            OrderStatusEvent.objects.filter(order=order, to_status="dispatched").exists()
        )

    def test_non_ready_statuses_fail_precondition(self):
        for status in ("pending", "accepted", "preparing", "dispatched", "arrived", "delivered", "cancelled"):
            with self.subTest(status=status):
                order = Order.objects.create(status=status)
                with self.assertRaises(PreconditionFailedError) as ctx:
                    assign_courier(order, self.motoboy.id)
                self.assertEqual(ctx.exception.expected, "ready")
                self.assertEqual(ctx.exception.actual, status)

                order.refresh_from_db()
                self.assertIsNone(order.motoboy_id)

    def test_status_checked_before_courier(self):
        order = Order.objects.create(status=Order.STATUS_PENDING)
        with self.assertRaises(PreconditionFailedError):
            assign_courier(order, uuid.uuid4())

    def test_unknown_courier(self):
        order = Order.objects.create(status=Order.STATUS_READY)
        for motoboy_id in (uuid.uuid4(), "not-a-uuid"):
            with self.assertRaises(NotFoundError):
                assign_courier(order, motoboy_id)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_READY)

    def test_inactive_courier_is_not_assignable(self):
        self.motoboy.is_active = False
        self.motoboy.save()
        order = Order.objects.create(status=Order.STATUS_READY)

        with self.assertRaises(NotFoundError):
            assign_courier(order, self.motoboy.id)


class OverrideDeliveryFeeTests(TestCase):
    """
    GUARANTEES:
    - the first override captures the computed fee
    - later overrides keep that captured value
    - total always equals subtotal - discount + delivery_fee
    """

    def setUp(self):
        self.order = Order.objects.create(subtotal=Decimal("90.00"), delivery_fee=Decimal("6.90"))
        self.order.recompute_total()
        self.order.save()

    def test_two_overrides(self):
        order = override_delivery_fee(self.order, "12.00")

        self.assertEqual(order.original_delivery_fee, Decimal("6.90"))
        self.assertEqual(order.delivery_fee, Decimal("12.00"))
        self.assertEqual(order.total, Decimal("102.00"))
        self.assertTrue(order.delivery_fee_adjusted)
        self.assertIsNotNone(order.delivery_fee_adjusted_at)

        order = override_delivery_fee(order, 15)

        self.assertEqual(order.original_delivery_fee, Decimal("6.90"))
        self.assertEqual(order.delivery_fee, Decimal("15.00"))
        self.assertEqual(order.total, Decimal("105.00"))

    def test_zero_fee_is_allowed(self):
        order = override_delivery_fee(self.order, "0")
        self.assertEqual(order.total, Decimal("90.00"))

    def test_discount_is_applied(self):
        self.order.discount = Decimal("10.00")
        self.order.save()
        order = override_delivery_fee(self.order, "5.00")
        self.assertEqual(order.total, Decimal("85.00"))

    def test_invalid_fees_change_nothing(self):
        for bad in ("abc", "-1", "NaN", "Infinity", None, "", True, "1e30", "100000000", "99999999.995"):
            with self.subTest(fee=bad):
                with self.assertRaises(InvalidFeeError):
                    override_delivery_fee(self.order, bad)

        self.order.refresh_from_db()
        self.assertFalse(self.order.delivery_fee_adjusted)
        self.assertIsNone(self.order.original_delivery_fee)
        self.assertEqual(self.order.total, Decimal("96.90"))


class AttachDeliveryCalculationTests(TestCase):
    def _calc(self, fee="9.90"):
        return DeliveryCalculation(
            distance_km=5.0, fee=Decimal(fee), eta_minutes=30, lat=-23.5, lng=-46.6
        )

    def test_sets_fee_distance_eta_and_total(self):
        order = Order.objects.create(subtotal=Decimal("20.00"))

        order = attach_delivery_calculation(order, self._calc())

        self.assertEqual(order.delivery_fee, Decimal("9.90"))
        self.assertEqual(order.delivery_distance_km, Decimal("5.00"))
        self.assertEqual(order.estimated_minutes, 30)
        self.assertEqual(order.total, Decimal("29.90"))

    def test_overridden_fee_is_kept(self):
        order = Order.objects.create(subtotal=Decimal("20.00"))
        order = override_delivery_fee(order, "3.00")

        order = attach_delivery_calculation(order, self._calc())

        self.assertEqual(order.delivery_fee, Decimal("3.00"))
        self.assertEqual(order.estimated_minutes, 30)


class CreateOrderTests(TestCase):
    """
    GUARANTEES:
    - stock is decremented per line and never goes negative
    - every decrement writes a StockLog that names the order
    - a failing line does not undo the others
    - duplicate lines are decremented one by one
    """

    def setUp(self):
        self.beer = Product.objects.create(name="Skol Lata 350ml", sale_price=Decimal("4.50"), stock=5)
        self.ice = Product.objects.create(name="Gelo 2kg", sale_price=Decimal("8.00"), stock=10)

    def _line(self, product, quantity, **extra):
        return {"product_id": product.id, "quantity": quantity, **extra}

    def test_creates_order_items_and_logs(self):
        result = create_order(
            {"order_type": Order.TYPE_COUNTER, "customer_name": "Ana"},
            [self._line(self.beer, 3), self._line(self.ice, 1)],
        )

        order = result.order
        self.assertTrue(result.ok)
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertTrue(order.order_no.startswith("ORD"))
        self.assertEqual(order.subtotal, Decimal("21.50"))
        self.assertEqual(order.total, Decimal("21.50"))
        self.assertEqual(order.items.count(), 2)

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 2)

        log = StockLog.objects.get(product=self.beer)
        self.assertEqual((log.previous_stock, log.new_stock, log.change), (5, 2, -3))
        self.assertEqual(log.reason, f"Pedido #{str(order.id)[:8]}")

    def test_stock_is_floored_at_zero(self):
        create_order({}, [self._line(self.beer, 3)])
        create_order({}, [self._line(self.beer, 3)])

        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 0)

        last = StockLog.objects.get(product=self.beer, previous_stock=2)
        self.assertEqual((last.previous_stock, last.new_stock, last.change), (2, 0, -3))

    def test_duplicate_lines_are_not_merged(self):
        result = create_order({}, [self._line(self.beer, 3), self._line(self.beer, 3)])

        self.assertEqual(result.order.items.count(), 2)
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 0)
        changes = list(
            StockLog.objects.filter(product=self.beer)
            .order_by("-previous_stock")
            .values_list("previous_stock", "new_stock")
        )
        self.assertEqual(changes, [(5, 2), (2, 0)])

    def test_unknown_product_does_not_undo_other_lines(self):
        ghost = uuid.uuid4()
        result = create_order(
            {},
            [
                self._line(self.beer, 1),
                {"product_id": ghost, "product_name": "Discontinued", "unit_price": "10.00", "quantity": 2},
                self._line(self.ice, 2),
            ],
        )

        self.assertFalse(result.ok)
        self.assertEqual(len(result.stock_failures), 1)
        failure = result.stock_failures[0]
        self.assertEqual((failure.index, failure.reason), (1, "product_not_found"))
        self.assertEqual(failure.product_id, str(ghost))

        # the snapshot line is kept; stock moved for the known products only
        self.assertEqual(result.order.items.count(), 3)
        self.beer.refresh_from_db()
        self.ice.refresh_from_db()
        self.assertEqual((self.beer.stock, self.ice.stock), (4, 8))
        self.assertEqual(StockLog.objects.count(), 2)

    def test_line_without_snapshot_for_unknown_product_is_rejected(self):
        result = create_order({}, [{"product_id": uuid.uuid4(), "quantity": 1}, self._line(self.ice, 1)])

        self.assertEqual([f.reason for f in result.stock_failures], ["invalid_line"])
        self.assertEqual(result.order.items.count(), 1)

    def test_invalid_quantity_is_rejected(self):
        result = create_order({}, [self._line(self.beer, 0)])

        self.assertEqual(result.stock_failures[0].reason, "invalid_line")
        self.beer.refresh_from_db()
        self.assertEqual(self.beer.stock, 5)

    def test_explicit_subtotal_and_status(self):
        result = create_order(
            {"subtotal": "50.00", "discount": "5.00", "delivery_fee": "6.90", "status": Order.STATUS_ACCEPTED},
            [self._line(self.ice, 1)],
        )
        order = result.order
        self.assertEqual(order.status, Order.STATUS_ACCEPTED)
        self.assertEqual(order.subtotal, Decimal("50.00"))
        self.assertEqual(order.total, Decimal("51.90"))

    def test_items_are_immutable(self):
        item = create_order({}, [self._line(self.ice, 1)]).items[0]

        item.quantity = 5
        with self.assertRaises(ValidationError):
            item.save()
        with self.assertRaises(ValidationError):
            item.delete()
        self.assertEqual(OrderItem.objects.get(pk=item.pk).quantity, 1)

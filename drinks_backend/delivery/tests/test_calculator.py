# delivery/tests/test_calculator.py

from decimal import Decimal

from django.test import SimpleTestCase

from delivery.services.calculator import calculate_delivery
from delivery.services.results import NOT_FOUND, Coordinates, LookupResult, PostalAddress

STORE = (-23.5505, -46.6333)


class StubGeocoder:
    def __init__(self, result):
        self.result = result
        self.queries = []

    def geocode(self, full_address):
        self.queries.append(full_address)
        return self.result


class StubPostalLookup:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, code):
        self.calls.append(code)
        return self.result


class CalculateDeliveryTests(SimpleTestCase):
    """
    GUARANTEES:
    - missing parts are backfilled from the postal code
    - an address that stays incomplete is rejected before geocoding
    - a geocoder failure becomes address_not_found
    - the fee follows the distance to the store
    """

    FULL = {
        "street": "Rua Augusta",
        "number": "500",
        "neighborhood": "Consolação",
        "city": "São Paulo",
        "state": "SP",
        "postal_code": "01305000",
    }

    def test_full_address_near_store(self):
        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=-23.5525, lng=-46.6350)))

        result = calculate_delivery(self.FULL, *STORE, geocoder=geocoder)

        self.assertTrue(result.ok)
        calc = result.data
        self.assertLess(calc.distance_km, 3)
        self.assertEqual(calc.fee, Decimal("6.90"))
        self.assertEqual(calc.lat, -23.5525)
        self.assertEqual(geocoder.queries, ["Rua Augusta, 500, Consolação, São Paulo, SP, Brasil"])

    def test_far_address_costs_more(self):
        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=-23.6005, lng=-46.6333)))

        calc = calculate_delivery(self.FULL, *STORE, geocoder=geocoder).data

        self.assertGreater(calc.distance_km, 3)
        self.assertGreater(calc.fee, Decimal("6.90"))
        self.assertGreater(calc.eta_minutes, 22)

    def test_store_fee_parameters_are_used(self):
        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=-23.5525, lng=-46.6350)))

        calc = calculate_delivery(
            self.FULL, *STORE, base_fee=Decimal("4.00"), geocoder=geocoder
        ).data

        self.assertEqual(calc.fee, Decimal("4.00"))

    def test_backfill_from_postal_code(self):
        postal = StubPostalLookup(
            LookupResult.found(
                PostalAddress(
                    street="Rua Augusta",
                    neighborhood="Consolação",
                    city="São Paulo",
                    state="SP",
                    postal_code="01305000",
                )
            )
        )
        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=-23.5525, lng=-46.6350)))

        result = calculate_delivery(
            {"postal_code": "01305-000", "number": "500"},
            *STORE,
            geocoder=geocoder,
            postal_lookup=postal,
        )

        self.assertTrue(result.ok)
        self.assertEqual(postal.calls, ["01305-000"])
        self.assertIn("Rua Augusta, 500", geocoder.queries[0])

    def test_incomplete_address(self):
        postal = StubPostalLookup(LookupResult.not_found("postal_code_not_found"))
        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=0, lng=0)))

        result = calculate_delivery(
            {"street": "Rua X", "postal_code": "00000000"},
            *STORE,
            geocoder=geocoder,
            postal_lookup=postal,
        )

        self.assertEqual(result.kind, NOT_FOUND)
        self.assertEqual(result.detail, "incomplete_address")
        self.assertEqual(geocoder.queries, [])

    def test_geocoder_failure(self):
        geocoder = StubGeocoder(LookupResult.service_error("HTTP 503"))

        result = calculate_delivery(self.FULL, *STORE, geocoder=geocoder)

        self.assertEqual(result.kind, NOT_FOUND)
        self.assertEqual(result.detail, "address_not_found")

    def test_accepts_objects_with_attributes(self):
        class Addr:
            street = "Rua Augusta"
            number = "500"
            neighborhood = "Consolação"
            city = "São Paulo"
            state = "SP"
            postal_code = ""

        geocoder = StubGeocoder(LookupResult.found(Coordinates(lat=-23.5525, lng=-46.6350)))
        self.assertTrue(calculate_delivery(Addr(), *STORE, geocoder=geocoder).ok)

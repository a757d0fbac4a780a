# delivery/tests/test_lookups.py

import http.client
from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from delivery.models import GeocodeCacheEntry
from delivery.services.exceptions import ExternalServiceError
from delivery.services.geocoding import DatabaseGeocodeCache, Geocoder, InMemoryGeocodeCache
from delivery.services.postal_lookup import resolve_address_by_postal_code
from delivery.services.results import FOUND, NOT_FOUND, SERVICE_ERROR, Coordinates

REQUEST_JSON = "delivery.services.http.request_json"
URLOPEN = "delivery.services.http.urlopen"

VIACEP_PAULISTA = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


class PostalLookupTests(SimpleTestCase):
    """
    GUARANTEES:
    - codes are normalized to digits before use
    - malformed codes never reach the network
    - the lookup never raises
    """

    def test_malformed_code_is_not_found_without_request(self):
        with mock.patch(REQUEST_JSON) as request_json:
            for code in ("", "1234", "123456789", "abcdefgh"):
                result = resolve_address_by_postal_code(code)
                self.assertEqual(result.kind, NOT_FOUND)
        request_json.assert_not_called()

    def test_found_with_punctuation(self):
        with mock.patch(REQUEST_JSON, return_value=VIACEP_PAULISTA) as request_json:
            result = resolve_address_by_postal_code("01310-100")

        self.assertEqual(result.kind, FOUND)
        self.assertEqual(result.data.street, "Avenida Paulista")
        self.assertEqual(result.data.city, "São Paulo")
        self.assertEqual(result.data.postal_code, "01310100")
        self.assertIn("01310100", request_json.call_args[0][0])

    def test_service_not_found_flag(self):
        with mock.patch(REQUEST_JSON, return_value={"erro": True}):
            result = resolve_address_by_postal_code("99999999")
        self.assertEqual(result.kind, NOT_FOUND)

    def test_network_failure_is_service_error(self):
        with mock.patch(REQUEST_JSON, side_effect=ExternalServiceError("timeout")):
            result = resolve_address_by_postal_code("01310100")
        self.assertEqual(result.kind, SERVICE_ERROR)
        self.assertFalse(result.ok)

    def test_truncated_response_is_service_error(self):
        with mock.patch(URLOPEN, side_effect=http.client.IncompleteRead(b"")):
            result = resolve_address_by_postal_code("01310100")
        self.assertEqual(result.kind, SERVICE_ERROR)

    @override_settings(POSTAL_LOOKUP_URL="notaurl/{code}")
    def test_misconfigured_url_is_service_error(self):
        with mock.patch(URLOPEN) as urlopen:
            result = resolve_address_by_postal_code("01310100")
        self.assertEqual(result.kind, SERVICE_ERROR)
        urlopen.assert_not_called()


class FakeClock:
    def __init__(self):
        self.now = timezone.now()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class GeocoderTests(SimpleTestCase):
    """
    GUARANTEES:
    - a cache hit younger than the TTL does not touch the network
    - an entry older than the TTL is refreshed
    - failures are reported, never raised
    """

    ADDRESS = "Avenida Paulista, 1000, Bela Vista, São Paulo, SP, Brasil"
    MATCH = [{"lat": "-23.5650", "lon": "-46.6520", "display_name": "Av. Paulista"}]

    def setUp(self):
        self.cache = InMemoryGeocodeCache()
        self.clock = FakeClock()
        self.geocoder = Geocoder(cache=self.cache, ttl_seconds=3600, clock=self.clock)

    def test_miss_then_hit(self):
        with mock.patch(REQUEST_JSON, return_value=self.MATCH) as request_json:
            first = self.geocoder.geocode(self.ADDRESS)
            second = self.geocoder.geocode(self.ADDRESS)

        self.assertEqual(first.data, Coordinates(lat=-23.565, lng=-46.652))
        self.assertEqual(second.data, first.data)
        self.assertEqual(request_json.call_count, 1)

    def test_request_parameters(self):
        with mock.patch(REQUEST_JSON, return_value=self.MATCH) as request_json:
            self.geocoder.geocode(self.ADDRESS)

        params = request_json.call_args.kwargs["params"]
        self.assertEqual(params["q"], self.ADDRESS)
        self.assertEqual(params["limit"], 1)
        self.assertEqual(params["format"], "json")
        self.assertEqual(params["countrycodes"], "br")
        self.assertIn("User-Agent", request_json.call_args.kwargs["headers"])

    def test_expired_entry_is_refreshed(self):
        self.cache.put(self.ADDRESS, Coordinates(lat=0.0, lng=0.0), self.clock())
        self.clock.advance(seconds=3601)

        with mock.patch(REQUEST_JSON, return_value=self.MATCH) as request_json:
            result = self.geocoder.geocode(self.ADDRESS)

        request_json.assert_called_once()
        self.assertEqual(result.data.lat, -23.565)

    def test_fresh_entry_skips_network(self):
        self.cache.put(self.ADDRESS, Coordinates(lat=1.0, lng=2.0), self.clock())
        self.clock.advance(seconds=3599)

        with mock.patch(REQUEST_JSON) as request_json:
            result = self.geocoder.geocode(self.ADDRESS)

        request_json.assert_not_called()
        self.assertEqual(result.data, Coordinates(lat=1.0, lng=2.0))

    def test_empty_result_is_not_found_and_not_cached(self):
        with mock.patch(REQUEST_JSON, return_value=[]):
            result = self.geocoder.geocode(self.ADDRESS)

        self.assertEqual(result.kind, NOT_FOUND)
        self.assertEqual(len(self.cache), 0)

    def test_network_failure_is_service_error(self):
        with mock.patch(REQUEST_JSON, side_effect=ExternalServiceError("HTTP 503")):
            result = self.geocoder.geocode(self.ADDRESS)
        self.assertEqual(result.kind, SERVICE_ERROR)

    def test_malformed_match_is_service_error(self):
        with mock.patch(REQUEST_JSON, return_value=[{"lat": "north"}]):
            result = self.geocoder.geocode(self.ADDRESS)
        self.assertEqual(result.kind, SERVICE_ERROR)

    def test_truncated_response_is_service_error(self):
        with mock.patch(URLOPEN, side_effect=http.client.IncompleteRead(b"")):
            result = self.geocoder.geocode(self.ADDRESS)
        self.assertEqual(result.kind, SERVICE_ERROR)
        self.assertEqual(len(self.cache), 0)


class DatabaseGeocodeCacheTests(TestCase):
    def test_put_overwrites_existing_row(self):
        cache = DatabaseGeocodeCache()
        now = timezone.now()

        cache.put("Rua A, 1", Coordinates(lat=1.0, lng=1.0), now - timedelta(days=2))
        cache.put("Rua A, 1", Coordinates(lat=2.0, lng=3.0), now)

        self.assertEqual(GeocodeCacheEntry.objects.count(), 1)
        entry = cache.get("Rua A, 1")
        self.assertEqual(entry.coords, Coordinates(lat=2.0, lng=3.0))
        self.assertEqual(entry.resolved_at, now)

    def test_missing_key(self):
        self.assertIsNone(DatabaseGeocodeCache().get("nowhere"))

    def test_geocoder_uses_database_cache_by_default(self):
        with mock.patch(REQUEST_JSON, return_value=[{"lat": "-23.5", "lon": "-46.6"}]):
            Geocoder().geocode("Rua B, 2, Brasil")

        self.assertTrue(GeocodeCacheEntry.objects.filter(address="Rua B, 2, Brasil").exists())

    def test_cache_write_failure_still_returns_coordinates(self):
        cache = DatabaseGeocodeCache()
        with mock.patch.object(cache, "put", side_effect=DatabaseError("value too long")):
            with mock.patch(REQUEST_JSON, return_value=[{"lat": "-23.5", "lon": "-46.6"}]):
                result = Geocoder(cache=cache).geocode("Rua C, 3, Brasil")

        self.assertEqual(result.kind, FOUND)
        self.assertEqual(result.data, Coordinates(lat=-23.5, lng=-46.6))

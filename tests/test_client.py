import pytest
import requests

from geoquery.errors import BackendError
from geoquery.models import BoundingBox, GeoPoint, IntersectionRequest
from tests.conftest import INVALID_JSON

P = GeoPoint(lat=26.4753, lng=73.1173)


def test_add_point_posts_lat_lng(client, session):
    session.reply("/point", 200, payload=None)
    client.add_point(P)
    assert session.calls == [("/point", {"lat": 26.4753, "lng": 73.1173}, 5.0)]


def test_add_point_ignores_body_on_2xx(client, session):
    session.reply("/point", 201, payload=INVALID_JSON)
    client.add_point(P)


def test_nearest_neighbor_returns_point(client, session):
    session.reply("/nearest_neighbor", 200, {"lat": 26.48, "lng": 73.12})
    assert client.nearest_neighbor(P) == GeoPoint(lat=26.48, lng=73.12)


def test_range_query_sends_box_keys(client, session):
    session.reply("/range_query", 200, [{"lat": 1.0, "lng": 1.0}, {"lat": 2.0, "lng": 2.5}])
    box = BoundingBox(min_lat=0.0, max_lat=3.0, min_lng=0.5, max_lng=3.5)

    points = client.range_query(box)

    assert [p.as_tuple() for p in points] == [(1.0, 1.0), (2.0, 2.5)]
    assert session.calls[0][1] == {"min_lat": 0.0, "max_lat": 3.0, "min_lng": 0.5, "max_lng": 3.5}


def test_intersection_sends_vertex_pairs(client, session):
    session.reply("/intersection", 200, [])
    request = IntersectionRequest.from_vertices(
        [GeoPoint(lat=1.0, lng=1.0), GeoPoint(lat=2.0, lng=2.0), GeoPoint(lat=3.0, lng=1.0)]
    )

    assert client.intersection(request) == []
    assert session.calls[0][1] == {"points": [[1.0, 1.0], [2.0, 2.0], [3.0, 1.0]]}


@pytest.mark.parametrize("status, status_class", [(400, "client"), (404, "client"), (500, "server"), (503, "server"), (302, "server")])
def test_non_2xx_is_request_failed(client, session, status, status_class):
    session.reply("/nearest_neighbor", status, {"lat": 0, "lng": 0})
    with pytest.raises(BackendError) as info:
        client.nearest_neighbor(P)
    assert info.value.reason == "RequestFailed"
    assert info.value.status_class == status_class
    assert info.value.status_code == status


@pytest.mark.parametrize("exc", [requests.ConnectionError("refused"), requests.Timeout("slow")])
def test_transport_failure_is_network_error(client, session, exc):
    session.fail("/range_query", exc)
    with pytest.raises(BackendError) as info:
        client.range_query(BoundingBox(min_lat=0, max_lat=1, min_lng=0, max_lng=1))
    assert info.value.status_class == "network"
    assert info.value.status_code is None


@pytest.mark.parametrize(
    "payload",
    [INVALID_JSON, {"lat": "north"}, {"lat": 91.0, "lng": 0.0}, [{"lat": 1.0, "lng": 1.0}]],
)
def test_malformed_nearest_body_is_response_error(client, session, payload):
    session.reply("/nearest_neighbor", 200, payload)
    with pytest.raises(BackendError) as info:
        client.nearest_neighbor(P)
    assert info.value.status_class == "response"


@pytest.mark.parametrize("payload", [INVALID_JSON, {"lat": 1.0, "lng": 1.0}, [{"lng": 1.0}]])
def test_malformed_point_list_is_response_error(client, session, payload):
    session.reply("/intersection", 200, payload)
    with pytest.raises(BackendError) as info:
        client.intersection(IntersectionRequest(points=[(0, 0), (1, 1), (1, 0)]))
    assert info.value.status_class == "response"


def test_base_url_trailing_slash_is_dropped():
    from geoquery.client import SpatialIndexClient

    assert SpatialIndexClient("http://x/api/").base_url == "http://x/api"

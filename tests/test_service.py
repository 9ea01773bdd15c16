import asyncio
import json

import pytest

from carbwise.carb_store import CarbStore
from carbwise.errors import (
    AuthError,
    InternalError,
    InvalidArgument,
    ParseError,
    RateLimitError,
)
from carbwise.pipeline import LookupMode, LookupService
from conftest import UpstreamStub, completion, status

TWO_ITEMS = json.dumps(
    [
        {"name": "Big Mac", "carbs": 45, "details": "McDonald's nutrition, 1 sandwich (219g)"},
        {"name": "Medium French Fries", "carbs": 44, "details": "McDonald's nutrition, medium (111g)"},
    ]
)


@pytest.fixture
def make_service(make_transport):
    def _make(stub, **kwargs):
        return LookupService(transport=make_transport(stub), **kwargs)

    return _make


def test_end_to_end_two_items_in_order(make_service):
    stub = UpstreamStub(completion(f"Here you go:\n{TWO_ITEMS}", citations=["https://www.mcdonalds.com"]))
    result = asyncio.run(make_service(stub).lookup("a Big Mac and a medium fries"))

    assert [item.name for item in result.items] == ["Big Mac", "Medium French Fries"]
    assert all(item.name and item.carbs >= 0 for item in result.items)
    assert result.citations == ("https://www.mcdonalds.com",)
    assert stub.bodies[0]["messages"][1]["content"] == "a Big Mac and a medium fries"


def test_input_is_sanitized_before_sending(make_service):
    stub = UpstreamStub(completion('{"name": "Big Mac", "carbs": 45}'))
    result = asyncio.run(make_service(stub).lookup_single("  Big\tMac\n"))

    assert result.item.name == "Big Mac"
    assert stub.bodies[0]["messages"][1]["content"] == "Big Mac"
    assert stub.bodies[0]["model"] == "sonar"


@pytest.mark.parametrize("raw", [None, 12, "", " ", "a", "z" * 101])
def test_invalid_input_makes_no_network_call(make_service, raw):
    stub = UpstreamStub(completion("[]"))
    with pytest.raises(InvalidArgument):
        asyncio.run(make_service(stub).lookup(raw))
    assert stub.requests == []


def test_rate_limit_surfaces_after_one_attempt(make_service):
    stub = UpstreamStub(status(429))
    with pytest.raises(RateLimitError):
        asyncio.run(make_service(stub).lookup_multiple("two tacos"))
    assert len(stub.requests) == 1


def test_auth_error_surfaces_after_one_attempt(make_service):
    stub = UpstreamStub(status(401))
    with pytest.raises(AuthError):
        asyncio.run(make_service(stub).lookup_multiple("two tacos"))
    assert len(stub.requests) == 1


def test_unparseable_reply_is_parse_error(make_service):
    stub = UpstreamStub(completion("I'm not sure what food that is."))
    with pytest.raises(ParseError):
        asyncio.run(make_service(stub).lookup_multiple("mystery meal"))


def test_reporter_called_once_per_item(make_service):
    store = CarbStore()
    stub = UpstreamStub(completion(TWO_ITEMS, citations=["https://www.mcdonalds.com"]))
    asyncio.run(make_service(stub, reporter=store).lookup_multiple("a Big Mac and a medium fries"))

    assert store.total_carbs() == 89.0
    assert [entry["name"] for entry in store.logged_items()] == ["Big Mac", "Medium French Fries"]
    assert store.logged_items()[0]["citations"] == ["https://www.mcdonalds.com"]


def test_reporter_not_called_on_failure(make_service):
    store = CarbStore()
    stub = UpstreamStub(completion("no data"))
    with pytest.raises(ParseError):
        asyncio.run(make_service(stub, reporter=store).lookup_multiple("mystery meal"))
    assert store.total_carbs() == 0.0
    assert store.logged_items() == []


def test_overall_timeout_is_internal_error():
    class SlowTransport:
        async def send(self, prompt):
            await asyncio.sleep(5)

    service = LookupService(transport=SlowTransport(), timeout_seconds=0.01)
    with pytest.raises(InternalError, match="timed out"):
        asyncio.run(service.lookup("slow food", LookupMode.MULTI))


def test_oversized_carbs_integer_is_parse_error(make_service):
    stub = UpstreamStub(completion('{"name": "Apple", "carbs": ' + "9" * 400 + "}"))
    with pytest.raises(ParseError):
        asyncio.run(make_service(stub).lookup("apple", LookupMode.SINGLE))

"""
Aggregation pipeline tests.

Validates:
- the documented 360475870 scenario end to end
- output order is experience order, then enumeration order, even when
  detail fetches complete out of order
- one experience failing pagination does not affect the others
- a failed product-info degrades only that item
- zero experiences is a successful, explanatory result
- username resolution failure stops before any listing call
"""

import pytest

from core.domain.errors import InvalidUserId, ListingFailure, ResolutionFailure
from core.services.gamepass_pipeline import (
    NO_EXPERIENCES_MESSAGE,
    aggregate_gamepasses,
    list_games,
    parse_user_id,
)


def _two_experience_user(fake):
    fake.add_experience(360475870, universe_id=111, place_id=222)
    fake.add_experience(360475870, universe_id=333, place_id=444)


def test_concrete_scenario(fake, settings, run):
    _two_experience_user(fake)
    fake.add_page(111, [{"id": 1, "name": "VIP"}])
    fake.details[1] = {"PriceInRobux": 100, "IconImageAssetId": 999}

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=360475870))

    assert result.to_payload() == {
        "userId": "360475870",
        "totalExperiences": 2,
        "totalGamepasses": 1,
        "gamepasses": [
            {"id": 1, "name": "VIP", "price": 100, "imageAssetId": 999, "placeId": 222},
        ],
    }


def test_order_survives_out_of_order_detail_completion(fake, settings, run):
    _two_experience_user(fake)
    fake.add_page(111, [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}])
    fake.add_page(333, [{"id": 3, "name": "c"}])
    fake.detail_delays[1] = 0.05

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=360475870))

    assert [g.name for g in result.gamepasses] == ["a", "b", "c"]
    assert [g.place_id for g in result.gamepasses] == [222, 222, 444]


def test_pagination_failure_is_isolated_per_experience(fake, settings, run):
    _two_experience_user(fake)
    fake.failing_pages.add((111, ""))
    fake.add_page(333, [{"id": 3, "name": "c"}])

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=360475870))

    assert [g.name for g in result.gamepasses] == ["c"]
    assert result.total_experiences == 2
    assert result.total_gamepasses == 1


def test_detail_failure_degrades_only_that_item(fake, settings, run):
    fake.add_experience(5, universe_id=111, place_id=222)
    fake.add_page(111, [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}, {"id": 3, "name": "c"}])
    fake.details[1] = {"PriceInRobux": 10, "IconImageAssetId": 11}
    fake.details[3] = {"PriceInRobux": 30, "IconImageAssetId": 33}
    fake.failing_details.add(2)

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=5))

    by_name = {g.name: g for g in result.gamepasses}
    assert (by_name["b"].price, by_name["b"].image_asset_id) == (0, None)
    assert (by_name["a"].price, by_name["a"].image_asset_id) == (10, 11)
    assert (by_name["c"].price, by_name["c"].image_asset_id) == (30, 33)


def test_missing_price_and_icon_default(fake, settings, run):
    fake.add_experience(5, universe_id=111, place_id=None)
    fake.add_page(111, [{"id": 1, "name": "Free"}])
    fake.details[1] = {"PriceInRobux": None, "IconImageAssetId": 0}

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=5))

    assert result.gamepasses[0].to_payload() == {
        "id": 1,
        "name": "Free",
        "price": 0,
        "imageAssetId": None,
        "placeId": None,
    }


def test_no_experiences_is_success(fake, settings, run):
    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=77))

    payload = result.to_payload()
    assert payload["totalGamepasses"] == 0
    assert payload["gamepasses"] == []
    assert payload["message"] == NO_EXPERIENCES_MESSAGE
    assert fake.paths("/game-passes/") == []


def test_experiences_capped_at_limit(fake, settings, run):
    for i in range(7):
        fake.add_experience(9, universe_id=100 + i, place_id=None)

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=9))

    assert result.total_experiences == 5
    assert len(fake.paths("/universes/")) == 5


def test_listing_failure_propagates(fake, settings, run):
    fake.experiences_status = 503

    with pytest.raises(ListingFailure):
        run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=9))


def test_username_resolution(fake, settings, run):
    fake.users["Inspacto"] = 360475870
    _two_experience_user(fake)

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity="Inspacto"))

    assert result.user_id == "360475870"
    assert result.total_experiences == 2


def test_unresolved_username_makes_no_listing_calls(fake, settings, run):
    with pytest.raises(ResolutionFailure):
        run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity="ghost"))

    assert fake.paths("/games") == []
    assert fake.paths("/game-passes/") == []


def test_repeated_requests_are_identical(fake, settings, run):
    _two_experience_user(fake)
    fake.add_page(111, [{"id": 1, "name": "VIP"}, {"id": 2, "name": "Boost"}])
    fake.add_page(333, [{"id": 3, "name": "Pet"}])
    fake.details[2] = {"PriceInRobux": 25}

    first = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=360475870))
    second = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=360475870))

    assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)


def test_list_games(fake, settings, run):
    fake.users["Inspacto"] = 360475870
    _two_experience_user(fake)

    result = run(lambda c: list_games(client=c, settings=settings, identity="Inspacto"))

    assert result.to_payload() == {
        "userId": "360475870",
        "totalGames": 2,
        "games": [
            {"name": "Game 111", "universeId": 111, "placeId": 222},
            {"name": "Game 333", "universeId": 333, "placeId": 444},
        ],
    }


@pytest.mark.parametrize("raw", ["360475870", " 42 "])
def test_parse_user_id_accepts_digits(raw):
    assert parse_user_id(raw) == int(raw)


@pytest.mark.parametrize("raw", ["abc", "12a", "-5", "0", "1.5", "", "١٢"])
def test_parse_user_id_rejects(raw):
    with pytest.raises(InvalidUserId):
        parse_user_id(raw)


def test_odd_experience_entries_do_not_fail_aggregation(fake, settings, run):
    fake.experiences[7] = [
        {"id": 111, "rootPlace": {"id": 222}},
        {"id": 333, "name": None, "rootPlace": {}},
    ]
    fake.add_page(333, [{"id": 1, "name": None}, {"id": 2, "name": "B"}])

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity=7))

    assert result.total_experiences == 2
    assert result.total_gamepasses == 2
    assert [(g.name, g.place_id) for g in result.gamepasses] == [("", None), ("B", None)]


def test_username_is_resolved_verbatim(fake, settings, run):
    fake.users["Inspacto "] = 360475870

    result = run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity="Inspacto "))

    assert result.user_id == "360475870"


def test_blank_username_fails_without_upstream(fake, settings, run):
    with pytest.raises(ResolutionFailure):
        run(lambda c: aggregate_gamepasses(client=c, settings=settings, identity="   "))

    assert fake.calls == []

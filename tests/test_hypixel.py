import asyncio
import json

import aiohttp
import pytest

from hypixel import (
    PROFILES_URL,
    HypixelAPIError,
    HypixelClient,
    Member,
    PlayerData,
    ProfileNotFoundError,
    resolve_profile,
)

PLAYER = "c3f1a2b4-5d6e-4f70-8a9b-0c1d2e3f4a5b"
PROFILE = "f00dbabe-0000-4000-8000-000000000001"


def profiles_payload():
    return {
        "success": True,
        "profiles": [
            {"profile_id": "someone-else", "members": {}},
            {
                "profile_id": PROFILE,
                "cute_name": "Banana",
                "members": {
                    PLAYER.replace("-", ""): {
                        "inventory": {
                            "inv_contents": {"type": 0, "data": "INV"},
                            "ender_chest_contents": {"type": 0, "data": "ENDER"},
                            "bag_contents": {"talisman_bag": {"type": 0, "data": "BAG"}},
                        },
                        "currencies": {"coin_purse": 12.5},
                    },
                },
            },
        ],
    }


class FakeResponse:
    def __init__(self, status, payload=None):
        self.status = status
        self._payload = payload

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    closed = False

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None):
        self.calls.append((url, params, headers))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_resolve_profile_strips_dashes_from_player_uuid():
    data = PlayerData.model_validate(profiles_payload())
    profile, member = resolve_profile(data, PLAYER, PROFILE)

    assert profile.profile_id == PROFILE
    assert member.inventory_data("inventory") == "INV"
    assert member.inventory_data("enderchest") == "ENDER"
    assert member.inventory_data("accessorybag") == "BAG"


@pytest.mark.parametrize("player, profile", [(PLAYER, "missing"), ("not-a-member", PROFILE)])
def test_resolve_profile_not_found(player, profile):
    data = PlayerData.model_validate(profiles_payload())
    with pytest.raises(ProfileNotFoundError, match="Player does not have profile"):
        resolve_profile(data, player, profile)


def test_player_without_profiles():
    data = PlayerData.model_validate({"success": True, "profiles": None})
    with pytest.raises(ProfileNotFoundError):
        resolve_profile(data, PLAYER, PROFILE)


def test_member_with_api_disabled():
    member = Member.model_validate({"player_data": {}})
    assert member.inventory_data("inventory") is None
    assert member.inventory_data("accessorybag") is None
    with pytest.raises(KeyError):
        member.inventory_data("wardrobe")


def test_member_json_keeps_unknown_fields():
    data = PlayerData.model_validate(profiles_payload())
    _, member = resolve_profile(data, PLAYER, PROFILE)
    restored = Member.model_validate_json(member.model_dump_json())

    assert restored.inventory_data("enderchest") == "ENDER"
    assert restored.model_dump()["currencies"] == {"coin_purse": 12.5}


def test_get_member_sends_api_key():
    session = FakeSession([FakeResponse(200, profiles_payload())])
    client = HypixelClient("secret", session=session, delay=0)

    member = asyncio.run(client.get_member(PLAYER, PROFILE))

    assert member.inventory_data("inventory") == "INV"
    assert session.calls == [(PROFILES_URL, {"uuid": PLAYER}, {"API-Key": "secret"})]


def test_fetch_retries_rate_limits_and_connection_errors():
    session = FakeSession([
        FakeResponse(429),
        aiohttp.ClientConnectionError("reset"),
        FakeResponse(503),
        FakeResponse(200, {"ok": True}),
    ])
    client = HypixelClient("secret", session=session, retries=5, delay=0)

    assert asyncio.run(client.fetch_json(PROFILES_URL)) == {"ok": True}
    assert len(session.calls) == 4


def test_fetch_gives_up_after_retries():
    session = FakeSession([FakeResponse(429)] * 3)
    client = HypixelClient("secret", session=session, retries=3, delay=0)

    with pytest.raises(HypixelAPIError, match="after 3 retries"):
        asyncio.run(client.fetch_json(PROFILES_URL))


def test_client_errors_are_not_retried():
    session = FakeSession([FakeResponse(403, {"success": False, "cause": "Invalid API key"})])
    client = HypixelClient("bad", session=session, delay=0)

    with pytest.raises(HypixelAPIError, match="403"):
        asyncio.run(client.fetch_json(PROFILES_URL))
    assert len(session.calls) == 1


def test_unexpected_payload():
    session = FakeSession([FakeResponse(200, {"profiles": [{"members": {}}]})])
    client = HypixelClient("secret", session=session, delay=0)

    with pytest.raises(HypixelAPIError, match="Unexpected profiles payload"):
        asyncio.run(client.fetch_profiles(PLAYER))


def test_close_leaves_borrowed_session_open():
    session = FakeSession([])
    client = HypixelClient("secret", session=session)
    asyncio.run(client.close())
    assert session.closed is False


def test_invalid_json_body_is_an_api_error():
    session = FakeSession([FakeResponse(200, json.JSONDecodeError("Expecting value", "<html>", 0))])
    client = HypixelClient("secret", session=session, delay=0)

    with pytest.raises(HypixelAPIError, match="invalid JSON"):
        asyncio.run(client.fetch_json(PROFILES_URL))
    assert len(session.calls) == 1

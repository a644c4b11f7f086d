"""
Tests for relayed sources — relay URL styles and the try-each-until-success chain.
"""

import httpx
import pytest

from latest_stack.adapters.relay import (
    ADOPTIUM_URL,
    DEFAULT_RELAYS,
    GITLAB_RUNNER_URL,
    R_HUB_URL,
    RelayEndpoint,
    RelayStyle,
    adoptium_source,
    fetch_first_success,
    gitlab_runner_source,
    parse_adoptium,
    parse_gitlab_release,
    r_hub_source,
)

RELAY_A = RelayEndpoint("https://relay-a.test/raw?url=", RelayStyle.QUERY)
RELAY_B = RelayEndpoint("https://relay-b.test/", RelayStyle.PATH)
TARGET = "https://api.example.test/info?x=1"


def _version(data):
    return data["version"]


class TestRelayEndpoint:
    def test_query_style_encodes_target(self):
        """Query relays percent-encode the target."""
        assert RELAY_A.wrap(TARGET) == (
            "https://relay-a.test/raw?url=https%3A%2F%2Fapi.example.test%2Finfo%3Fx%3D1"
        )

    def test_path_style_appends_raw_target(self):
        """Path relays append the raw target."""
        assert RELAY_B.wrap(TARGET) == "https://relay-b.test/https://api.example.test/info?x=1"

    def test_default_order(self):
        """Default relays keep their fixed order."""
        assert [r.style for r in DEFAULT_RELAYS] == [
            RelayStyle.QUERY,
            RelayStyle.QUERY,
            RelayStyle.PATH,
        ]
        assert DEFAULT_RELAYS[0].prefix.startswith("https://api.allorigins.win/")


class TestFetchFirstSuccess:
    @pytest.mark.asyncio
    async def test_direct_success_skips_relays(self, fake_http):
        """A direct success skips the relays."""
        fake_http.add(TARGET, json={"version": "1.0"})
        async with fake_http.client() as client:
            result = await fetch_first_success(
                client, TARGET, _version, relays=[RELAY_A, RELAY_B], direct=True,
            )
        assert result == "1.0"
        assert len(fake_http.requests) == 1

    @pytest.mark.asyncio
    async def test_relay_only_never_calls_origin(self, fake_http):
        """Relay-only sources never call the origin."""
        fake_http.add("https://relay-a.test/", json={"version": "4.4.2"})
        async with fake_http.client() as client:
            result = await fetch_first_success(client, TARGET, _version, relays=[RELAY_A])
        assert result == "4.4.2"
        assert all(r.url.host != "api.example.test" for r in fake_http.requests)

    @pytest.mark.asyncio
    async def test_failures_move_down_the_chain(self, fake_http):
        """Each failure moves to the next relay in order."""
        fake_http.add(TARGET, error=httpx.ConnectError)
        fake_http.add("https://relay-a.test/", status=502, json={})
        fake_http.add("https://relay-b.test/", json={"version": "2.0"})
        async with fake_http.client() as client:
            result = await fetch_first_success(
                client, TARGET, _version, relays=[RELAY_A, RELAY_B], direct=True,
            )
        assert result == "2.0"
        assert [r.url.host for r in fake_http.requests] == [
            "api.example.test",
            "relay-a.test",
            "relay-b.test",
        ]

    @pytest.mark.asyncio
    async def test_unparsable_or_empty_result_continues(self, fake_http):
        """Unparsable or empty answers try the next relay."""
        fake_http.add("https://relay-a.test/", text="not json")
        fake_http.add("https://relay-b.test/", json={"other": "field"})
        async with fake_http.client() as client:
            result = await fetch_first_success(client, TARGET, _version, relays=[RELAY_A, RELAY_B])
        assert result == ""
        assert len(fake_http.requests) == 2

    @pytest.mark.asyncio
    async def test_all_fail_is_empty(self, fake_http):
        """All attempts failing gives an empty version."""
        async with fake_http.client() as client:
            result = await fetch_first_success(
                client, TARGET, _version, relays=[RELAY_A, RELAY_B], direct=True,
            )
        assert result == ""
        assert len(fake_http.requests) == 3


class TestParsers:
    def test_adoptium_trims_build_metadata(self):
        """Adoptium versions lose build metadata."""
        data = {"versions": [{"openjdk_version": "23.0.1+11", "semver": "23.0.1+11"}]}
        assert parse_adoptium(data) == "23.0.1"

    def test_adoptium_semver_fallback(self):
        """Adoptium falls back to the semver field."""
        assert parse_adoptium({"versions": [{"semver": "21.0.5+11.0.LTS"}]}) == "21.0.5"

    def test_adoptium_unmatched_raw_kept(self):
        """Unmatched Adoptium versions are kept as-is."""
        assert parse_adoptium({"versions": [{"openjdk_version": "24-ea"}]}) == "24-ea"

    def test_adoptium_empty(self):
        """Empty Adoptium payloads give no version."""
        assert parse_adoptium({"versions": []}) == ""
        assert parse_adoptium([]) == ""

    def test_gitlab_release(self):
        """GitLab tags are normalized."""
        assert parse_gitlab_release([{"tag_name": "v17.7.0"}]) == "17.7.0"
        assert parse_gitlab_release([]) == ""


class TestRelayedSources:
    @pytest.mark.asyncio
    async def test_java_direct(self, fake_http):
        """Java resolves directly from Adoptium."""
        fake_http.add(ADOPTIUM_URL, json={"versions": [{"openjdk_version": "23.0.1+11"}]})
        async with fake_http.client() as client:
            assert await adoptium_source([RELAY_A]).fetch(client) == "23.0.1"

    @pytest.mark.asyncio
    async def test_r_through_relay(self, fake_http):
        """R resolves through a relay only."""
        fake_http.add("https://relay-b.test/", json={"version": "4.4.2", "date": "2024-10-31"})
        async with fake_http.client() as client:
            assert await r_hub_source([RELAY_B]).fetch(client) == "4.4.2"
        assert fake_http.urls == [f"https://relay-b.test/{R_HUB_URL}"]

    @pytest.mark.asyncio
    async def test_gitlab_runner_falls_back_to_relay(self, fake_http):
        """GitLab Runner falls back to a relay."""
        fake_http.add(GITLAB_RUNNER_URL, status=403, json={})
        fake_http.add("https://relay-a.test/", json=[{"tag_name": "v17.7.0"}])
        async with fake_http.client() as client:
            assert await gitlab_runner_source([RELAY_A]).fetch(client) == "17.7.0"

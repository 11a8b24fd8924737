import json
import re

import pytest

from src.components.client_page import (
    ClientFlagTable,
    ClientPageInput,
    build_session_json,
    locale_redirect_url,
    random_id_seed,
    run,
)
from src.domain.entities import Account
from src.domain.participant import ParticipantId
from src.rules.models import ClientFlagRule
from tests.fakes import FakeTime


@pytest.fixture
def flag_table():
    return ClientFlagTable.from_rules(
        [
            ClientFlagRule(name="enableProfileCard", key="pc", type="bool"),
            ClientFlagRule(name="profileUpdateIntervalMs", key="pui", type="int"),
            ClientFlagRule(name="welcomeDocumentTitle", key="wdt", type="string"),
            ClientFlagRule(name="scrollSpeed", key="ss", type="float"),
        ]
    )


def account_with_locale(locale):
    account = Account.human(ParticipantId.of("jane@example.com"), "d", FakeTime().now_utc())
    return account.model_copy(update={"locale": locale})


class TestFlags:
    def test_converts_known_flags(self, flag_table):
        params = {
            "enableProfileCard": "TRUE",
            "profileUpdateIntervalMs": "250",
            "welcomeDocumentTitle": "Hi",
            "scrollSpeed": "1.5",
        }

        assert flag_table.to_json(params) == {"pc": True, "pui": 250, "wdt": "Hi", "ss": 1.5}

    def test_unknown_params_are_ignored(self, flag_table):
        assert flag_table.to_json({"locale": "fr", "other": "1"}) == {}

    def test_unparsable_values_are_skipped(self, flag_table):
        params = {"profileUpdateIntervalMs": "soon", "scrollSpeed": "fast", "enableProfileCard": "x"}

        # Anything but "true" is a false boolean
        assert flag_table.to_json(params) == {"pc": False}

    def test_membership(self, flag_table):
        assert "scrollSpeed" in flag_table
        assert "ss" not in flag_table
        assert len(flag_table) == 4


class TestSessionJson:
    def test_seed_is_ten_web_safe_chars(self):
        seed = random_id_seed()
        assert re.fullmatch(r"[A-Za-z0-9_-]{10}", seed)

    def test_contains_domain_address_and_seed(self):
        session = build_session_json("example.com", "jane@example.com", "abcdefghij")
        assert session == {"domain": "example.com", "address": "jane@example.com", "id": "abcdefghij"}

    def test_address_omitted_when_unknown(self):
        assert "address" not in build_session_json("example.com", None)


class TestLocaleRedirect:
    def test_adds_locale(self):
        url = locale_redirect_url(
            "http://wave.test/?a=1", {"a": "1"}, account_with_locale("fr")
        )
        assert url == "http://wave.test/?a=1&locale=fr"

    def test_no_redirect_when_request_has_locale(self):
        assert locale_redirect_url("http://w/?locale=de", {"locale": "de"}, account_with_locale("fr")) is None

    @pytest.mark.parametrize("locale", [None, ""])
    def test_no_redirect_without_stored_locale(self, locale):
        assert locale_redirect_url("http://w/", {}, account_with_locale(locale)) is None

    def test_no_redirect_without_account(self):
        assert locale_redirect_url("http://w/", {}, None) is None


class TestRender:
    def test_page_embeds_client_state(self):
        out = run(
            ClientPageInput(
                domain="example.com",
                address="jane@example.com",
                username="jane",
                user_domain="example.com",
                websocket_address="ws.example.com:9898",
                flags={"pc": True},
                analytics_account="UA-1",
                id_seed="seedseed00",
            )
        )

        assert out.session_json["id"] == "seedseed00"
        assert f"var __session = {json.dumps(out.session_json)};" in out.html
        assert 'var __client_flags = {"pc": true};' in out.html
        assert 'var __websocket_address = "ws.example.com:9898";' in out.html
        assert '<span class="username">jane</span>' in out.html
        assert 'content="UA-1"' in out.html

    def test_markup_is_escaped(self):
        out = run(
            ClientPageInput(
                domain="example.com",
                address=None,
                username="<b>x</b>",
                user_domain="example.com",
                websocket_address="</script><script>alert(1)",
            )
        )

        assert "<b>x</b>" not in out.html
        assert "</script><script>alert(1)" not in out.html
        assert "analytics-account" not in out.html

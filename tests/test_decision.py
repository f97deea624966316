"""Unit tests for the access decision engine.

No HTTP involved: decisions are computed from extracted origins, preflight
classifications, and resolved policies.
"""

import pytest

from crossorigin.services.cors.decision import (
    HEADERS_NOT_ALLOWED,
    METHOD_NOT_ALLOWED,
    ORIGIN_NOT_ALLOWED,
    Allowed,
    Forbidden,
    PassThrough,
    decide,
)
from crossorigin.services.cors.origin import ExtractedOrigin
from crossorigin.services.cors.policy import resolve_policy
from crossorigin.services.cors.preflight import Preflight

FOO = "http://foo.example"
SIMPLE = Preflight(is_preflight=False)


def preflight(method, *headers) -> Preflight:
    return Preflight(is_preflight=True, requested_method=method, requested_headers=headers)


def names(decision, header):
    return [value for name, value in decision.headers if name == header]


class TestOriginCheck:
    def test_unlisted_origin_forbidden_by_default(self):
        decision = decide(ExtractedOrigin("http://evil.example"), SIMPLE, resolve_policy(origins=[FOO]))
        assert decision == Forbidden(ORIGIN_NOT_ALLOWED)

    def test_unlisted_origin_passes_through_with_continue_on_failure(self):
        policy = resolve_policy(origins=[FOO], continue_on_failure=True)
        decision = decide(ExtractedOrigin("http://evil.example"), SIMPLE, policy)
        assert decision == PassThrough(ORIGIN_NOT_ALLOWED)

    def test_inferred_origin_mismatch_passes_through(self):
        """Referer-derived origins degrade gracefully even without continue_on_failure."""
        decision = decide(
            ExtractedOrigin("http://evil.example", inferred=True), SIMPLE, resolve_policy(origins=[FOO])
        )
        assert isinstance(decision, PassThrough)

    def test_preflight_origin_mismatch_always_forbidden(self):
        policy = resolve_policy(origins=[FOO], continue_on_failure=True)
        decision = decide(ExtractedOrigin("http://evil.example"), preflight("GET"), policy)
        assert decision == Forbidden(ORIGIN_NOT_ALLOWED)

    def test_default_policy_denies_everything(self):
        assert isinstance(decide(ExtractedOrigin(FOO), SIMPLE, resolve_policy()), Forbidden)

    def test_every_origin_token_must_match(self):
        policy = resolve_policy(origins=[FOO, "http://bar.example"])
        assert isinstance(decide(ExtractedOrigin(f"{FOO} http://bar.example"), SIMPLE, policy), Allowed)
        assert isinstance(decide(ExtractedOrigin(f"{FOO} http://evil.example"), SIMPLE, policy), Forbidden)

    def test_origin_match_is_case_sensitive(self):
        decision = decide(ExtractedOrigin("http://FOO.example"), SIMPLE, resolve_policy(origins=[FOO]))
        assert isinstance(decision, Forbidden)

    def test_wildcard_admits_multi_token_origin(self):
        decision = decide(ExtractedOrigin(f"{FOO} http://bar.example"), SIMPLE, resolve_policy(origins="*"))
        assert decision == Allowed((("Access-Control-Allow-Origin", "*"),))


class TestSimpleRequestHeaders:
    def test_listed_origin_echoed(self):
        decision = decide(ExtractedOrigin(FOO), SIMPLE, resolve_policy(origins=[FOO]))
        assert decision == Allowed((("Access-Control-Allow-Origin", FOO),))
        assert decision.preflight is False

    def test_credentials_echo_concrete_origin_under_wildcard(self):
        decision = decide(ExtractedOrigin(FOO), SIMPLE, resolve_policy(origins="*", credentials=True))
        assert decision.headers == (
            ("Access-Control-Allow-Credentials", "true"),
            ("Access-Control-Allow-Origin", FOO),
        )


class TestPreflight:
    def test_method_not_allowed_is_forbidden(self):
        policy = resolve_policy(origins=[FOO], methods=["GET", "POST"])
        assert decide(ExtractedOrigin(FOO), preflight("DELETE"), policy) == Forbidden(METHOD_NOT_ALLOWED)

    def test_method_violation_ignores_continue_on_failure(self):
        policy = resolve_policy(origins=[FOO], methods=["GET"], continue_on_failure=True)
        assert isinstance(decide(ExtractedOrigin(FOO), preflight("PUT"), policy), Forbidden)

    def test_header_not_allowed_is_forbidden(self):
        policy = resolve_policy(origins=[FOO], methods=["POST"], continue_on_failure=True)
        decision = decide(ExtractedOrigin(FOO), preflight("POST", "X-Custom"), policy)
        assert decision == Forbidden(HEADERS_NOT_ALLOWED)

    def test_header_check_is_case_insensitive(self):
        policy = resolve_policy(origins=[FOO], headers=["X-Custom"])
        decision = decide(ExtractedOrigin(FOO), preflight("GET", "x-CUSTOM"), policy)
        assert isinstance(decision, Allowed)
        assert names(decision, "Access-Control-Allow-Headers") == ["X-Custom"]

    def test_lists_full_configured_sets(self):
        policy = resolve_policy(origins=[FOO], methods=["GET", "POST"], headers=["X-A", "X-B"], max_age=86400)
        decision = decide(ExtractedOrigin(FOO), preflight("POST", "X-A"), policy)
        assert decision.preflight is True
        assert decision.headers == (
            ("Access-Control-Allow-Origin", FOO),
            ("Access-Control-Max-Age", "86400"),
            ("Access-Control-Allow-Methods", "GET"),
            ("Access-Control-Allow-Methods", "POST"),
            ("Access-Control-Allow-Headers", "X-A"),
            ("Access-Control-Allow-Headers", "X-B"),
        )

    def test_wildcards_echo_request(self):
        """Wildcard methods/headers echo what was requested, not the defaults."""
        policy = resolve_policy(origins="*", methods="*", headers="*")
        decision = decide(ExtractedOrigin(FOO), preflight("PATCH", "X-One", "x-two"), policy)
        assert names(decision, "Access-Control-Allow-Methods") == ["PATCH"]
        assert names(decision, "Access-Control-Allow-Headers") == ["X-One", "x-two"]
        assert names(decision, "Access-Control-Allow-Origin") == ["*"]

    def test_no_max_age_without_config(self):
        decision = decide(ExtractedOrigin(FOO), preflight("GET"), resolve_policy(origins="*"))
        assert names(decision, "Access-Control-Max-Age") == []

    @pytest.mark.parametrize("method", ["get", "Get"])
    def test_method_match_is_case_sensitive(self, method):
        policy = resolve_policy(origins="*", methods=["GET"])
        assert isinstance(decide(ExtractedOrigin(FOO), preflight(method), policy), Forbidden)

    def test_empty_requested_header_entry_is_forbidden(self):
        """An empty name between commas is not in any explicit header list."""
        policy = resolve_policy(origins=[FOO], headers=["X-A", "X-B"])
        decision = decide(ExtractedOrigin(FOO), preflight("GET", "X-A", "", "X-B"), policy)
        assert decision == Forbidden(HEADERS_NOT_ALLOWED)

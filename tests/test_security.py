# tests/test_security.py
"""Tests for the credential gate, replay window and request signatures."""

import pytest

from hintgate.utils.security import RequestVerifier, generate_signature, mask_identity

from conftest import FakeClock, TEST_SECRET


@pytest.fixture()
def verifier(clock: FakeClock) -> RequestVerifier:
    return RequestVerifier(TEST_SECRET, tolerance_seconds=300, clock=clock)


class TestAppSecret:
    def test_matching_secret(self, verifier):
        assert verifier.verify_app_secret(TEST_SECRET) is True

    @pytest.mark.parametrize("presented", [None, "", "wrong", TEST_SECRET.upper(), TEST_SECRET + " "])
    def test_mismatched_secret(self, verifier, presented):
        assert verifier.verify_app_secret(presented) is False

    def test_fails_closed_without_configured_secret(self, clock):
        assert RequestVerifier(None, clock=clock).verify_app_secret("anything") is False


class TestTimestamp:
    def test_now_is_valid(self, verifier, clock):
        assert verifier.is_timestamp_valid(str(clock.now_ms())) is True

    @pytest.mark.parametrize("offset_ms", [-299_000, 299_000, -300_000, 300_000])
    def test_inside_window(self, verifier, clock, offset_ms):
        assert verifier.is_timestamp_valid(str(clock.now_ms() + offset_ms)) is True

    @pytest.mark.parametrize("offset_ms", [-300_001, 300_001, -600_000])
    def test_outside_window(self, verifier, clock, offset_ms):
        assert verifier.is_timestamp_valid(str(clock.now_ms() + offset_ms)) is False

    @pytest.mark.parametrize("timestamp", [None, "", "abc", "12.5e3", "now"])
    def test_unparseable(self, verifier, timestamp):
        assert verifier.is_timestamp_valid(timestamp) is False

    def test_request_ages_out(self, verifier, clock):
        ts = str(clock.now_ms())
        clock.advance(301)
        assert verifier.is_timestamp_valid(ts) is False


class TestSignature:
    WORD, TOPIC, TS = "Pizza", "food", "1781000000000"

    def test_matches_hmac_over_word_topic_timestamp(self, verifier):
        signature = generate_signature(self.WORD, self.TOPIC, self.TS, TEST_SECRET)
        assert verifier.verify_signature(signature, self.WORD, self.TOPIC, self.TS) is True

    def test_known_vector(self):
        import hashlib
        import hmac

        expected = hmac.new(TEST_SECRET.encode(), b"Pizza:food:1781000000000", hashlib.sha256).hexdigest()
        assert generate_signature(self.WORD, self.TOPIC, self.TS, TEST_SECRET) == expected

    @pytest.mark.parametrize("field", ["word", "topic", "timestamp"])
    def test_any_single_character_mutation_invalidates(self, verifier, field):
        signature = generate_signature(self.WORD, self.TOPIC, self.TS, TEST_SECRET)
        fields = {"word": self.WORD, "topic": self.TOPIC, "timestamp": self.TS}
        original = fields[field]

        for i in range(len(original)):
            replacement = "x" if original[i] != "x" else "y"
            mutated = dict(fields, **{field: original[:i] + replacement + original[i + 1:]})
            assert verifier.verify_signature(
                signature, mutated["word"], mutated["topic"], mutated["timestamp"]
            ) is False

    @pytest.mark.parametrize("word", ["pizza", "PIZZA", " Pizza", "Pizza "])
    def test_case_and_whitespace_matter(self, verifier, word):
        signature = generate_signature(self.WORD, self.TOPIC, self.TS, TEST_SECRET)
        assert verifier.verify_signature(signature, word, self.TOPIC, self.TS) is False

    def test_missing_signature(self, verifier):
        assert verifier.verify_signature(None, self.WORD, self.TOPIC, self.TS) is False

    def test_other_secret(self, verifier):
        signature = generate_signature(self.WORD, self.TOPIC, self.TS, "another-secret")
        assert verifier.verify_signature(signature, self.WORD, self.TOPIC, self.TS) is False


def test_mask_identity():
    assert mask_identity("test-device-001") == "te****-001"
    assert mask_identity("10.0.0") == "****"
    assert mask_identity("") == "****"

"""
Capsule Verifier Unit Tests
Tests for core/sim/verifier.py

Covers:
1. Generate -> verify round trips for any capsule count
2. Tamper and root-mismatch detection
3. Simulated latency for warm and cold caches
4. Malformed payloads rejected before hashing
5. Sorted-pair rule for payloads without an index
"""
import pytest

from core.config.runtime import SimulationConfig
from core.crypto.hashing import hash_concat, round_half_up, sha256_hex
from core.schemas.errors import ErrorCodes, InvalidProofPayloadException
from core.schemas.sim import GenerateRequest
from core.sim.verifier import CommitmentVerifier, verify_commitment


def payload_from(result, cache_warm=None):
    data = result.to_response().model_dump(by_alias=True)
    if cache_warm is not None:
        data["cacheWarm"] = cache_warm
    return data


class TestRoundTrip:
    """Generation followed by verification always matches."""

    @pytest.mark.parametrize("audit_ratio", [0, 0.016, 0.02, 0.1, 1, 2.5, 10])
    def test_generated_payload_verifies(self, generator, verifier, audit_ratio):
        result = generator.generate(GenerateRequest(datasetGB=500, auditRatio=audit_ratio))
        outcome = verifier.verify_payload(payload_from(result))

        assert outcome.verified is True

    @pytest.mark.parametrize("cache_warm", [True, False])
    def test_same_cache_flag(self, generator, verifier, cache_warm):
        result = generator.generate(GenerateRequest(cacheWarm=cache_warm))
        outcome = verifier.verify_payload(payload_from(result))

        assert outcome.verified is True
        assert outcome.retrieval_ms == verifier.retrieval_ms(cache_warm)

    def test_example_scenario(self, generator, verifier, flip_hex_char):
        result = generator.generate(GenerateRequest(datasetGB=500, auditRatio=10))
        assert result.capsule_count == 1250
        assert result.proof_sample.index == 2

        payload = payload_from(result)
        assert verifier.verify_payload(payload).verified is True

        payload["proofSample"]["path"][0] = flip_hex_char(payload["proofSample"]["path"][0])
        assert verifier.verify_payload(payload).verified is False


class TestTampering:
    """Any single-character change breaks verification."""

    def test_tampered_leaf(self, generator, verifier, flip_hex_char):
        payload = payload_from(generator.generate())
        payload["proofSample"]["leaf"] = flip_hex_char(payload["proofSample"]["leaf"], 10)

        assert verifier.verify_payload(payload).verified is False

    def test_each_path_entry(self, generator, verifier, flip_hex_char):
        original = payload_from(generator.generate())
        for i in range(len(original["proofSample"]["path"])):
            payload = payload_from(generator.generate())
            payload["proofSample"]["path"][i] = flip_hex_char(payload["proofSample"]["path"][i], 5)
            assert verifier.verify_payload(payload).verified is False

    def test_root_mismatch(self, generator, verifier):
        payload = payload_from(generator.generate())
        payload["anchorRoot"] = generator.generate(GenerateRequest(datasetGB=1)).root

        assert verifier.verify_payload(payload).verified is False

    def test_tampered_payload_still_reports_latency(self, generator, verifier):
        payload = payload_from(generator.generate(), cache_warm=False)
        payload["anchorRoot"] = sha256_hex("nope")

        outcome = verifier.verify_payload(payload)
        assert outcome.verified is False
        assert outcome.retrieval_ms == 58


class TestRetrievalLatency:
    """round(18 * (1 if warm else 3.2))."""

    def test_warm(self, verifier):
        assert verifier.retrieval_ms(True) == 18

    def test_cold(self, verifier):
        assert verifier.retrieval_ms(False) == 58
        assert verifier.retrieval_ms(False) == round_half_up(3.2 * verifier.retrieval_ms(True))

    def test_independent_of_payload(self, generator, verifier):
        small = payload_from(generator.generate(GenerateRequest(auditRatio=0)), cache_warm=False)
        large = payload_from(generator.generate(GenerateRequest(auditRatio=10)), cache_warm=False)

        assert verifier.verify_payload(small).retrieval_ms == verifier.verify_payload(large).retrieval_ms

    def test_default_cache_is_warm(self, verifier):
        outcome = verifier.check(sha256_hex("a"), "a", [])
        assert outcome.retrieval_ms == 18

    def test_configured_constants(self):
        verifier = CommitmentVerifier(SimulationConfig(base_retrieval_ms=20, cold_cache_multiplier=2))
        assert verifier.retrieval_ms(True) == 20
        assert verifier.retrieval_ms(False) == 40


class TestMalformedPayload:
    """Invalid payloads raise before any hashing."""

    @pytest.fixture
    def good_payload(self, generator):
        return payload_from(generator.generate())

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda p: p.pop("anchorRoot"),
            lambda p: p.update(anchorRoot=""),
            lambda p: p.update(anchorRoot=None),
            lambda p: p.pop("proofSample"),
            lambda p: p["proofSample"].pop("leaf"),
            lambda p: p["proofSample"].update(leaf=""),
            lambda p: p["proofSample"].update(path="not-a-list"),
            lambda p: p["proofSample"].update(path={"0": "abc"}),
            lambda p: p["proofSample"].pop("path"),
            lambda p: p["proofSample"].update(path=[1, 2]),
        ],
    )
    def test_rejected(self, verifier, good_payload, mutate):
        mutate(good_payload)
        with pytest.raises(InvalidProofPayloadException) as exc_info:
            verifier.verify_payload(good_payload)

        assert exc_info.value.code == ErrorCodes.INVALID_PROOF_PAYLOAD
        assert exc_info.value.message == "Invalid proof payload"

    @pytest.mark.parametrize("payload", [None, [], "root", 42])
    def test_non_object_payload(self, verifier, payload):
        with pytest.raises(InvalidProofPayloadException):
            verifier.verify_payload(payload)

    def test_no_hashing_on_rejection(self, verifier, good_payload, monkeypatch):
        def _fail(*args, **kwargs):
            raise AssertionError("hashing reached for a malformed payload")

        monkeypatch.setattr("core.sim.verifier.verify_inclusion", _fail)
        good_payload["proofSample"]["path"] = "not-a-list"

        with pytest.raises(InvalidProofPayloadException):
            verifier.verify_payload(good_payload)

    @pytest.mark.parametrize(
        "root,leaf,path,field_path",
        [
            ("", "leaf", [], "anchorRoot"),
            (None, "leaf", [], "anchorRoot"),
            ("root", "", [], "proofSample.leaf"),
            ("root", None, [], "proofSample.leaf"),
            ("root", "leaf", "abc", "proofSample.path"),
            ("root", "leaf", ("a",), "proofSample.path"),
        ],
    )
    def test_check_field_paths(self, verifier, root, leaf, path, field_path):
        with pytest.raises(InvalidProofPayloadException) as exc_info:
            verifier.check(root, leaf, path)
        assert exc_info.value.details["field_path"] == field_path

    def test_bool_index_rejected(self, verifier):
        with pytest.raises(InvalidProofPayloadException):
            verifier.check("root", "leaf", [], index=True)


class TestSortedPairRule:
    """Payloads without an index replay with lexicographic min/max pairing."""

    def test_hand_built_proof(self, verifier):
        sibling = sha256_hex("neighbor")
        h = sha256_hex("leaf")
        root = hash_concat(min(h, sibling), max(h, sibling))

        payload = {"anchorRoot": root, "proofSample": {"leaf": "leaf", "path": [sibling]}}
        assert verifier.verify_payload(payload).verified is True

    def test_swapped_concat_order_rejected(self, verifier):
        sibling = sha256_hex("neighbor")
        h = sha256_hex("leaf")
        root = hash_concat(max(h, sibling), min(h, sibling))

        payload = {"anchorRoot": root, "proofSample": {"leaf": "leaf", "path": [sibling]}}
        assert verifier.verify_payload(payload).verified is False

    def test_root_alias_accepted(self, verifier):
        payload = {"root": sha256_hex("leaf"), "proofSample": {"leaf": "leaf", "path": []}}
        assert verifier.verify_payload(payload).verified is True

    def test_convenience_wrapper(self):
        outcome = verify_commitment(sha256_hex("x"), "x", [], cache_warm=False)
        assert outcome.verified is True
        assert outcome.retrieval_ms == 58

"""Unit tests for x402_exact.core.codec."""

import json

import pytest

from x402_exact.core.codec import (
    decode_payment,
    encode_payment,
    payment_to_wire,
    safe_base64_decode,
    safe_base64_encode,
)
from x402_exact.core.errors import (
    EncodingError,
    MalformedPayloadError,
    MissingFieldError,
    PayloadValidationError,
    UnsupportedNetworkError,
)
from x402_exact.core.types import (
    EvmAuthorization,
    EvmPaymentPayload,
    ExactEvmPayload,
    SvmPaymentPayload,
)


def _header(document) -> str:
    return safe_base64_encode(json.dumps(document))


class TestEncodePayment:
    """Test encode_payment."""

    def test_evm_integers_are_stringified(self, evm_payment_document):
        encoded = encode_payment(evm_payment_document)
        wire = json.loads(safe_base64_decode(encoded))

        authorization = wire["payload"]["authorization"]
        assert authorization["value"] == "10000"
        assert authorization["validAfter"] == "1740672089"
        assert authorization["validBefore"] == "1740672154"
        assert authorization["nonce"] == evm_payment_document["payload"]["authorization"]["nonce"]

    def test_input_is_not_mutated(self, evm_payment_document):
        encode_payment(evm_payment_document)
        assert evm_payment_document["payload"]["authorization"]["value"] == 10000

    def test_compact_json_in_construction_order(self, evm_payment_document):
        text = safe_base64_decode(encode_payment(evm_payment_document))

        assert text.startswith('{"x402Version":1,"scheme":"exact","network":"base-sepolia","payload":{')
        assert '"authorization":{"from":"0x1111111111111111111111111111111111111111",' in text
        assert " " not in text

    def test_encoding_is_deterministic(self, evm_payment_document):
        first = encode_payment(evm_payment_document)
        second = encode_payment(json.loads(json.dumps(evm_payment_document)))
        assert first == second

    def test_model_and_mapping_encode_identically(self, evm_payment_document):
        model = EvmPaymentPayload.model_validate(evm_payment_document)
        assert encode_payment(model) == encode_payment(evm_payment_document)

    def test_svm_payload_passes_through(self, svm_payment_document):
        wire = json.loads(safe_base64_decode(encode_payment(svm_payment_document)))
        assert wire == svm_payment_document

    def test_unknown_network_rejected(self, evm_payment_document):
        evm_payment_document["network"] = "unknown-chain"
        with pytest.raises(UnsupportedNetworkError):
            encode_payment(evm_payment_document)

    def test_non_ascii_kept_as_utf8(self, svm_payment_document):
        svm_payment_document["memo"] = "café"
        text = safe_base64_decode(encode_payment(svm_payment_document))
        assert '"memo":"café"' in text

    def test_payment_to_wire_leaves_booleans_alone(self, evm_payment_document):
        evm_payment_document["payload"]["authorization"]["flag"] = True
        wire = payment_to_wire(evm_payment_document)
        assert wire["payload"]["authorization"]["flag"] is True


class TestDecodePayment:
    """Test decode_payment."""

    def test_round_trip_preserves_big_integers(self):
        huge = 2**200 + 7
        payment = EvmPaymentPayload(
            x402_version=1,
            scheme="exact",
            network="base",
            payload=ExactEvmPayload(
                signature="0x" + "cd" * 65,
                authorization=EvmAuthorization(
                    from_="0x" + "3" * 40,
                    to="0x" + "4" * 40,
                    value=huge,
                    valid_after=0,
                    valid_before=2**64,
                    nonce="0x" + "00" * 32,
                ),
            ),
        )

        decoded = decode_payment(encode_payment(payment))

        assert isinstance(decoded, EvmPaymentPayload)
        assert decoded.kind == "evm"
        authorization = decoded.payload.authorization
        assert authorization.value == str(huge)
        assert int(authorization.value) == huge
        assert int(authorization.valid_before) == 2**64
        assert authorization.from_ == "0x" + "3" * 40

    def test_reencoding_a_decoded_payload_is_stable(self, evm_payment_document):
        encoded = encode_payment(evm_payment_document)
        assert encode_payment(decode_payment(encoded)) == encoded

    def test_svm_round_trip(self, svm_payment_document):
        decoded = decode_payment(encode_payment(svm_payment_document))

        assert isinstance(decoded, SvmPaymentPayload)
        assert decoded.kind == "svm"
        assert decoded.payload.transaction == svm_payment_document["payload"]["transaction"]

    def test_unknown_top_level_fields_survive(self, svm_payment_document):
        svm_payment_document["extensions"] = {"trace": "abc"}
        decoded = decode_payment(encode_payment(svm_payment_document))

        wire = payment_to_wire(decoded)
        assert wire["extensions"] == {"trace": "abc"}
        assert "kind" not in wire

    def test_non_base64_rejected(self):
        with pytest.raises(EncodingError):
            decode_payment("not base64!!")

    def test_non_string_rejected(self):
        with pytest.raises(EncodingError):
            decode_payment(None)

    def test_non_json_rejected(self):
        with pytest.raises(MalformedPayloadError) as excinfo:
            decode_payment(safe_base64_encode("definitely not json"))
        assert "Failed to parse payment payload" in str(excinfo.value)

    def test_missing_network_rejected(self):
        with pytest.raises(MissingFieldError) as excinfo:
            decode_payment(_header({"foo": 1}))
        assert excinfo.value.field == "network"

    @pytest.mark.parametrize("document", [[1, 2], "text", 5, None])
    def test_non_object_rejected(self, document):
        with pytest.raises(MissingFieldError):
            decode_payment(_header(document))

    @pytest.mark.parametrize("network", ["", 8453, None])
    def test_mistyped_network_rejected(self, network):
        with pytest.raises(MissingFieldError):
            decode_payment(_header({"network": network, "payload": {}}))

    def test_unknown_network_rejected(self):
        with pytest.raises(UnsupportedNetworkError) as excinfo:
            decode_payment(_header({"network": "unknown-chain", "payload": {}}))
        assert excinfo.value.network == "unknown-chain"

    def test_schema_failure_carries_field_paths(self, evm_payment_document):
        evm_payment_document["payload"]["authorization"]["value"] = "-5"

        with pytest.raises(PayloadValidationError) as excinfo:
            decode_payment(_header(evm_payment_document))

        paths = [issue.path for issue in excinfo.value.issues]
        assert "payload.authorization.value" in paths

    def test_payload_shape_must_match_family(self, evm_payment_document):
        evm_payment_document["network"] = "solana"

        with pytest.raises(PayloadValidationError) as excinfo:
            decode_payment(_header(evm_payment_document))

        assert any(issue.path.startswith("payload") for issue in excinfo.value.issues)

    def test_missing_payload_rejected(self):
        with pytest.raises(PayloadValidationError):
            decode_payment(_header({"x402Version": 1, "scheme": "exact", "network": "base"}))

    @pytest.mark.parametrize(
        "field, value",
        [
            ("value", "10000\n"),
            ("validBefore", "1740672154\n"),
            ("to", "0x" + "2" * 40 + "\n"),
            ("nonce", "0x" + "f3" * 32 + "\n"),
        ],
    )
    def test_trailing_newline_rejected(self, evm_payment_document, field, value):
        evm_payment_document["payload"]["authorization"][field] = value

        with pytest.raises(PayloadValidationError) as excinfo:
            decode_payment(_header(evm_payment_document))

        assert f"payload.authorization.{field}" in [issue.path for issue in excinfo.value.issues]

    @pytest.mark.parametrize("value", ["١٢٣", "²", "１０"])
    def test_non_ascii_digits_rejected(self, evm_payment_document, value):
        evm_payment_document["payload"]["authorization"]["value"] = value

        with pytest.raises(PayloadValidationError):
            decode_payment(_header(evm_payment_document))

    def test_svm_transaction_with_trailing_newline_rejected(self, svm_payment_document):
        svm_payment_document["payload"]["transaction"] += "\n"

        with pytest.raises(PayloadValidationError) as excinfo:
            decode_payment(_header(svm_payment_document))

        assert "payload.transaction" in [issue.path for issue in excinfo.value.issues]


class TestBase64Helpers:
    def test_utf8_round_trip(self):
        assert safe_base64_decode(safe_base64_encode("héllo")) == "héllo"

    def test_surrounding_whitespace_ignored(self):
        assert safe_base64_decode(" " + safe_base64_encode("abc") + "\n") == "abc"

    def test_invalid_utf8_rejected(self):
        with pytest.raises(EncodingError):
            safe_base64_decode("//79")

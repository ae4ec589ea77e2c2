"""Unit tests for x402_exact.core.facilitator."""

import logging
from unittest.mock import Mock

import pytest

from x402_exact.core.errors import FacilitatorError
from x402_exact.core.facilitator import FacilitatorClient, supported_kinds_provider
from x402_exact.core.types import SupportedPaymentKindsResponse

SUPPORTED_BODY = {
    "kinds": [
        {"x402Version": 1, "scheme": "exact", "network": "base-sepolia"},
        {"x402Version": 1, "scheme": "exact", "network": "solana-devnet", "extra": {"feePayer": "Payer1"}},
    ]
}


def _response(status_code=200, body=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return Mock()


class TestFacilitatorClient:
    """Test FacilitatorClient."""

    def test_supported(self, session):
        session.get.return_value = _response(body=SUPPORTED_BODY)
        client = FacilitatorClient("https://facilitator.example/", session=session)

        supported = client.supported()

        session.get.assert_called_once_with("https://facilitator.example/supported", timeout=30)
        assert isinstance(supported, SupportedPaymentKindsResponse)
        assert supported.kinds[1].extra == {"feePayer": "Payer1"}

    def test_logs_through_component_logger(self, session, caplog):
        session.get.return_value = _response(body=SUPPORTED_BODY)
        client = FacilitatorClient("https://facilitator.example", session=session)

        with caplog.at_level(logging.INFO, logger="x402.facilitator"):
            client.supported()

        record = next(record for record in caplog.records if record.name == "x402.facilitator")
        assert record.x402_context == {
            "component": "facilitator",
            "operation": "supported",
            "url": "https://facilitator.example/supported",
        }

    def test_http_error(self, session):
        session.get.return_value = _response(status_code=503, text="unavailable")
        client = FacilitatorClient("https://facilitator.example", session=session)

        with pytest.raises(FacilitatorError) as excinfo:
            client.supported()
        assert excinfo.value.status_code == 503
        assert excinfo.value.http_status == 502

    def test_non_json_body(self, session):
        session.get.return_value = _response(body=ValueError("no json"), text="<html>")
        client = FacilitatorClient("https://facilitator.example", session=session)

        with pytest.raises(FacilitatorError):
            client.supported()

    def test_malformed_kinds(self, session):
        session.get.return_value = _response(body={"kinds": [{"scheme": "exact"}]})
        client = FacilitatorClient("https://facilitator.example", session=session)

        with pytest.raises(FacilitatorError):
            client.supported()

    def test_verify_posts_stringified_payload(self, session, evm_payment_document, evm_request):
        from x402_exact.core.requirements import build_evm_payment_requirements
        from x402_exact.core.types import EvmPaymentPayload

        session.post.return_value = _response(body={"isValid": True, "payer": "0x" + "1" * 40})
        client = FacilitatorClient("https://facilitator.example", session=session)
        payment = EvmPaymentPayload.model_validate(evm_payment_document)
        requirements = build_evm_payment_requirements(evm_request)

        result = client.verify(payment, requirements)

        assert result["isValid"] is True
        url = session.post.call_args.args[0]
        body = session.post.call_args.kwargs["json"]
        assert url == "https://facilitator.example/verify"
        assert body["x402Version"] == 1
        assert body["paymentPayload"]["payload"]["authorization"]["value"] == "10000"
        assert body["paymentRequirements"]["maxAmountRequired"] == "10000"


class TestSupportedKindsProvider:
    @pytest.mark.asyncio
    async def test_provider_calls_client_once(self, session):
        session.get.return_value = _response(body=SUPPORTED_BODY)
        provider = supported_kinds_provider(FacilitatorClient("https://facilitator.example", session=session))

        supported = await provider()

        assert len(supported.kinds) == 2
        assert session.get.call_count == 1

    def test_creating_provider_does_no_io(self, session):
        supported_kinds_provider(FacilitatorClient("https://facilitator.example", session=session))
        session.get.assert_not_called()

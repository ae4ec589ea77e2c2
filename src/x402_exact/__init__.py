"""
Public facade for the x402 exact-scheme helpers.

The most useful pieces are re-exported so integrators can
``from x402_exact import ...`` without navigating the package.
"""

from .api import advertise_requirements, create_facilitator_client, create_payment_header
from .core import (
    EVM_NETWORKS,
    KNOWN_NETWORKS,
    PAYMENT_HEADER,
    SVM_NETWORKS,
    X402_VERSION,
    ConfigError,
    EncodingError,
    EvmPaymentPayload,
    FacilitatorClient,
    FacilitatorError,
    InvalidAddressError,
    InvalidRequirementsError,
    MalformedPayloadError,
    MissingCollaboratorError,
    MissingFeePayerError,
    MissingFieldError,
    NegotiationConfig,
    PayloadValidationError,
    PaymentPayload,
    PaymentRequiredResponse,
    PaymentRequirements,
    PaymentRequirementsInput,
    PriceResolutionError,
    SupportedPaymentKindsResponse,
    SvmPaymentPayload,
    UnsupportedNetworkError,
    X402Error,
    build_evm_payment_requirements,
    build_exact_evm_payload,
    build_payment_requirements,
    build_svm_payment_requirements,
    decode_payment,
    encode_payment,
    is_evm_network,
    is_svm_network,
    load_negotiation_config,
    process_price_to_atomic_amount,
)
from .log import configure_logging, create_logger

__all__ = (
    "ConfigError",
    "EVM_NETWORKS",
    "EncodingError",
    "EvmPaymentPayload",
    "FacilitatorClient",
    "FacilitatorError",
    "InvalidAddressError",
    "InvalidRequirementsError",
    "KNOWN_NETWORKS",
    "MalformedPayloadError",
    "MissingCollaboratorError",
    "MissingFeePayerError",
    "MissingFieldError",
    "NegotiationConfig",
    "PAYMENT_HEADER",
    "PayloadValidationError",
    "PaymentPayload",
    "PaymentRequiredResponse",
    "PaymentRequirements",
    "PaymentRequirementsInput",
    "PriceResolutionError",
    "SVM_NETWORKS",
    "SupportedPaymentKindsResponse",
    "SvmPaymentPayload",
    "UnsupportedNetworkError",
    "X402Error",
    "X402_VERSION",
    "advertise_requirements",
    "build_evm_payment_requirements",
    "build_exact_evm_payload",
    "build_payment_requirements",
    "build_svm_payment_requirements",
    "configure_logging",
    "create_facilitator_client",
    "create_logger",
    "create_payment_header",
    "decode_payment",
    "encode_payment",
    "is_evm_network",
    "is_svm_network",
    "load_negotiation_config",
    "process_price_to_atomic_amount",
)

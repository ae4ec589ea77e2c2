"""
Core primitives: network sets, wire types, the payload codec and the
payment-requirements builders.
"""

from .codec import (
    decode_payment,
    encode_payment,
    payment_to_wire,
    safe_base64_decode,
    safe_base64_encode,
)
from .config import NegotiationConfig, load_negotiation_config
from .environment import ResolvedEnvironment, build_environment, load_env_file
from .errors import (
    ConfigError,
    EncodingError,
    FacilitatorError,
    InvalidAddressError,
    InvalidRequirementsError,
    MalformedPayloadError,
    MissingCollaboratorError,
    MissingFeePayerError,
    MissingFieldError,
    PayloadValidationError,
    PriceResolutionError,
    SchemaIssue,
    UnsupportedNetworkError,
    X402Error,
)
from .facilitator import FacilitatorClient, supported_kinds_provider
from .networks import (
    EVM_NETWORKS,
    KNOWN_NETWORKS,
    SVM_NETWORKS,
    AssetInfo,
    NetworkFamily,
    is_evm_network,
    is_svm_network,
    network_family,
)
from .pricing import (
    AtomicAmount,
    PriceResolutionFailure,
    TokenAmount,
    process_price_to_atomic_amount,
)
from .requirements import (
    PaymentRequirementsInput,
    build_evm_payment_requirements,
    build_payment_requirements,
    build_svm_payment_requirements,
    payment_required_response,
)
from .signer import build_exact_evm_payload
from .types import (
    PAYMENT_HEADER,
    X402_VERSION,
    EvmAuthorization,
    EvmPaymentPayload,
    ExactEvmPayload,
    ExactSvmPayload,
    PaymentPayload,
    PaymentPayloadSchema,
    PaymentRequiredResponse,
    PaymentRequirements,
    SupportedPaymentKind,
    SupportedPaymentKindsResponse,
    SvmPaymentPayload,
)

__all__ = [
    "AssetInfo",
    "AtomicAmount",
    "ConfigError",
    "EVM_NETWORKS",
    "EncodingError",
    "EvmAuthorization",
    "EvmPaymentPayload",
    "ExactEvmPayload",
    "ExactSvmPayload",
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
    "NetworkFamily",
    "PAYMENT_HEADER",
    "PayloadValidationError",
    "PaymentPayload",
    "PaymentPayloadSchema",
    "PaymentRequiredResponse",
    "PaymentRequirements",
    "PaymentRequirementsInput",
    "PriceResolutionError",
    "PriceResolutionFailure",
    "ResolvedEnvironment",
    "SVM_NETWORKS",
    "SchemaIssue",
    "SupportedPaymentKind",
    "SupportedPaymentKindsResponse",
    "SvmPaymentPayload",
    "TokenAmount",
    "UnsupportedNetworkError",
    "X402Error",
    "X402_VERSION",
    "build_environment",
    "build_evm_payment_requirements",
    "build_exact_evm_payload",
    "build_payment_requirements",
    "build_svm_payment_requirements",
    "decode_payment",
    "encode_payment",
    "is_evm_network",
    "is_svm_network",
    "load_env_file",
    "load_negotiation_config",
    "network_family",
    "payment_required_response",
    "payment_to_wire",
    "process_price_to_atomic_amount",
    "safe_base64_decode",
    "safe_base64_encode",
    "supported_kinds_provider",
]

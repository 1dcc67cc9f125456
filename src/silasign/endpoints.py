"""
Gateway endpoints: path, message label, signing requirements and business-field shapes.

Field models only describe what goes into the canonical message next to the
header. ``None`` fields are left out of the serialized body.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from .message import MessageLayout


class ProcessingType(str, Enum):
    STANDARD_ACH = "STANDARD_ACH"
    SAME_DAY_ACH = "SAME_DAY_ACH"
    INSTANT_ACH = "INSTANT_ACH"
    INSTANT_SETTLEMENT = "INSTANT_SETTLEMENT"


class RedeemProcessingType(str, Enum):
    STANDARD_ACH = "STANDARD_ACH"
    SAME_DAY_ACH = "SAME_DAY_ACH"


class TransactionType(str, Enum):
    ISSUE = "issue"
    REDEEM = "redeem"
    TRANSFER = "transfer"


class TransactionStatus(str, Enum):
    QUEUED = "queued"
    PENDING = "pending"
    PENDING_CONFIRMATION = "pending_confirmation"
    REVERSED = "reversed"
    FAILED = "failed"
    SUCCESS = "success"
    ROLLBACK = "rollback"
    REVIEW = "review"


# --- entity ---


class EntityInfo(BaseModel):
    first_name: str
    last_name: str
    birthdate: str
    entity_name: str = "default"
    relationship: str | None = "user"


class AddressInfo(BaseModel):
    address_alias: str | None = "default"
    street_address_1: str | None = None
    street_address_2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = "US"


class IdentityInfo(BaseModel):
    identity_alias: str = "SSN"
    identity_value: str


class ContactInfo(BaseModel):
    contact_alias: str = "default"
    phone: str
    email: str


class CryptoEntry(BaseModel):
    crypto_address: str
    crypto_alias: str = "default"
    crypto_code: str = "ETH"
    crypto_status: str | None = None


class RegisterFields(BaseModel):
    address: AddressInfo
    identity: IdentityInfo
    contact: ContactInfo
    crypto_entry: CryptoEntry
    entity: EntityInfo

    @classmethod
    def from_profile(
        cls,
        *,
        crypto_address: str,
        first_name: str,
        last_name: str,
        birthdate: str,
        street_address_1: str,
        city: str,
        state: str,
        postal_code: str,
        phone: str,
        email: str,
        ssn: str,
    ) -> RegisterFields:
        """Individual registration with the gateway's default aliases."""
        return cls(
            address=AddressInfo(
                street_address_1=street_address_1,
                city=city,
                state=state,
                postal_code=postal_code,
            ),
            identity=IdentityInfo(identity_value=ssn),
            contact=ContactInfo(phone=phone, email=email),
            crypto_entry=CryptoEntry(crypto_address=crypto_address.lower()),
            entity=EntityInfo(
                first_name=first_name, last_name=last_name, birthdate=birthdate
            ),
        )


class UpdateEmailFields(BaseModel):
    uuid: str
    email: str


class UpdatePhoneFields(BaseModel):
    uuid: str
    phone: str | None = None
    sms_opt_in: bool | None = None


class UpdateIdentityFields(BaseModel):
    uuid: str
    identity_alias: str
    identity_value: str


class UpdateAddressFields(BaseModel):
    uuid: str
    address_alias: str | None = None
    street_address_1: str | None = None
    street_address_2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


# --- account ---


class LinkAccountFields(BaseModel):
    plaid_token: str
    selected_account_id: str
    account_name: str = "default"


# --- transaction ---


class IssueFields(BaseModel):
    amount: int = Field(gt=0)
    account_name: str | None = "default"
    descriptor: str | None = None
    business_uuid: str | None = None
    processing_type: ProcessingType | None = ProcessingType.STANDARD_ACH


class RedeemFields(BaseModel):
    amount: int = Field(gt=0)
    account_name: str | None = "default"
    descriptor: str | None = None
    business_uuid: str | None = None
    processing_type: RedeemProcessingType | None = RedeemProcessingType.STANDARD_ACH


class TransferFields(BaseModel):
    amount: int = Field(gt=0)
    destination_handle: str
    descriptor: str | None = None
    destination_address: str | None = None
    destination_wallet: str | None = None
    source_id: str | None = None
    destination_id: str | None = None


class CancelTransactionFields(BaseModel):
    transaction_id: str


class TransactionFilters(BaseModel):
    transaction_id: str | None = None
    reference_id: str | None = None
    show_timelines: bool | None = True
    sort_ascending: bool | None = False
    max_sila_amount: int | None = None
    min_sila_amount: int | None = None
    statuses: list[TransactionStatus] | None = Field(
        default_factory=lambda: list(TransactionStatus)
    )
    start_epoch: int | None = None
    end_epoch: int | None = None
    page: int | None = 1
    per_page: int | None = 20
    transaction_types: list[TransactionType] | None = Field(
        default_factory=lambda: list(TransactionType)
    )
    bank_account_name: str | None = None
    blockchain_address: str | None = None
    processing_type: ProcessingType | None = None
    payment_method_id: str | None = None


class GetTransactionsFields(BaseModel):
    search_filters: TransactionFilters | None = None


@dataclass(frozen=True)
class Endpoint:
    """
    One authenticated gateway call.

    Attributes:
        path: URL path under the gateway root.
        message: Message label placed next to the header, if the endpoint has one.
        user_signed: True when the end user's signature is required.
        layout: What the canonical bytes carry.
        fields: Business-field model, or None for header-only calls.
    """

    path: str
    message: str | None = None
    user_signed: bool = True
    layout: MessageLayout = MessageLayout.FULL
    fields: type[BaseModel] | None = None


CHECK_HANDLE = Endpoint(
    "check_handle", "header_msg", user_signed=False, layout=MessageLayout.HEADER_ONLY
)
GET_ENTITY = Endpoint("get_entity", "header_msg", layout=MessageLayout.HEADER_ONLY)
REQUEST_KYC = Endpoint("request_kyc", "header_msg", layout=MessageLayout.HEADER_ONLY)
CHECK_KYC = Endpoint("check_kyc", "header_msg", layout=MessageLayout.HEADER_ONLY)
REGISTER = Endpoint("register", "entity_msg", fields=RegisterFields)
UPDATE_EMAIL = Endpoint("update/email", fields=UpdateEmailFields)
UPDATE_PHONE = Endpoint("update/phone", fields=UpdatePhoneFields)
UPDATE_IDENTITY = Endpoint("update/identity", fields=UpdateIdentityFields)
UPDATE_ADDRESS = Endpoint("update/address", fields=UpdateAddressFields)
LINK_ACCOUNT = Endpoint("link_account", fields=LinkAccountFields)
ISSUE_SILA = Endpoint("issue_sila", "issue_msg", fields=IssueFields)
REDEEM_SILA = Endpoint("redeem_sila", "redeem_msg", fields=RedeemFields)
TRANSFER_SILA = Endpoint("transfer_sila", "transfer_msg", fields=TransferFields)
CANCEL_TRANSACTION = Endpoint("cancel_transaction", fields=CancelTransactionFields)
GET_TRANSACTIONS = Endpoint(
    "get_transactions",
    "get_transactions_msg",
    user_signed=False,
    fields=GetTransactionsFields,
)

# Unauthenticated.
GET_SILA_BALANCE_PATH = "get_sila_balance"

ENDPOINTS: dict[str, Endpoint] = {
    e.path: e
    for e in (
        CHECK_HANDLE,
        GET_ENTITY,
        REQUEST_KYC,
        CHECK_KYC,
        REGISTER,
        UPDATE_EMAIL,
        UPDATE_PHONE,
        UPDATE_IDENTITY,
        UPDATE_ADDRESS,
        LINK_ACCOUNT,
        ISSUE_SILA,
        REDEEM_SILA,
        TRANSFER_SILA,
        CANCEL_TRANSACTION,
        GET_TRANSACTIONS,
    )
}

__all__: tuple[str, ...] = (
    "CANCEL_TRANSACTION",
    "CHECK_HANDLE",
    "CHECK_KYC",
    "ENDPOINTS",
    "GET_ENTITY",
    "GET_SILA_BALANCE_PATH",
    "GET_TRANSACTIONS",
    "ISSUE_SILA",
    "LINK_ACCOUNT",
    "REDEEM_SILA",
    "REGISTER",
    "REQUEST_KYC",
    "TRANSFER_SILA",
    "UPDATE_ADDRESS",
    "UPDATE_EMAIL",
    "UPDATE_IDENTITY",
    "UPDATE_PHONE",
    "AddressInfo",
    "CancelTransactionFields",
    "ContactInfo",
    "CryptoEntry",
    "Endpoint",
    "EntityInfo",
    "GetTransactionsFields",
    "IdentityInfo",
    "IssueFields",
    "LinkAccountFields",
    "ProcessingType",
    "RedeemFields",
    "RedeemProcessingType",
    "RegisterFields",
    "TransactionFilters",
    "TransactionStatus",
    "TransactionType",
    "TransferFields",
    "UpdateAddressFields",
    "UpdateEmailFields",
    "UpdateIdentityFields",
    "UpdatePhoneFields",
)

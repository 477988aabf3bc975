"""
Pydantic schemas for invoice forms.

InvoiceForm declares every invoice field. CreateInvoice and UpdateInvoice are
the views submitted by the dashboard forms: both omit `id` (passed out-of-band)
and `date` (always derived by the server).

Two validation modes are provided:
- safe_parse(): never raises on bad input, returns a ValidationResult
- parse(): raises ValidationFailure on bad input
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from invoicing.errors import ValidationFailure
from invoicing.utils.constants import INVOICE_STATUSES, MESSAGES

InvoiceStatus = Literal["pending", "paid"]

# Largest finite double; form numbers beyond it are not finite
MAX_AMOUNT = Decimal("1.7976931348623157e308")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class _InvoiceFields(BaseModel):
    """
    Fields the user edits on the invoice forms.

    Every field defaults to None and validates its default, so a field absent
    from the form fails with its own message instead of "Field required".
    """
    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(
        default=None,
        alias="customerId",
        validate_default=True,
        description="Customer UUID selected in the form",
    )
    amount: Decimal = Field(
        default=None,
        validate_default=True,
        description="Invoice amount in currency units (e.g. 120.50)",
    )
    status: InvoiceStatus = Field(
        default=None,
        validate_default=True,
        description="Invoice status",
        examples=["pending", "paid"],
    )

    @field_validator("customer_id", mode="before")
    @classmethod
    def customer_must_be_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise PydanticCustomError("customer_type", MESSAGES['CUSTOMER_REQUIRED'])
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Decimal:
        """
        Coerce form input to a number.

        Missing and blank values coerce to 0 so they fail the positivity rule
        rather than the type rule.
        """
        if value is None or isinstance(value, bool):
            value = int(bool(value))
        if isinstance(value, str):
            value = value.strip() or "0"
            if "_" in value:
                raise PydanticCustomError("amount_type", MESSAGES['AMOUNT_NOT_A_NUMBER'])
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            raise PydanticCustomError("amount_type", MESSAGES['AMOUNT_NOT_A_NUMBER'])
        if not number.is_finite() or abs(number) > MAX_AMOUNT:
            raise PydanticCustomError("amount_type", MESSAGES['AMOUNT_NOT_A_NUMBER'])
        return number

    @field_validator("amount", mode="after")
    @classmethod
    def amount_must_be_positive(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise PydanticCustomError("amount_gt", MESSAGES['AMOUNT_POSITIVE'])
        return value

    @field_validator("status", mode="before")
    @classmethod
    def status_must_be_known(cls, value: Any) -> Any:
        if not isinstance(value, str) or value not in INVOICE_STATUSES:
            raise PydanticCustomError("status_type", MESSAGES['STATUS_REQUIRED'])
        return value


class InvoiceForm(_InvoiceFields):
    """Full invoice shape, including the fields the server owns."""
    id: str = Field(..., description="Invoice UUID")
    date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Creation date (YYYY-MM-DD, no time component)",
        examples=["2026-10-18"],
    )


class CreateInvoice(_InvoiceFields):
    """Create form: InvoiceForm without id and date."""


class UpdateInvoice(_InvoiceFields):
    """Update form: same shape as CreateInvoice."""


@dataclass
class ValidationResult:
    """Outcome of safe_parse(). `data` is set only when `success` is True."""
    success: bool
    data: Optional[BaseModel] = None
    field_errors: Dict[str, List[str]] = field(default_factory=dict)


def form_fields(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the editable invoice fields out of submitted form data."""
    return {
        "customerId": form.get("customerId"),
        "amount": form.get("amount"),
        "status": form.get("status"),
    }


def flatten_field_errors(
    exc: ValidationError, schema: Type[BaseModel]
) -> Dict[str, List[str]]:
    """
    Collapse a pydantic ValidationError into {field: [messages]}.

    Keys are the form field names (aliases), whether the error came from
    submitted input or from a validated default. Errors without a field
    location are dropped.
    """
    field_errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        if not error["loc"]:
            continue
        field_name = str(error["loc"][0])
        model_field = schema.model_fields.get(field_name)
        if model_field is not None and model_field.alias:
            field_name = model_field.alias
        field_errors.setdefault(field_name, []).append(error["msg"])
    return field_errors


def safe_parse(schema: Type[SchemaT], data: Mapping[str, Any]) -> ValidationResult:
    """Validate without raising; field failures come back in the result."""
    try:
        return ValidationResult(success=True, data=schema.model_validate(data))
    except ValidationError as exc:
        return ValidationResult(success=False, field_errors=flatten_field_errors(exc, schema))


def parse(schema: Type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """
    Validate and return the model.

    Raises:
        ValidationFailure: If any field is invalid
    """
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailure(flatten_field_errors(exc, schema)) from exc


# --- Listing response models ---

class InvoiceSummary(BaseModel):
    """One row of the invoice listing."""
    id: str = Field(..., description="Invoice UUID")
    customer_id: str = Field(..., description="Customer UUID")
    amount: int = Field(..., ge=0, description="Amount in cents")
    status: InvoiceStatus = Field(..., description="Invoice status")
    date: str = Field(..., description="Creation date (YYYY-MM-DD)")


class InvoiceListResponse(BaseModel):
    """Response for GET /dashboard/invoices."""
    invoices: List[InvoiceSummary] = Field(
        default_factory=list,
        description="Invoices, newest first"
    )
    count: int = Field(..., description="Number of invoices returned")

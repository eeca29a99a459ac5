"""
Pydantic models for the render request.

These models define the JSON schema of the document bundle handed to the
engine and validate it at the boundary. The engine only reads them.

License: MIT
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from docpress import config
from docpress.assets import decode_data_url
from docpress.errors import ThemeError
from docpress.styles import RGB, THEME_PRESETS, hex_to_rgb, is_hex_color

DOCUMENT_TYPE_LABELS = {
    "proposal": "Proposal",
    "contract": "Contract",
    "sla": "Service Level Agreement",
}

DOCUMENT_TYPE_PREFIXES = {
    "proposal": "PROP",
    "contract": "CONT",
    "sla": "SLA",
}

SERVICE_TYPE_LABELS = {
    "website_pwa_build": "Website & PWA Build",
    "website_only": "Website Only",
    "pwa_only": "PWA Only",
    "cybersecurity": "Cybersecurity",
    "graphic_design": "Graphic Design",
}

DECORATOR_STYLES = ("banner", "rule")

# Unit kinds that print as a bare quantity in the pricing table
COUNT_ONLY_UNITS = ("unit", "fixed")


class Theme(BaseModel):
    """Visual parameters selecting the page decorator and its colours."""
    name: str = Field(default="custom", description="Theme name")
    style: str = Field(default="banner", description="Decorator style: 'banner' or 'rule'")
    primary_color: str = Field(default="#6B21A8", description="Primary colour (hex)")
    secondary_color: str = Field(default="#A855F7", description="Secondary colour (hex)")
    monochrome: bool = Field(default=False, description="Render without brand colours")

    @field_validator("primary_color", "secondary_color")
    @classmethod
    def validate_color(cls, v):
        """Ensure colours are 6-digit hex values."""
        if not is_hex_color(v):
            raise ValueError(f"'{v}' is not a hex colour like #1F2937")
        return v if v.startswith("#") else f"#{v}"

    @field_validator("style")
    @classmethod
    def validate_style(cls, v):
        if v not in DECORATOR_STYLES:
            raise ThemeError(f"Unknown theme style '{v}' (expected one of {', '.join(DECORATOR_STYLES)})")
        return v

    @property
    def primary_rgb(self) -> RGB:
        return hex_to_rgb(self.primary_color)

    @property
    def secondary_rgb(self) -> RGB:
        return hex_to_rgb(self.secondary_color)


def resolve_theme(ref: Union[str, Theme, dict, None]) -> Theme:
    """
    Resolve a theme reference.

    Args:
        ref: Preset name, ``Theme`` instance, mapping of theme fields, or
            ``None`` for the configured default preset

    Returns:
        The resolved theme

    Raises:
        ThemeError: If a preset name is unknown
    """
    if ref is None:
        ref = config.DEFAULT_THEME
    if isinstance(ref, Theme):
        return ref
    if isinstance(ref, str):
        preset = THEME_PRESETS.get(ref.strip().lower())
        if preset is None:
            raise ThemeError(f"Unknown theme '{ref}' (available: {', '.join(sorted(THEME_PRESETS))})")
        return Theme(**preset)
    if isinstance(ref, dict):
        return Theme(**ref)
    raise ThemeError(f"Invalid theme reference of type {type(ref).__name__}")


class Section(BaseModel):
    """A titled unit of document content."""
    key: str = Field(..., description="Stable section key")
    title: str = Field(..., description="Section title")
    content: str = Field(default="", description="Raw section text (light markdown)")
    is_required: bool = Field(default=False)
    sort_order: int = Field(default=0)


class PricingItem(BaseModel):
    """A priced line of the pricing table."""
    name: Optional[str] = Field(default=None, description="Short item name")
    description: str = Field(default="")
    quantity: int = Field(default=1, ge=0)
    unit_price: float = Field(default=0.0, ge=0)
    unit: str = Field(default="unit", description="Unit kind (hour, month, fixed, ...)")

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price

    @property
    def quantity_label(self) -> str:
        """Quantity with its unit kind, e.g. ``12 month``; ``unit`` and ``fixed`` show the number alone."""
        if self.unit in COUNT_ONLY_UNITS:
            return str(self.quantity)
        return f"{self.quantity} {self.unit}"


class PricingSummary(BaseModel):
    """Totals computed by the caller; missing values are derived from the items."""
    subtotal: Optional[float] = Field(default=None, ge=0)
    discount_amount: Optional[float] = Field(default=None, ge=0)
    discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    total: Optional[float] = Field(default=None)


class Location(BaseModel):
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None


def _decode_image_field(value: Any, keep_signed_state: bool = False):
    """Accept raw bytes, a data URL or bare base64 for image fields."""
    if value is None or isinstance(value, (bytes, bytearray)):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        decoded = decode_data_url(value)
        if decoded is None and keep_signed_state:
            # Undecodable payload: keep the signer marked as signed; the
            # backend draws a placeholder in place of the image.
            return b""
        return decoded
    return value


class Signature(BaseModel):
    """A signer and, once signed, their signature."""
    signer_name: str = Field(..., description="Signer full name")
    signer_email: str = Field(default="")
    signer_role: str = Field(default="Signer")
    signed_at: Optional[datetime] = Field(default=None)
    signature_image: Optional[bytes] = Field(default=None, description="PNG/JPEG bytes, data URL or base64")
    ip_address: Optional[str] = Field(default=None)
    location: Optional[Location] = Field(default=None)
    user_agent: Optional[str] = Field(default=None)
    is_required: bool = Field(default=True)

    @field_validator("signature_image", mode="before")
    @classmethod
    def decode_signature_image(cls, v):
        return _decode_image_field(v, keep_signed_state=True)

    @model_validator(mode="after")
    def check_signed_state(self):
        """A signature is either fully signed (time and image) or pending."""
        if (self.signed_at is None) != (self.signature_image is None):
            raise ValueError("signed_at and signature_image must both be present or both absent")
        return self

    @property
    def is_signed(self) -> bool:
        return self.signed_at is not None


class CompanySettings(BaseModel):
    """The issuing company."""
    company_name: Optional[str] = None
    legal_name: Optional[str] = None
    description: Optional[str] = None
    director_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    tax_number: Optional[str] = None
    footer_text: Optional[str] = None
    logo_url: Optional[str] = None
    logo: Optional[bytes] = Field(default=None, description="Logo image bytes, data URL or base64")

    @field_validator("logo", mode="before")
    @classmethod
    def decode_logo(cls, v):
        return _decode_image_field(v)


class ClientCompany(BaseModel):
    """The client organisation the document is prepared for."""
    company_name: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class ClientContact(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None


class DocumentInfo(BaseModel):
    """Document metadata."""
    id: str = Field(default="", description="Document identifier")
    title: str = Field(default="Untitled document")
    document_type: str = Field(default="proposal")
    service_type: str = Field(default="")
    status: str = Field(default="draft")
    version: int = Field(default=1, ge=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    compliance_confirmed: bool = False

    @property
    def type_label(self) -> str:
        return DOCUMENT_TYPE_LABELS.get(self.document_type, "Document")

    @property
    def service_label(self) -> str:
        return SERVICE_TYPE_LABELS.get(self.service_type, self.service_type)

    def number(self) -> str:
        """Human-readable document number, e.g. ``PROP-2025-7F3``."""
        prefix = DOCUMENT_TYPE_PREFIXES.get(self.document_type, "DOC")
        year = (self.created_at or datetime.now()).year
        suffix = self.id[-3:].upper() or "001"
        return f"{prefix}-{year}-{suffix}"


class DocumentRenderRequest(BaseModel):
    """Complete, fully resolved input bundle for one render."""
    model_config = ConfigDict(frozen=True)

    document: DocumentInfo = Field(default_factory=DocumentInfo)
    sections: List[Section] = Field(default_factory=list)
    pricing_items: List[PricingItem] = Field(default_factory=list)
    pricing: PricingSummary = Field(default_factory=PricingSummary)
    signatures: List[Signature] = Field(default_factory=list)
    company: Optional[CompanySettings] = None
    client: Optional[ClientCompany] = None
    client_contact: Optional[ClientContact] = None
    theme: Theme = Field(default_factory=lambda: resolve_theme(None))
    generated_at: Optional[datetime] = Field(default=None, description="Timestamp shown on the audit page")

    @field_validator("theme", mode="before")
    @classmethod
    def resolve_theme_reference(cls, v):
        return resolve_theme(v)

    @property
    def ordered_sections(self) -> List[Section]:
        return sorted(self.sections, key=lambda section: section.sort_order)

    @property
    def company_name(self) -> str:
        return (self.company and self.company.company_name) or "Company"

    @property
    def client_name(self) -> str:
        return (self.client and self.client.company_name) or "Client"

    @property
    def subtotal(self) -> float:
        if self.pricing.subtotal is not None:
            return self.pricing.subtotal
        return sum(item.line_total for item in self.pricing_items)

    @property
    def discount(self) -> float:
        return self.pricing.discount_amount or 0.0

    @property
    def total(self) -> float:
        if self.pricing.total is not None:
            return self.pricing.total
        return self.subtotal - self.discount

"""Tests for request models and their validators."""

import base64
from datetime import datetime

import pytest
from pydantic import ValidationError

from docpress.errors import ThemeError
from docpress.models import (
    DocumentInfo, DocumentRenderRequest, PricingItem, Signature, Theme, resolve_theme,
)


def test_theme_presets():
    assert resolve_theme("branded").style == "banner"
    minimal = resolve_theme("Minimal")
    assert minimal.style == "rule" and minimal.monochrome


def test_unknown_preset_raises_theme_error():
    with pytest.raises(ThemeError):
        resolve_theme("neon")


def test_unknown_theme_is_a_validation_error_on_requests():
    with pytest.raises(ValidationError):
        DocumentRenderRequest.model_validate({"theme": "neon"})
    with pytest.raises(ValidationError):
        DocumentRenderRequest.model_validate({"theme": {"style": "sparkle"}})


def test_theme_colours_must_be_hex():
    assert Theme(primary_color="1f2937").primary_color == "#1f2937"
    with pytest.raises(ValidationError):
        Theme(primary_color="purple")


def test_theme_rgb():
    assert Theme(primary_color="#FF0000").primary_rgb == (1.0, 0.0, 0.0)


def test_request_theme_defaults_to_preset():
    assert DocumentRenderRequest().theme.name == "branded"


def test_signature_requires_time_and_image_together(png_bytes):
    with pytest.raises(ValidationError):
        Signature(signer_name="Ann", signed_at=datetime(2025, 1, 1))
    with pytest.raises(ValidationError):
        Signature(signer_name="Ann", signature_image=png_bytes)

    pending = Signature(signer_name="Ann")
    assert not pending.is_signed


def test_signature_image_accepts_data_urls(png_bytes):
    data_url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
    signature = Signature(signer_name="Ann", signed_at=datetime(2025, 1, 1), signature_image=data_url)
    assert signature.signature_image == png_bytes
    assert signature.is_signed


def test_undecodable_signature_keeps_signed_state():
    signature = Signature(signer_name="Ann", signed_at=datetime(2025, 1, 1),
                          signature_image="data:image/png;base64,!!not-base64!!")
    assert signature.is_signed
    assert signature.signature_image == b""


def test_pricing_item_defaults_and_bounds():
    item = PricingItem(quantity=3, unit_price=12.5)
    assert item.name is None
    assert item.line_total == 37.5
    with pytest.raises(ValidationError):
        PricingItem(quantity=-1)
    with pytest.raises(ValidationError):
        PricingItem(unit_price=-0.01)


@pytest.mark.parametrize("quantity, unit, label", [
    (12, "month", "12 month"),
    (40, "hour", "40 hour"),
    (1, "fixed", "1"),
    (3, "unit", "3"),
])
def test_quantity_label_shows_unit_kind(quantity, unit, label):
    assert PricingItem(quantity=quantity, unit=unit).quantity_label == label


def test_totals_derived_from_items(make_request):
    request = make_request(
        pricing_items=[{"name": "Design", "quantity": 2, "unit_price": 100},
                       {"name": "Hosting", "quantity": 1, "unit_price": 50}],
        pricing={"discount_amount": 25, "discount_percent": 10},
    )
    assert request.subtotal == 250
    assert request.discount == 25
    assert request.total == 225


def test_explicit_totals_win(make_request):
    request = make_request(pricing={"subtotal": 1000, "total": 900})
    assert request.subtotal == 1000
    assert request.total == 900


def test_sections_ordered_by_sort_order(make_request):
    request = make_request(sections=[
        {"key": "c", "title": "C", "sort_order": 3},
        {"key": "a", "title": "A", "sort_order": 1},
        {"key": "b1", "title": "B1", "sort_order": 2},
        {"key": "b2", "title": "B2", "sort_order": 2},
    ])
    assert [s.title for s in request.ordered_sections] == ["A", "B1", "B2", "C"]


def test_document_number():
    created = datetime(2025, 3, 1)
    assert DocumentInfo(id="abc7f3", created_at=created).number() == "PROP-2025-7F3"
    assert DocumentInfo(id="x1", document_type="sla", created_at=created).number() == "SLA-2025-X1"
    assert DocumentInfo(id="9zz", document_type="memo", created_at=created).number() == "DOC-2025-9ZZ"


def test_labels():
    info = DocumentInfo(document_type="sla", service_type="website_pwa_build")
    assert info.type_label == "Service Level Agreement"
    assert info.service_label == "Website & PWA Build"
    assert DocumentInfo(document_type="memo").type_label == "Document"


def test_missing_names_are_substituted():
    request = DocumentRenderRequest()
    assert request.company_name == "Company"
    assert request.client_name == "Client"


def test_request_is_frozen(make_request):
    request = make_request()
    with pytest.raises(ValidationError):
        request.generated_at = None

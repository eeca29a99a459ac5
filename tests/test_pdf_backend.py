"""Smoke tests for the ReportLab backend."""

import logging
import re
from datetime import datetime

import pytest

from docpress.errors import CancellationToken, RenderCancelled
from docpress.pdf_backend import PdfBackend, render_document, render_document_with_count
from docpress.surface import DrawOp, PageBuffer, PaintContext

PAGE_OBJECT = re.compile(rb"/Type /Page\b(?!s)")


def test_render_document_produces_pdf(make_request):
    pdf = render_document(make_request())
    assert pdf.startswith(b"%PDF")
    assert len(PAGE_OBJECT.findall(pdf)) == 7


def test_render_reports_page_count(make_request):
    pdf, page_count = render_document_with_count(make_request(theme="minimal"))
    assert page_count == len(PAGE_OBJECT.findall(pdf)) == 6


def test_render_minimal_theme_with_everything(make_request, png_bytes):
    request = make_request(
        theme="minimal",
        company={"company_name": "Northwind Digital", "logo": png_bytes, "tax_number": "123"},
        pricing_items=[{"name": "Build", "quantity": 2, "unit_price": 100}],
        signatures=[
            {"signer_name": "Dana Lee"},
            {"signer_name": "Sam Roe", "signed_at": datetime(2025, 3, 4), "signature_image": png_bytes},
        ],
    )
    pdf = render_document(request)
    assert pdf.startswith(b"%PDF")
    assert pdf.rstrip().endswith(b"%%EOF")


def test_each_page_is_emitted():
    pages = [PageBuffer(number=n, role="section") for n in (1, 2, 3)]
    pdf = PdfBackend().render(pages)
    assert len(PAGE_OBJECT.findall(pdf)) == 3


def test_undecodable_image_falls_back_to_text(caplog):
    page = PageBuffer(number=1, role="signatures", ops=[
        DrawOp(kind="image", x=50, y=100, width=120, height=40, data=b"not an image",
               text="[Signature on file]", paint=PaintContext(size=8)),
        DrawOp(kind="rect", x=10, y=10, width=30, height=30, fill=(1.0, 0.0, 0.0), radius=3),
        DrawOp(kind="circle", x=60, y=60, radius=5, stroke=(0.0, 0.0, 0.0)),
        DrawOp(kind="line", x=0, y=0, x2=100, y2=100),
        DrawOp(kind="text", x=300, y=200, text="Right", align="right"),
        DrawOp(kind="text", x=300, y=220, text="Centre", align="center"),
    ])
    with caplog.at_level(logging.WARNING):
        pdf = PdfBackend(title="Fallback").render([page])
    assert pdf.startswith(b"%PDF")
    assert "Could not decode image" in caplog.text


def test_cancelled_render_raises(make_request):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(RenderCancelled):
        render_document(make_request(), cancel_token=token)

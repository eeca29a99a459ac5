"""Shared fixtures for the docpress test suite."""

import io
from datetime import datetime
from typing import List

import pytest
from PIL import Image

from docpress.models import DocumentRenderRequest
from docpress.pagination import PageDecorator, PageFrame, PaginationController
from docpress.surface import PageSurface


class RecordingDecorator(PageDecorator):
    """Draws nothing; remembers every frame it was asked to decorate."""

    def __init__(self):
        self.frames: List[PageFrame] = []

    def decorate(self, surface, frame):
        self.frames.append(frame)


@pytest.fixture
def decorator():
    return RecordingDecorator()


@pytest.fixture
def controller(decorator):
    controller = PaginationController(PageSurface(), decorator)
    controller.start_page("section", "Overview")
    return controller


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def build_request(**overrides) -> DocumentRenderRequest:
    payload = {
        "document": {
            "id": "doc-0007f3",
            "title": "Website Redesign Proposal",
            "document_type": "proposal",
            "service_type": "website_only",
            "status": "draft",
            "version": 2,
            "created_at": datetime(2025, 3, 1, 9, 30),
        },
        "sections": [
            {"key": "intro", "title": "Introduction", "content": "Thanks for the opportunity.", "sort_order": 1},
            {"key": "scope", "title": "Scope", "content": "- Discovery\n- Design\n- Build", "sort_order": 2},
            {"key": "terms", "title": "Terms", "content": "Payment due in **30 days**.", "sort_order": 3},
        ],
        "company": {"company_name": "Northwind Digital", "email": "hello@northwind.test"},
        "client": {"company_name": "Acme Corp"},
        "client_contact": {"full_name": "Dana Lee", "job_title": "CTO"},
        "generated_at": datetime(2025, 3, 2, 14, 5),
    }
    payload.update(overrides)
    return DocumentRenderRequest.model_validate(payload)


@pytest.fixture
def make_request():
    return build_request

"""
Test Configuration and Fixtures
"""
import io
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from google.genai import errors
from PIL import Image

from paper_solver.app import create_app
from paper_solver.extraction import ocr
from paper_solver.pipelines.solve_pipeline import SolvePipeline
from paper_solver.services.readiness_service import PROBE_PROMPT, ReadinessProber
from paper_solver.services.solution_service import SolutionGenerator


class FakeModels:
    """Stands in for client.models; replies are text, None or an exception"""

    def __init__(self):
        self.probe_reply = "API connected successfully"
        self.solution_reply = "Step 1: Add 2 and 2. Answer: 4."
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append(SimpleNamespace(model=model, contents=contents, config=config))
        reply = self.probe_reply if contents == PROBE_PROMPT else self.solution_reply
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)

    @property
    def probe_calls(self):
        return [c for c in self.calls if c.contents == PROBE_PROMPT]

    @property
    def solution_calls(self):
        return [c for c in self.calls if c.contents != PROBE_PROMPT]


class FakeGeminiClient:
    def __init__(self):
        self.models = FakeModels()


@pytest.fixture
def gemini():
    """Fake Gemini client"""
    return FakeGeminiClient()


@pytest.fixture
def pipeline(gemini):
    return SolvePipeline(
        prober=ReadinessProber(gemini, model="gemini-2.5-flash"),
        generator=SolutionGenerator(gemini, model="gemini-2.5-flash"),
        ocr_language="eng",
    )


@pytest.fixture
def client(pipeline):
    """Create test client"""
    return TestClient(create_app(pipeline))


@pytest.fixture
def api_error():
    """Build a google.genai ClientError shaped like a real Gemini error body"""
    def make(code, status, message, reason=None):
        error = {"code": code, "message": message, "status": status}
        if reason:
            error["details"] = [{
                "@type": "type.googleapis.com/google.rpc.ErrorInfo",
                "reason": reason,
                "domain": "googleapis.com",
            }]
        return errors.ClientError(code, {"error": error})
    return make


def build_pdf(content: bytes) -> bytes:
    """Single page PDF whose page content stream is `content`"""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1, xref_offset
    )
    return out


@pytest.fixture
def text_pdf():
    return build_pdf(b"BT /F1 24 Tf 72 720 Td (Question 1: What is 2+2?) Tj ET")


@pytest.fixture
def blank_pdf():
    return build_pdf(b"")


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_ocr(monkeypatch):
    """Replace the Tesseract call; set .text to control what is recognized"""
    state = SimpleNamespace(text="Q1. Solve x + 3 = 5", images=[], languages=[])

    def image_to_string(image, lang=None):
        state.images.append(image)
        state.languages.append(lang)
        return state.text

    monkeypatch.setattr(ocr.pytesseract, "image_to_string", image_to_string)
    return state

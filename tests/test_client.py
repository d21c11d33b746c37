"""
Tests for the extraction client (no network: the chat model is faked).
"""

import asyncio
import base64
import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from pitchplot.config import SystemConfig
from pitchplot.errors import InvalidImage, NoImageProvided, UpstreamUnavailable
from pitchplot.extraction.client import (
    ExtractionClient,
    mask_heavy_inputs,
    normalize_image,
    reply_text,
)
from pitchplot.prompts import PROMPT_PITCH_TABLE_EXTRACTOR


def _png_base64(size=(40, 20), mode="RGB"):
    img = Image.new(mode, size, (10, 20, 30, 128) if mode == "RGBA" else (10, 20, 30))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("utf-8")


def _decode(b64):
    return Image.open(io.BytesIO(base64.b64decode(b64)))


def _fake_llm(content):
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content=content))
    return llm


class TestReplyText:
    """Flattening provider reply content."""

    def test_plain_string(self):
        assert reply_text("[1]") == "[1]"

    def test_content_blocks_concatenated(self):
        blocks = [{"type": "text", "text": "Here: "}, {"type": "tool_use"}, {"type": "text", "text": "[1]"}]
        assert reply_text(blocks) == "Here: [1]"

    def test_none(self):
        assert reply_text(None) == ""


class TestNormalizeImage:
    """Pillow pre-processing of the uploaded screenshot."""

    def test_roundtrip_png(self):
        out = normalize_image(_png_base64())
        img = _decode(out)
        assert img.format == "PNG"
        assert img.size == (40, 20)
        assert img.mode == "RGB"

    def test_transparency_flattened(self):
        img = _decode(normalize_image(_png_base64(mode="RGBA")))
        assert img.mode == "RGB"

    def test_downscaled(self):
        img = _decode(normalize_image(_png_base64(size=(400, 100)), max_dim=200))
        assert img.size == (200, 50)

    def test_data_url_prefix_tolerated(self):
        img = _decode(normalize_image("data:image/png;base64," + _png_base64()))
        assert img.size == (40, 20)

    def test_empty_payload(self):
        with pytest.raises(NoImageProvided):
            normalize_image("")

    def test_not_base64(self):
        with pytest.raises(InvalidImage):
            normalize_image("not base64 at all!")

    def test_not_an_image(self):
        with pytest.raises(InvalidImage):
            normalize_image(base64.b64encode(b"hello world").decode())

    def test_too_large(self, monkeypatch):
        monkeypatch.setattr(SystemConfig, "MAX_IMAGE_BYTES", 10)
        with pytest.raises(InvalidImage, match="too large"):
            normalize_image(_png_base64())


class TestMaskHeavyInputs:
    def test_masks_payloads(self):
        masked = mask_heavy_inputs({"image_base64": "A" * 5000, "raw": b"12345", "small": "ok"})
        assert masked["image_base64"] == "<MASKED_STRING: 5000 chars>"
        assert masked["raw"] == "<MASKED_BYTES: 5 bytes>"
        assert masked["small"] == "ok"


class TestExtractionClient:
    """Single model call with bounded wait."""

    @pytest.mark.asyncio
    async def test_sends_image_and_prompt(self):
        llm = _fake_llm('[{"pitchType": "Slider"}]')
        client = ExtractionClient(llm=llm)

        text = await client.extract_text(_png_base64())

        assert text == '[{"pitchType": "Slider"}]'
        messages = llm.ainvoke.await_args.args[0]
        content = messages[0].content
        assert content[0]["type"] == "image_url"
        assert content[0]["image_url"]["url"].startswith("data:image/png;base64,")
        assert content[1] == {"type": "text", "text": PROMPT_PITCH_TABLE_EXTRACTOR}

    @pytest.mark.asyncio
    async def test_content_blocks_joined(self):
        client = ExtractionClient(llm=_fake_llm([{"type": "text", "text": "[1"}, {"type": "text", "text": "]"}]))
        assert await client.extract_text(_png_base64()) == "[1]"

    @pytest.mark.asyncio
    async def test_provider_error_becomes_upstream_unavailable(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("401 invalid api key"))
        client = ExtractionClient(llm=llm)

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await client.extract_text(_png_base64())
        assert exc_info.value.provider_message == "401 invalid api key"
        assert exc_info.value.status_code == 502
        llm.ainvoke.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def _hang(_messages):
            await asyncio.sleep(10)

        llm = MagicMock()
        llm.ainvoke = _hang
        client = ExtractionClient(llm=llm, timeout_s=0.05)

        with pytest.raises(UpstreamUnavailable, match="timed out"):
            await client.extract_text(_png_base64())

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        client = ExtractionClient()
        with patch.object(SystemConfig, "get_llm", side_effect=ValueError("Missing OPENAI_API_KEY")):
            with pytest.raises(UpstreamUnavailable, match="OPENAI_API_KEY"):
                await client.extract_text(_png_base64())

    @pytest.mark.asyncio
    async def test_bad_image_never_reaches_model(self):
        llm = _fake_llm("[]")
        client = ExtractionClient(llm=llm)
        with pytest.raises(InvalidImage):
            await client.extract_text("%%%")
        llm.ainvoke.assert_not_awaited()

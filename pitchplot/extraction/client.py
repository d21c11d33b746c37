"""
Extraction Client: The "Eye" (Table Reader)
===========================================

1. THE MISSION
--------------
Turns a screenshot of a pitch-statistics table into raw model text. The text
is untrusted: nothing here checks its structure. That is the job of the
response parser and the record schema downstream.

2. THE MECHANISM
----------------
A. **Pre-Processing:** Decodes the base64 payload with Pillow, flattens
   transparency, downsizes oversized screenshots and re-encodes as PNG in a
   worker thread so the event loop never blocks.
B. **Single Prompt Contract:** One current extraction prompt
   (`PROMPT_PITCH_TABLE_EXTRACTOR`) travels with the image.
C. **Bounded Wait:** The model call is wrapped in `asyncio.wait_for`. There
   is no retry; a failure is reported once.
D. **Observability:** LangSmith spans with image payloads masked.
"""

import asyncio
import atexit
import base64
import binascii
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

# Third-party
from langchain_core.messages import HumanMessage
from langchain_core.tracers.context import tracing_v2_enabled
from langsmith import traceable
from PIL import Image, UnidentifiedImageError

# Internal
from pitchplot.config import SystemConfig
from pitchplot.errors import InvalidImage, NoImageProvided, UpstreamUnavailable, truncate
from pitchplot.prompts import PROMPT_PITCH_TABLE_EXTRACTOR

logger = logging.getLogger(__name__)

# ==============================================================================
# ⚙️ RESOURCE MANAGEMENT
# ==============================================================================
_IMG_EXECUTOR = ThreadPoolExecutor(max_workers=2)


def _shutdown_executor():
    """Ensure thread pool is closed on program exit."""
    _IMG_EXECUTOR.shutdown(wait=False)


atexit.register(_shutdown_executor)


def mask_heavy_inputs(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Masks image payloads in traced inputs so LangSmith uploads stay small.
    """
    clean_inputs = inputs.copy()
    for key, value in clean_inputs.items():
        if isinstance(value, bytes):
            clean_inputs[key] = f"<MASKED_BYTES: {len(value)} bytes>"
        elif isinstance(value, str) and len(value) > 2000:
            clean_inputs[key] = f"<MASKED_STRING: {len(value)} chars>"
    return clean_inputs


def reply_text(content: Any) -> str:
    """
    Concatenates the text parts of a chat reply.
    OpenAI returns a plain string; Anthropic may return a list of content blocks.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict):
            parts.append(block.get("text") or "")
    return "".join(parts)


def normalize_image(image_base64: str, max_dim: int = SystemConfig.MAX_IMAGE_DIM) -> str:
    """
    CPU-bound: decode, flatten to RGB, downsize and re-encode as base64 PNG.
    """
    if not image_base64:
        raise NoImageProvided()

    # Tolerate a full data URL from browser FileReader
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]

    try:
        raw = base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImage(details={"reason": str(e)}) from e

    if len(raw) > SystemConfig.MAX_IMAGE_BYTES:
        raise InvalidImage(
            f"Image too large ({len(raw) / 1024 / 1024:.1f} MB). "
            f"Max: {SystemConfig.MAX_IMAGE_BYTES // 1024 // 1024} MB"
        )

    try:
        with io.BytesIO(raw) as input_buf, Image.open(input_buf) as img:
            # Handle Transparency (PNG -> RGB on white)
            if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
                rgba = img.convert("RGBA")
                bg = Image.new("RGB", rgba.size, (255, 255, 255))
                bg.paste(rgba, mask=rgba.split()[3])
                img = bg
            else:
                img = img.convert("RGB")

            width, height = img.size
            if max(width, height) > max_dim:
                ratio = max_dim / max(width, height)
                new_size = (int(width * ratio), int(height * ratio))
                img = img.resize(new_size, Image.Resampling.LANCZOS)

            with io.BytesIO() as output_buf:
                img.save(output_buf, format="PNG")
                return base64.b64encode(output_buf.getvalue()).decode("utf-8")
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidImage(details={"reason": str(e)}) from e


# ==============================================================================
# 👁️ EXTRACTION CLIENT
# ==============================================================================
class ExtractionClient:
    def __init__(self, llm=None, timeout_s: Optional[float] = None):
        # Lazy: a missing API key surfaces per request as UpstreamUnavailable
        self._llm = llm
        self.timeout_s = timeout_s or SystemConfig.EXTRACTION_TIMEOUT_S

    @property
    def llm(self):
        if self._llm is None:
            try:
                self._llm = SystemConfig.get_llm(
                    model_name=SystemConfig.VISION_MODEL,
                    temperature=SystemConfig.EXTRACTION_TEMPERATURE,
                    max_tokens=SystemConfig.EXTRACTION_MAX_TOKENS,
                    timeout=self.timeout_s,
                )
            except ValueError as e:
                raise UpstreamUnavailable(str(e)) from e
            logger.info(
                f"👁️ Extraction client initialized. "
                f"Model: {SystemConfig.VISION_MODEL} | Mode: {SystemConfig.DEPLOYMENT_MODE}"
            )
        return self._llm

    @traceable(name="Pitch Table Extraction", run_type="tool", process_inputs=mask_heavy_inputs)
    async def extract_text(self, image_base64: str) -> str:
        """
        Sends the screenshot plus the extraction prompt; returns raw reply text.

        Raises:
            NoImageProvided / InvalidImage: bad payload.
            UpstreamUnavailable: transport, auth or timeout failure.
        """
        loop = asyncio.get_running_loop()
        png_base64 = await loop.run_in_executor(_IMG_EXECUTOR, normalize_image, image_base64)

        messages = [
            HumanMessage(
                content=[
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:image/png;base64,{png_base64}"}
                    },
                    {"type": "text", "text": PROMPT_PITCH_TABLE_EXTRACTOR},
                ]
            )
        ]

        llm = self.llm
        try:
            # Keep the base64 payload out of auto-created child spans
            with tracing_v2_enabled(False):
                response = await asyncio.wait_for(llm.ainvoke(messages), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            logger.error(f"⏱️ Model request timed out after {self.timeout_s:.0f}s")
            raise UpstreamUnavailable(f"timed out after {self.timeout_s:.0f}s") from e
        except Exception as e:
            logger.error(f"❌ Model request failed: {e}")
            raise UpstreamUnavailable(str(e) or type(e).__name__) from e

        text = reply_text(response.content)
        logger.info(f"✅ Model replied with {len(text)} chars: {truncate(text, 80)!r}")
        return text

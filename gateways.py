import json
import logging
import time

from google import genai
from google.genai import types

from config import DEFAULT_MODEL, GEMINI_API_KEY, GEMINI_TIMEOUT_MS
from errors import AnalysisFailed, GatewayError, InvalidImage
from images import parse_data_url
from models import StyleAnalysis
from system_prompt import ANALYSIS_SCHEMA, ANALYZE_PROMPT, REFINE_PROMPT

logger = logging.getLogger(__name__)

AVAILABLE_MODELS = [
    "gemini-3-flash-preview",
    "gemini-3.1-pro-preview",
    "gemini-3-pro-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
]

THINKING_MODELS = {
    "gemini-3.1-pro-preview",
    "gemini-3-pro-preview",
    "gemini-3-flash-preview",
    "gemini-2.5-pro",
    "gemini-2.5-flash",
}

_client = None


def get_client():
    global _client
    if _client is None:
        if not GEMINI_API_KEY:
            raise GatewayError("GEMINI_API_KEY is not configured")
        _client = genai.Client(
            api_key=GEMINI_API_KEY,
            http_options=types.HttpOptions(timeout=GEMINI_TIMEOUT_MS),
        )
    return _client


def build_config(model, **kwargs):
    if model in THINKING_MODELS:
        kwargs["thinking_config"] = types.ThinkingConfig(thinking_level="low")
    return types.GenerateContentConfig(**kwargs)


def refine_prompt(raw_prompt, model=DEFAULT_MODEL, client=None):
    """Ask the model to polish a composed UI prompt. Returns the refined text (may be empty)."""
    client = client or get_client()
    try:
        start = time.time()
        response = client.models.generate_content(
            model=model,
            contents=REFINE_PROMPT.format(raw_prompt=raw_prompt),
            config=build_config(model),
        )
        elapsed = round(time.time() - start, 1)
    except Exception as e:
        logger.exception("Prompt refinement failed")
        raise GatewayError(str(e)) from e
    logger.info(f"Refined prompt with {model} in {elapsed}s")
    return response.text or ""


def analyze_ui_style(image_data, model=DEFAULT_MODEL, client=None):
    """Decompose a UI screenshot (data URL) into a StyleAnalysis.

    Any remote error, undecodable JSON or missing/malformed field raises AnalysisFailed.
    """
    try:
        mime, raw_bytes = parse_data_url(image_data)
    except InvalidImage as e:
        raise AnalysisFailed(str(e)) from e

    client = client or get_client()
    config = build_config(
        model,
        response_mime_type="application/json",
        response_schema=ANALYSIS_SCHEMA,
    )
    try:
        start = time.time()
        response = client.models.generate_content(
            model=model,
            contents=[types.Part.from_bytes(data=raw_bytes, mime_type=mime), ANALYZE_PROMPT],
            config=config,
        )
        elapsed = round(time.time() - start, 1)
    except Exception as e:
        logger.exception("Style analysis request failed")
        raise AnalysisFailed(str(e)) from e

    try:
        analysis = StyleAnalysis.from_dict(json.loads(response.text or ""))
    except ValueError as e:
        logger.warning(f"Unusable analysis payload from {model}: {e}")
        raise AnalysisFailed(str(e)) from e
    logger.info(f"Analyzed UI style with {model} in {elapsed}s")
    return analysis

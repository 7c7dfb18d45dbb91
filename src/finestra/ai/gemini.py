"""Gemini client for cost deviation explanations."""

import logging
import os
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from finestra.domain.deviation import Explainer, ExplanationRequest
from finestra.domain.errors import ExplanationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"


def _money(value) -> str:
    return f"{value:.2f}"


def build_prompt(request: ExplanationRequest) -> str:
    """Render the analyst prompt for one deviation."""
    lines = [
        "You are an expert financial analyst. Analyze the following project cost data.",
        "",
        f"Project Name: {request.project_name}",
        f"Project Description: {request.project_description or ''}",
        f"Predicted Total Cost: {_money(request.predicted_cost)}",
        f"Actual Total Cost: {_money(request.actual_cost)}",
        f"Deviation Amount: {_money(request.deviation_amount)}",
        f"Deviation Percentage: {_money(request.deviation_percentage)}%",
        "",
        "Cost Categories Breakdown:",
    ]
    if request.cost_categories:
        for item in request.cost_categories:
            lines.append(
                f"- Category: {item.category}, Predicted: {_money(item.predicted)}, "
                f"Actual: {_money(item.actual)}"
            )
    else:
        lines.append("No detailed cost category breakdown provided.")
    lines += [
        "",
        "Based on the provided information, identify potential reasons for this "
        "significant cost deviation. Consider factors such as unexpected expenses, "
        "scope changes, inaccurate initial estimates, market fluctuations, or "
        "operational inefficiencies. Provide a concise yet comprehensive explanation.",
    ]
    return "\n".join(lines)


class GeminiExplainer(Explainer):
    """Explainer calling a Gemini model once per request, without retries."""

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name=model_name)

    def explain(self, request: ExplanationRequest) -> str:
        prompt = build_prompt(request)
        try:
            response = self.model.generate_content(prompt)
        except google_exceptions.GoogleAPIError as e:
            raise ExplanationError(f"Gemini request failed: {e}") from e

        # A blocked prompt has no candidates, and reading parts raises
        try:
            parts = response.parts
        except ValueError as e:
            raise ExplanationError(f"Gemini blocked the request: {e}") from e
        if not parts:
            logger.debug("Gemini returned no content: %r", response)
            raise ExplanationError("Gemini returned an empty response")

        try:
            text = response.text.strip()
        except ValueError as e:
            raise ExplanationError(f"Gemini response has no text: {e}") from e
        if not text:
            raise ExplanationError("Gemini returned an empty explanation")
        return text


def create_explainer(
    api_key: Optional[str] = None, model_name: Optional[str] = None
) -> Optional[GeminiExplainer]:
    """Build the Gemini explainer from arguments or the environment.

    Args:
        api_key: API key. If None, GOOGLE_API_KEY is used.
        model_name: Model name. If None, FINESTRA_GEMINI_MODEL is used, then
            the default model.

    Returns:
        GeminiExplainer, or None when no API key is configured
    """
    api_key = api_key or os.environ.get("GOOGLE_API_KEY")
    if not api_key:
        logger.info("GOOGLE_API_KEY is not set; deviation explanations are disabled")
        return None
    model_name = model_name or os.environ.get("FINESTRA_GEMINI_MODEL") or DEFAULT_MODEL
    return GeminiExplainer(api_key=api_key, model_name=model_name)

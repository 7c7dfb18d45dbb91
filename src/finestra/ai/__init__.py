"""Deviation explanations backed by Gemini."""

from finestra.ai.gemini import GeminiExplainer, build_prompt, create_explainer

__all__ = ["GeminiExplainer", "build_prompt", "create_explainer"]

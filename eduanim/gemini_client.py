from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from rich.console import Console

console = Console()


class GeminiClient:
    """Thin wrapper around google-generativeai for schema-constrained JSON responses.

    A fallback model is only tried when one is configured; the generation call is
    otherwise made exactly once.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-2.5-flash",
        fallback_model_name: Optional[str] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise RuntimeError(
                "GOOGLE_API_KEY not set. Export it or pass api_key to GeminiClient."
            )
        self.model_name = model_name
        self.fallback_model_name = fallback_model_name
        # Lazy import to avoid dependency cost if not used
        try:
            from google import generativeai as genai  # type: ignore
        except Exception as exc:  # pragma: no cover - import-time failure
            raise RuntimeError(
                "google-generativeai is not installed. Run: pip install -e ."
            ) from exc

        self._genai = genai
        self._genai.configure(api_key=self.api_key)

    def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Generate strictly-JSON content from the model.

        Returns parsed JSON as a Python dict.
        """
        try:
            return self._generate(self.model_name, prompt, system_instruction, response_schema)
        except Exception as primary_error:
            if not self.fallback_model_name:
                raise RuntimeError(f"Gemini generation failed: {primary_error}") from primary_error
            console.print(
                f"[yellow]Primary model '{self.model_name}' failed, trying fallback '{self.fallback_model_name}'.[/yellow]"
            )
            try:
                return self._generate(self.fallback_model_name, prompt, system_instruction, response_schema)
            except Exception as fallback_error:
                raise RuntimeError(
                    f"Gemini generation failed: {primary_error}\nFallback error: {fallback_error}"
                ) from fallback_error

    def _generate(
        self,
        model_name: str,
        prompt: str,
        system_instruction: Optional[str],
        response_schema: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {"response_mime_type": "application/json"}
        if response_schema is not None:
            generation_config["response_schema"] = response_schema
        model = self._get_model(model_name, system_instruction)
        response = model.generate_content([prompt], generation_config=generation_config)
        text = response.text
        if not text or not text.strip():
            raise RuntimeError("No response from AI")
        return json.loads(text)

    def _get_model(self, model_name: str, system_instruction: Optional[str]):
        return self._genai.GenerativeModel(
            model_name,
            system_instruction=system_instruction,
        )

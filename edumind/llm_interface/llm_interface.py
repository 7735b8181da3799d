# -*- coding: utf-8 -*-
"""LLM interface (LLMInterface) implementation.

Sends one blocking structured-output request to the configured generative
model endpoint and returns the decoded JSON reply. Two providers are
supported: Google Gemini ``generateContent`` and OpenAI-compatible chat
completions. Requests are never retried.
"""
import copy
import json
import time
from typing import Any, Dict, Optional

import requests

from edumind.config_manager.config_manager import ConfigManager
from edumind.monitoring_manager.monitoring_manager import MonitoringManager

GEMINI_DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
SUPPORTED_PROVIDERS = ("gemini", "openai")


def to_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Converts a Gemini-style schema (``"type": "OBJECT"``) to plain JSON Schema."""
    converted = copy.deepcopy(schema)
    if isinstance(converted.get("type"), str):
        converted["type"] = converted["type"].lower()
    if "properties" in converted:
        converted["properties"] = {k: to_json_schema(v) for k, v in converted["properties"].items()}
    if "items" in converted:
        converted["items"] = to_json_schema(converted["items"])
    return converted


class LLMInterface:
    """
    Wraps the HTTP exchange with the model provider: request building,
    authentication, response extraction and error reporting.
    """

    def __init__(self, config_manager: ConfigManager, monitoring_manager: MonitoringManager):
        """
        Args:
            config_manager: Source of the ``llm.*`` settings.
            monitoring_manager: Logger, metrics and tracing.
        """
        self.config_manager = config_manager
        self.monitoring_manager = monitoring_manager
        self.provider = str(self.config_manager.get_config("llm.provider", "gemini")).lower()
        self.api_key = self.config_manager.get_config("llm.api_key")
        self.api_endpoint = self.config_manager.get_config(
            "llm.api_endpoint", GEMINI_DEFAULT_ENDPOINT if self.provider == "gemini" else None
        )
        self.default_model = self.config_manager.get_config("llm.default_model", "gemini-3-flash-preview")
        self.request_timeout = self.config_manager.get_config("llm.request_timeout", 60)
        self.default_temperature = self.config_manager.get_config("llm.default_temperature", 0.4)

        if self.provider not in SUPPORTED_PROVIDERS:
            self.monitoring_manager.log_warning(
                f"Unsupported LLM provider '{self.provider}'. Supported: {', '.join(SUPPORTED_PROVIDERS)}."
            )
        if not self.api_key:
            self.monitoring_manager.log_warning("LLM_API_KEY not found in configuration.")
        if not self.api_endpoint:
            self.monitoring_manager.log_warning(
                "LLM_API_ENDPOINT not found in configuration. Real HTTP calls will fail."
            )

    def _build_request(self, prompt: str, response_schema: Dict[str, Any], model_name: str, temperature: float):
        """Returns (url, headers, payload) for the configured provider."""
        if self.provider == "gemini":
            url = f"{self.api_endpoint.rstrip('/')}/models/{model_name}:generateContent"
            headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
            payload = {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": response_schema,
                    "temperature": temperature,
                },
            }
        else:
            url = self.api_endpoint
            headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
            payload = {
                "model": model_name,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": temperature,
                "stream": False,
                "response_format": {
                    "type": "json_schema",
                    "json_schema": {"name": "study_plan", "schema": to_json_schema(response_schema)},
                },
            }
        return url, headers, payload

    def _extract_text(self, response_data: Dict[str, Any]) -> str:
        if self.provider == "gemini":
            parts = response_data["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        return response_data["choices"][0]["message"]["content"] or ""

    def _usage(self, response_data: Dict[str, Any]) -> Dict[str, Any]:
        if self.provider == "gemini":
            return response_data.get("usageMetadata", {})
        return response_data.get("usage", {})

    def generate_structured(
        self,
        prompt: str,
        response_schema: Dict[str, Any],
        model_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Asks the model for a JSON reply constrained by ``response_schema``.

        Args:
            prompt: Full prompt text.
            response_schema: Schema of the expected reply (Gemini notation).
            model_config: Optional overrides, e.g. {"model_name": "...", "temperature": 0.2}.

        Returns:
            {"status": "success", "data": {"json": <decoded reply>, "text": str, "usage": dict}, "message": ""}
            or {"status": "error", "data": None, "message": "<reason>"}.
        """
        if not self.api_key or not self.api_endpoint:
            return {"status": "error", "data": None, "message": "LLM API key or endpoint not configured."}
        if self.provider not in SUPPORTED_PROVIDERS:
            return {"status": "error", "data": None, "message": f"Unsupported LLM provider: {self.provider}"}

        current_model_config = model_config or {}
        model_name = current_model_config.get("model_name", self.default_model)
        temperature = current_model_config.get("temperature", self.default_temperature)
        url, headers, payload = self._build_request(prompt, response_schema, model_name, temperature)

        log_context = {"provider": self.provider, "model": model_name}
        span = self.monitoring_manager.start_span("llm.generate_structured", attributes=log_context)
        started = time.monotonic()
        try:
            http_response = requests.post(url, headers=headers, json=payload, timeout=self.request_timeout)
        except requests.exceptions.Timeout as e:
            self.monitoring_manager.end_span(span, exc=e)
            self.monitoring_manager.log_error(
                f"LLM API request timed out after {self.request_timeout}s.", log_context
            )
            return {"status": "error", "data": None, "message": "LLM API request timed out."}
        except requests.exceptions.RequestException as e:
            self.monitoring_manager.end_span(span, exc=e)
            self.monitoring_manager.log_error(f"LLM API request failed: {e}", log_context)
            return {"status": "error", "data": None, "message": f"LLM API request failed: {e}"}

        elapsed = time.monotonic() - started
        self.monitoring_manager.log_info(
            "LLM API responded.", {**log_context, "status_code": http_response.status_code, "elapsed_s": round(elapsed, 3)}
        )

        if http_response.status_code != 200:
            error_message = (
                f"LLM API request failed with status {http_response.status_code}: {http_response.text}"
            )
            self.monitoring_manager.end_span(span, exc=RuntimeError(error_message))
            self.monitoring_manager.log_error(error_message, log_context)
            return {"status": "error", "data": None, "message": error_message}

        try:
            response_data = http_response.json()
            text_content = self._extract_text(response_data)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.monitoring_manager.end_span(span, exc=e)
            self.monitoring_manager.log_error(f"Unexpected LLM response envelope: {e}", log_context)
            return {"status": "error", "data": None, "message": f"Unexpected LLM response envelope: {e}"}

        if not text_content.strip():
            self.monitoring_manager.end_span(span, exc=ValueError("empty content"))
            self.monitoring_manager.log_error("LLM response missing content.", log_context)
            return {"status": "error", "data": None, "message": "LLM response missing content."}

        try:
            decoded = json.loads(text_content)
        except json.JSONDecodeError as e:
            self.monitoring_manager.end_span(span, exc=e)
            self.monitoring_manager.log_error(f"LLM reply is not valid JSON: {e}", log_context)
            return {"status": "error", "data": None, "message": f"LLM reply is not valid JSON: {e}"}

        self.monitoring_manager.end_span(span)
        return {
            "status": "success",
            "data": {"json": decoded, "text": text_content, "usage": self._usage(response_data)},
            "message": "",
        }

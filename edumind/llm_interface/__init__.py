# -*- coding: utf-8 -*-
"""LLM interface module (LLMInterface).

Hides the provider-specific HTTP details of the single structured-output
call used for plan generation.
"""
from .llm_interface import LLMInterface, to_json_schema

__all__ = ["LLMInterface", "to_json_schema"]

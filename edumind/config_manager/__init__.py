# -*- coding: utf-8 -*-
"""Configuration manager module (ConfigManager).

Single source of settings for the planner: LLM provider and credentials,
planning policy text, storage location and monitoring options.
"""
from .config_manager import ConfigManager

__all__ = ["ConfigManager"]

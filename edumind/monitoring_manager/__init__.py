# -*- coding: utf-8 -*-
"""Monitoring manager module (MonitoringManager).

Structured logging, optional Prometheus metrics and optional tracing.
"""
from .monitoring_manager import MonitoringManager, StructuredJsonFormatter

__all__ = ["MonitoringManager", "StructuredJsonFormatter"]

# -*- coding: utf-8 -*-
"""Planner module (PlannerModule).

Delegates study planning to the generative model and validates its reply;
PlanRequestLatch keeps at most one request in flight.
"""
from .plan_latch import LatchState, PlanRequestLatch
from .plan_schema import DEFAULT_POLICY_PROMPT, STUDY_PLAN_RESPONSE_SCHEMA
from .planner_module import PlannerModule

__all__ = [
    "DEFAULT_POLICY_PROMPT",
    "LatchState",
    "PlanRequestLatch",
    "PlannerModule",
    "STUDY_PLAN_RESPONSE_SCHEMA",
]

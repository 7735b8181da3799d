# -*- coding: utf-8 -*-
"""Planner module (PlannerModule) implementation.

Turns the pending tasks into a study plan by delegating the whole planning
policy to the generative model: it builds the prompt and the response
schema, sends one request through LLMInterface and validates the reply into
a StudyPlan. Nothing of the policy is computed or checked locally.
"""
import json
import time
from datetime import date
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from edumind.config_manager.config_manager import ConfigManager
from edumind.llm_interface.llm_interface import LLMInterface
from edumind.models import StudyPlan, Task
from edumind.monitoring_manager.monitoring_manager import MonitoringManager

from .plan_schema import DEFAULT_POLICY_PROMPT, STUDY_PLAN_RESPONSE_SCHEMA


class PlannerModule:
    def __init__(
        self,
        llm_interface: LLMInterface,
        config_manager: ConfigManager,
        monitoring_manager: MonitoringManager,
    ):
        self.llm_interface = llm_interface
        self.config_manager = config_manager
        self.monitoring_manager = monitoring_manager
        self.language = self.config_manager.get_config("planner.language", "Italiano")
        self.policy_prompt = self.config_manager.get_config("planner.policy_prompt", DEFAULT_POLICY_PROMPT)
        self.monitoring_manager.log_info("PlannerModule initialized.")

    def build_prompt(self, tasks: Sequence[Task], today: date) -> str:
        """
        Fills the policy template with the serialized tasks, today's date and
        the reply language.
        """
        tasks_json = json.dumps([t.to_storage_dict() for t in tasks], ensure_ascii=False)
        return self.policy_prompt.format(
            tasks_json=tasks_json,
            today=today.isoformat(),
            language=self.language,
        )

    def _record_outcome(self, outcome: str, started: float):
        self.monitoring_manager.record_metric(
            "edumind_plan_generation_seconds",
            time.monotonic() - started,
            metric_type="histogram",
            description="Duration of plan generation requests",
        )
        self.monitoring_manager.record_metric(
            "edumind_plan_generation_total",
            1,
            metric_type="counter",
            tags={"outcome": outcome},
            description="Plan generation requests by outcome",
        )

    def generate_study_plan(self, tasks: Sequence[Task], today: Optional[date] = None) -> Dict[str, Any]:
        """
        Generates sessions and reminders for ``tasks``.

        Args:
            tasks: The pending tasks. An empty sequence returns an empty plan
                   without contacting the model.
            today: Reference date written into the prompt (defaults to today).

        Returns:
            {"status": "success", "data": StudyPlan, "message": ""} or
            {"status": "error", "data": None, "message": "<reason>"}.
        """
        if not tasks:
            self.monitoring_manager.log_info("No pending tasks; returning an empty plan without calling the model.")
            return {"status": "success", "data": StudyPlan.empty(), "message": ""}

        today = today or date.today()
        log_context = {"task_count": len(tasks), "today": today.isoformat()}
        self.monitoring_manager.log_info("Generating study plan.", log_context)
        started = time.monotonic()

        try:
            prompt = self.build_prompt(tasks, today)
        except (KeyError, IndexError, ValueError) as e:
            self.monitoring_manager.log_error(f"Invalid planner.policy_prompt template: {e}", log_context)
            self._record_outcome("error", started)
            return {"status": "error", "data": None, "message": f"Invalid policy prompt template: {e}"}

        llm_response = self.llm_interface.generate_structured(
            prompt=prompt, response_schema=STUDY_PLAN_RESPONSE_SCHEMA
        )
        if llm_response.get("status") != "success":
            message = llm_response.get("message", "Unknown LLM error")
            self.monitoring_manager.log_error(f"Plan generation failed: {message}", log_context)
            self._record_outcome("error", started)
            return {"status": "error", "data": None, "message": message}

        try:
            plan = StudyPlan.model_validate(llm_response["data"]["json"])
        except ValidationError as e:
            self.monitoring_manager.log_error(
                "LLM reply does not match the study plan schema.",
                {**log_context, "errors": e.errors(include_url=False)},
            )
            self._record_outcome("invalid_reply", started)
            return {"status": "error", "data": None, "message": f"LLM reply does not match the schema: {e.error_count()} error(s)"}

        self._record_outcome("success", started)
        self.monitoring_manager.log_info(
            "Study plan generated.",
            {**log_context, "sessions": len(plan.sessions), "reminders": len(plan.reminders)},
        )
        return {"status": "success", "data": plan, "message": ""}

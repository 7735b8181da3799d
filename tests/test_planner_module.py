"""Unit tests for the PlannerModule class."""

import json
import unittest
from datetime import date
from unittest.mock import MagicMock

from edumind.config_manager.config_manager import ConfigManager
from edumind.llm_interface.llm_interface import LLMInterface
from edumind.models import Difficulty, Reminder, StudyPlan, StudySession, Task, TaskType
from edumind.monitoring_manager.monitoring_manager import MonitoringManager
from edumind.planner_module import STUDY_PLAN_RESPONSE_SCHEMA, PlannerModule


def llm_success(payload):
    return {"status": "success", "data": {"json": payload, "text": json.dumps(payload), "usage": {}}, "message": ""}


class TestPlannerModule(unittest.TestCase):
    """Tests for the PlannerModule."""

    def setUp(self):
        self.mock_llm_interface = MagicMock(spec=LLMInterface)
        self.mock_config_manager = MagicMock(spec=ConfigManager)
        self.mock_monitoring_manager = MagicMock(spec=MonitoringManager)
        self.settings = {"planner.language": "Italiano"}
        self.mock_config_manager.get_config.side_effect = lambda key, default=None: self.settings.get(key, default)

        self.planner_module = PlannerModule(
            llm_interface=self.mock_llm_interface,
            config_manager=self.mock_config_manager,
            monitoring_manager=self.mock_monitoring_manager,
        )
        self.task = Task(
            id="t1",
            title="Verifica di Chimica",
            subject="Chimica",
            due_date=date(2025, 6, 11),
            type=TaskType.EXAM,
            difficulty=Difficulty.EXPERT,
        )

    def test_initialization(self):
        self.assertIs(self.planner_module.llm_interface, self.mock_llm_interface)
        self.assertEqual(self.planner_module.language, "Italiano")
        self.mock_monitoring_manager.log_info.assert_any_call("PlannerModule initialized.")

    def test_generate_study_plan_empty_tasks_skips_model(self):
        result = self.planner_module.generate_study_plan([])

        self.assertEqual(result["status"], "success")
        self.assertEqual(result["data"], StudyPlan.empty())
        self.mock_llm_interface.generate_structured.assert_not_called()

    def test_build_prompt_contains_tasks_date_and_language(self):
        prompt = self.planner_module.build_prompt([self.task], date(2025, 6, 1))

        self.assertIn('"dueDate": "2025-06-11"', prompt)
        self.assertIn('"difficulty": 5', prompt)
        self.assertIn("2025-06-01", prompt)
        self.assertIn("Italiano", prompt)

    def test_generate_study_plan_success(self):
        reply = {
            "sessions": [
                {"id": "s1", "taskId": "t1", "date": "2025-06-05", "startTime": "15:00", "duration": 90, "topic": "Stechiometria"}
            ],
            "reminders": [{"id": "r1", "taskId": "t1", "date": "2025-06-10", "message": "Domani verifica!"}],
        }
        self.mock_llm_interface.generate_structured.return_value = llm_success(reply)

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "success")
        plan = result["data"]
        self.assertEqual(plan.sessions[0].task_id, "t1")
        self.assertEqual(plan.sessions[0].date, date(2025, 6, 5))
        self.assertEqual(plan.reminders[0].message, "Domani verifica!")
        self.mock_llm_interface.generate_structured.assert_called_once()
        kwargs = self.mock_llm_interface.generate_structured.call_args.kwargs
        self.assertIs(kwargs["response_schema"], STUDY_PLAN_RESPONSE_SCHEMA)
        self.assertIn("2025-06-01", kwargs["prompt"])
        self.mock_monitoring_manager.record_metric.assert_any_call(
            "edumind_plan_generation_total",
            1,
            metric_type="counter",
            tags={"outcome": "success"},
            description="Plan generation requests by outcome",
        )

    def test_generate_study_plan_llm_error(self):
        self.mock_llm_interface.generate_structured.return_value = {
            "status": "error",
            "data": None,
            "message": "LLM API request timed out.",
        }

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result, {"status": "error", "data": None, "message": "LLM API request timed out."})

    def test_generate_study_plan_reply_missing_field(self):
        self.mock_llm_interface.generate_structured.return_value = llm_success({"sessions": []})

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "error")
        self.assertTrue(result["message"].startswith("LLM reply does not match the schema"))

    def test_generate_study_plan_reply_bad_date(self):
        reply = {
            "sessions": [],
            "reminders": [{"id": "r1", "taskId": "t1", "date": "10/06/2025", "message": "x"}],
        }
        self.mock_llm_interface.generate_structured.return_value = llm_success(reply)

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "error")

    def test_response_schema_declares_what_the_plan_model_accepts(self):
        properties = STUDY_PLAN_RESPONSE_SCHEMA["properties"]
        session_item = properties["sessions"]["items"]
        reminder_item = properties["reminders"]["items"]

        self.assertEqual(session_item["properties"]["duration"]["type"], "INTEGER")
        for item in (session_item, reminder_item):
            self.assertIn("YYYY-MM-DD", item["properties"]["date"]["description"])
        self.assertEqual(
            set(session_item["required"]), {f.alias for f in StudySession.model_fields.values()}
        )
        self.assertEqual(
            set(reminder_item["required"]), {f.alias for f in Reminder.model_fields.values()}
        )

    def test_schema_conforming_reply_validates(self):
        reply = {
            "sessions": [
                {"id": "s1", "taskId": "t1", "date": "2025-06-05", "startTime": "15:00", "duration": 60, "topic": "A"},
                {"id": "s2", "taskId": "t1", "date": "2025-06-07", "startTime": "09:30", "duration": 120, "topic": "B"},
            ],
            "reminders": [{"id": "r1", "taskId": "t1", "date": "2025-06-04", "message": "Tra una settimana"}],
        }
        self.mock_llm_interface.generate_structured.return_value = llm_success(reply)

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "success")
        self.assertEqual([s.duration for s in result["data"].sessions], [60, 120])

    def test_fractional_duration_violates_declared_integer(self):
        reply = {
            "sessions": [
                {"id": "s1", "taskId": "t1", "date": "2025-06-05", "startTime": "15:00", "duration": 90.5, "topic": "A"}
            ],
            "reminders": [],
        }
        self.mock_llm_interface.generate_structured.return_value = llm_success(reply)

        result = self.planner_module.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "error")

    def test_invalid_policy_template(self):
        self.settings["planner.policy_prompt"] = "Compiti: {tasks} {unknown}"
        planner = PlannerModule(
            llm_interface=self.mock_llm_interface,
            config_manager=self.mock_config_manager,
            monitoring_manager=self.mock_monitoring_manager,
        )

        result = planner.generate_study_plan([self.task], today=date(2025, 6, 1))

        self.assertEqual(result["status"], "error")
        self.mock_llm_interface.generate_structured.assert_not_called()


if __name__ == "__main__":
    unittest.main()

# -*- coding: utf-8 -*-
"""EduMind: study planner with AI-generated study sessions and reminders."""

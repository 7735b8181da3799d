# -*- coding: utf-8 -*-
"""Prompt text and response schema sent with every plan request."""

# Used when ``planner.policy_prompt`` is not configured. Placeholders:
# {tasks_json}, {today}, {language}.
DEFAULT_POLICY_PROMPT = """
Analizza i seguenti compiti scolastici e genera un piano di studio completo.
Compiti: {tasks_json}

Per ogni compito, calcola:
1. Sessioni di Studio: In base alla difficoltà (1-5), assegna da 1 a 5 sessioni di studio (60-120 min), distribuite nei giorni precedenti la scadenza.
2. Promemoria Intelligenti: Imposta avvisi basati sulla difficoltà.
   - Difficoltà 1-2: 1 giorno prima.
   - Difficoltà 3-4: 3 giorni e 1 giorno prima.
   - Difficoltà 5: 7 giorni, 3 giorni e 1 giorno prima.

Data Corrente: {today}
Lingua: {language}.

Ritorna SOLO un oggetto JSON che segua questo schema.
"""

_ISO_DATE = {"type": "STRING", "description": "Data in formato ISO YYYY-MM-DD"}

_SESSION_ITEM = {
    "type": "OBJECT",
    "properties": {
        "id": {"type": "STRING"},
        "taskId": {"type": "STRING"},
        "date": _ISO_DATE,
        "startTime": {"type": "STRING", "description": "Ora di inizio HH:MM"},
        "duration": {"type": "INTEGER", "description": "Minuti"},
        "topic": {"type": "STRING"},
    },
    "required": ["id", "taskId", "date", "startTime", "duration", "topic"],
}

_REMINDER_ITEM = {
    "type": "OBJECT",
    "properties": {
        "id": {"type": "STRING"},
        "taskId": {"type": "STRING"},
        "date": _ISO_DATE,
        "message": {"type": "STRING"},
    },
    "required": ["id", "taskId", "date", "message"],
}

STUDY_PLAN_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "sessions": {"type": "ARRAY", "items": _SESSION_ITEM},
        "reminders": {"type": "ARRAY", "items": _REMINDER_ITEM},
    },
    "required": ["sessions", "reminders"],
}

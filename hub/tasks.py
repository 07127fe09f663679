from __future__ import annotations

import copy
from typing import Dict, List


# Served verbatim to the web frontend and the Alexa skill.
DEFAULT_TASKS: List[Dict[str, str]] = [
    {
        "id": "t1",
        "title": "Morning Routine",
        "icon": "☀️",
        "description": "Start your day right",
        "category": "routine",
        "voiceCommand": "start my morning routine",
    },
    {
        "id": "t2",
        "title": "Grocery List",
        "icon": "🛒",
        "description": "Manage shopping items",
        "category": "list",
        "voiceCommand": "open my grocery list",
    },
    {
        "id": "t3",
        "title": "Medication Reminder",
        "icon": "💊",
        "description": "Never miss a dose",
        "category": "health",
        "voiceCommand": "set medication reminder",
    },
    {
        "id": "t4",
        "title": "Control Lights",
        "icon": "💡",
        "description": "Smart home controls",
        "category": "home",
        "voiceCommand": "turn off the lights",
    },
    {
        "id": "t5",
        "title": "Privacy Dashboard",
        "icon": "🛡️",
        "description": "Manage your data",
        "category": "privacy",
        "voiceCommand": "show privacy settings",
    },
    {
        "id": "t6",
        "title": "Evening Routine",
        "icon": "🌙",
        "description": "Wind down for the night",
        "category": "routine",
        "voiceCommand": "start evening routine",
    },
]


def default_tasks() -> List[Dict[str, str]]:
    return copy.deepcopy(DEFAULT_TASKS)

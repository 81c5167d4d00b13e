"""
Response schema for the analyzeBehavior task.

Gemini is constrained to emit JSON of this shape. The schema is passed through
to the API untouched; the server never validates model output against it.
"""

import copy
from typing import Any, Dict, Optional

# Gemini schema type names
OBJECT = "OBJECT"
STRING = "STRING"
NUMBER = "NUMBER"
ARRAY = "ARRAY"


def _string(description: Optional[str] = None) -> Dict[str, Any]:
    field = {"type": STRING}
    if description:
        field["description"] = description
    return field


def _score(label: str) -> Dict[str, Any]:
    return {"type": NUMBER, "description": f"0-5 scale for {label}"}


ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": OBJECT,
    "properties": {
        "summary": {
            "type": OBJECT,
            "properties": {
                "behavior": _string("Object summary of the behavior"),
                "emotionalInterpretation": _string("Separated emotional interpretation"),
            },
            "required": ["behavior", "emotionalInterpretation"],
        },
        "functionAnalysis": {
            "type": OBJECT,
            "properties": {
                "scores": {
                    "type": OBJECT,
                    "properties": {
                        "escape": _score("Escape"),
                        "attention": _score("Attention"),
                        "tangible": _score("Tangible"),
                        "sensory": _score("Sensory"),
                    },
                    "required": ["escape", "attention", "tangible", "sensory"],
                },
                "mainFunctionExplanation": _string(
                    "Detailed explanation of the highest scoring function"
                ),
            },
            "required": ["scores", "mainFunctionExplanation"],
        },
        "mechanism": {
            "type": OBJECT,
            "properties": {
                "triggers": _string("Antecedent/Triggers"),
                "consequences": _string("Consequences"),
                "pattern": _string("Repeated pattern"),
            },
            "required": ["triggers", "consequences", "pattern"],
        },
        "preventionStrategies": {
            "type": ARRAY,
            "items": _string(),
            "description": "List of 5-8 prevention strategies",
        },
        "teachingSkills": {
            "type": ARRAY,
            "items": {
                "type": OBJECT,
                "properties": {
                    "skill": _string(),
                    "script": _string("Example script for parents"),
                },
                "required": ["skill", "script"],
            },
        },
        "consequenceStrategies": {
            "type": OBJECT,
            "properties": {
                "reinforce": _string(),
                "ignore": _string(),
                "natural": _string(),
                "safety": _string(),
            },
            "required": ["reinforce", "ignore", "natural", "safety"],
        },
        "commonMistakes": {
            "type": ARRAY,
            "items": {
                "type": OBJECT,
                "properties": {
                    "mistake": _string(),
                    "reason": _string(),
                },
                "required": ["mistake", "reason"],
            },
        },
        "checklist": {
            "type": OBJECT,
            "properties": {
                "items": {
                    "type": ARRAY,
                    "items": _string(),
                    "description": "Items to track for 7 days",
                },
                "goal": _string("Goal (frequency/duration etc)"),
                "successCriteria": _string("Success criteria"),
            },
            "required": ["items", "goal", "successCriteria"],
        },
        "redFlags": {
            "type": ARRAY,
            "items": _string(),
            "description": "Red flags requiring professional help",
        },
        "closingComment": _string("Warm closing encouragement"),
    },
    "required": [
        "summary",
        "functionAnalysis",
        "mechanism",
        "preventionStrategies",
        "teachingSkills",
        "consequenceStrategies",
        "commonMistakes",
        "checklist",
        "redFlags",
        "closingComment",
    ],
}


def get_analysis_schema() -> Dict[str, Any]:
    """Return a private copy of ANALYSIS_SCHEMA for one outbound request."""
    return copy.deepcopy(ANALYSIS_SCHEMA)

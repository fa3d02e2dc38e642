#!/usr/bin/env python3
"""
Generate sample_responses.json for the pure rule evaluator.
Runs in-memory (no DB/API needed).
Usage: python scripts/generate_sample_responses.py
"""

import json
import sys
from pathlib import Path

# Add project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from releasegate.engine.rules import RULE_SET_VERSION, evaluate_project_rules
from releasegate.schemas.rules import RuleInputs
from releasegate.utils.canonical import snapshot_hash

SETTINGS = {"min_sentiment": 50, "auto_release_days": 7}

# One scenario per rule in the table
SCENARIOS = [
    {"name": "underfunded", "wallet_balance": 400, "budget_required": 500},
    {"name": "active dispute", "dispute_active": True, "file_uploaded": True},
    {"name": "no work, unhappy client", "client_sentiment": 20},
    {"name": "waiting for delivery"},
    {"name": "client silent after delivery", "file_uploaded": True, "days_since_submission": 7},
    {"name": "delivered, unhappy client", "file_uploaded": True, "client_sentiment": 30},
    {"name": "delivered, happy client", "file_uploaded": True, "days_since_submission": 2},
]

BASE_INPUTS = {
    "project_status": "active",
    "wallet_balance": 500,
    "budget_required": 500,
    "file_uploaded": False,
    "client_sentiment": 80,
    "dispute_active": False,
    "days_since_submission": 0,
    "settings": SETTINGS,
}


def main():
    examples_dir = Path(__file__).resolve().parent.parent / "examples"
    examples_dir.mkdir(exist_ok=True)
    responses_path = examples_dir / "sample_responses.json"

    responses = []
    for scenario in SCENARIOS:
        fields = {k: v for k, v in scenario.items() if k != "name"}
        inputs = RuleInputs(**{**BASE_INPUTS, **fields})
        outcome = evaluate_project_rules(inputs)
        responses.append(
            {
                "scenario": scenario["name"],
                "rule_set_version": RULE_SET_VERSION,
                "input_hash": snapshot_hash(inputs.model_dump(mode="json")),
                "inputs": inputs.model_dump(mode="json"),
                "outcome": outcome.model_dump(mode="json"),
            }
        )

    with open(responses_path, "w") as f:
        json.dump(responses, f, indent=2)

    print(f"Generated {len(responses)} sample responses -> {responses_path}")


if __name__ == "__main__":
    main()

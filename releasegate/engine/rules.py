"""Rule evaluator - ordered, first-match-wins release policy. No I/O."""

from releasegate.schemas.rules import Decision, RuleInputs, RuleOutcome
from releasegate.utils.canonical import format_number

RULE_SET_VERSION = "2.0.0"

# Half a currency unit of slack for rounding in wallet balances
FUNDING_TOLERANCE = 0.5

RULE_IDS = frozenset(
    {
        "R01_INSUFFICIENT_FUNDS",
        "R02_ACTIVE_DISPUTE",
        "R03_NO_WORK_BAD_SENTIMENT",
        "R04_WAITING_DELIVERY",
        "R05_SILENCE_TIMEOUT",
        "R06_BAD_SENTIMENT_CHECK",
        "R07_STANDARD_RELEASE",
        "R99_UNKNOWN_STATE",
    }
)


def _outcome(
    decision: Decision, rule_id: str, reason: str, confidence: int, risk_score: int
) -> RuleOutcome:
    return RuleOutcome(
        decision=decision,
        rule_id=rule_id,
        reason=reason,
        confidence=confidence,
        risk_score=risk_score,
    )


def evaluate_project_rules(inputs: RuleInputs) -> RuleOutcome:
    """
    Evaluate the release policy against a snapshot of project state.
    Rules are checked in order and the first match wins.
    Out-of-range values are not clamped; they flow through the comparisons.
    """
    settings = inputs.settings

    # Funding gate
    if inputs.wallet_balance < inputs.budget_required - FUNDING_TOLERANCE:
        return _outcome(
            Decision.PENDING,
            "R01_INSUFFICIENT_FUNDS",
            f"Wallet balance ({format_number(inputs.wallet_balance)}) below required budget.",
            100,
            0,
        )

    # Dispute gate
    if inputs.dispute_active:
        return _outcome(
            Decision.DISPUTE,
            "R02_ACTIVE_DISPUTE",
            "Project is flagged with an active dispute.",
            100,
            100,
        )

    # No work delivered yet
    if not inputs.file_uploaded:
        if inputs.client_sentiment < settings.min_sentiment:
            return _outcome(
                Decision.HOLD,
                "R03_NO_WORK_BAD_SENTIMENT",
                "No work submitted and negative client sentiment.",
                80,
                80,
            )
        return _outcome(
            Decision.PENDING,
            "R04_WAITING_DELIVERY",
            "Funds secured, waiting for deliverable.",
            100,
            10,
        )

    # Work delivered, under review
    if inputs.file_uploaded:
        if inputs.days_since_submission >= settings.auto_release_days:
            return _outcome(
                Decision.RELEASE,
                "R05_SILENCE_TIMEOUT",
                f"Auto-release: No feedback for {format_number(settings.auto_release_days)} days.",
                95,
                5,
            )
        if inputs.client_sentiment < settings.min_sentiment:
            return _outcome(
                Decision.HOLD,
                "R06_BAD_SENTIMENT_CHECK",
                "Work submitted but client unhappy. Manual review required.",
                70,
                65,
            )
        return _outcome(
            Decision.RELEASE,
            "R07_STANDARD_RELEASE",
            "Funds match, File exists, Sentiment positive.",
            90,
            0,
        )

    return _outcome(
        Decision.HOLD,
        "R99_UNKNOWN_STATE",
        "Unknown state combination.",
        0,
        50,
    )

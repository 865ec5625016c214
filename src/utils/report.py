"""Plain-text rendering of calculator results."""

from typing import Optional

from src.core.bilirubin.age import split_age
from src.core.bilirubin.models import Evaluation
from src.utils.preprocessing import to_persian_digits


def _num(value, localized: bool) -> str:
    return to_persian_digits(value) if localized else ("-" if value is None else str(value))


def format_age(hours: Optional[int], localized: bool = False) -> str:
    """'<hours>H <days> days and <hours> hours', or '-' without an age."""
    if hours is None:
        return "-"
    days, remainder = split_age(hours)
    return (
        f"{_num(hours, localized)}H {_num(days, localized)} days "
        f"and {_num(remainder, localized)} hours"
    )


def format_evaluation(evaluation: Evaluation, localized: bool = False) -> str:
    """Render the result cards and recommendation block."""
    recommendation = evaluation.recommendation
    if recommendation is None:
        return ""

    lines = [f"[{recommendation.severity.value}] {recommendation.title}"]
    for action in recommendation.actions:
        lines.append(f"  - {action}")
    if recommendation.detail:
        lines.append(f"  {recommendation.detail}")

    cards = evaluation.cards
    if cards is not None:
        lines = [
            f"Phototherapy threshold: {_num(cards.phototherapy, localized)} mg/dL",
            f"Escalation threshold:   {_num(cards.escalation, localized)} mg/dL",
            f"Exchange threshold:     {_num(cards.exchange, localized)} mg/dL",
            "",
        ] + lines

    return "\n".join(lines)

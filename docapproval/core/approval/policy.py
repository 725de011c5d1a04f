"""Approval policy evaluation.

Turns a tally of votes into a document status according to the active
``ApprovalConfig``. Evaluation is pure: no I/O, no memory between calls.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, Optional

from .errors import PolicyConfigurationError
from .states import ApprovalMode, DocumentStatus, VoteDecision


@dataclass(frozen=True)
class ApprovalConfig:
    """
    Active approval configuration.

    ``threshold_value`` is a raw approval count for MIN_VOTES and a
    percentage (0-100) for MIN_PERCENTAGE. Other modes ignore it.
    ``comments_required`` is enforced by the voting surface, not here.
    """
    mode: ApprovalMode = ApprovalMode.MAJORITY
    threshold_value: int = 0
    comments_required: bool = False

    def __post_init__(self):
        try:
            object.__setattr__(self, "mode", ApprovalMode(self.mode))
        except ValueError:
            raise PolicyConfigurationError(f"Unknown approval mode: {self.mode!r}")
        validate_config(self)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


@dataclass(frozen=True)
class VoteTally:
    """Counts the policy needs, derived from the current vote set."""
    approve_count: int
    reject_count: int
    total_votes_cast: int
    total_eligible_approvers: int

    @classmethod
    def from_votes(cls, votes: Iterable[Any], total_eligible_approvers: int) -> "VoteTally":
        """Build a tally from vote objects carrying a ``decision`` attribute."""
        approve = reject = 0
        for vote in votes:
            if VoteDecision(vote.decision) == VoteDecision.APPROVE:
                approve += 1
            else:
                reject += 1
        return cls(
            approve_count=approve,
            reject_count=reject,
            total_votes_cast=approve + reject,
            total_eligible_approvers=total_eligible_approvers,
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def validate_config(config: ApprovalConfig) -> None:
    """Reject thresholds that can never be interpreted.

    Raises:
        PolicyConfigurationError: If the threshold is out of range for the mode
    """
    if config.threshold_value < 0:
        raise PolicyConfigurationError(
            f"threshold_value must be >= 0, got {config.threshold_value}"
        )
    if config.mode == ApprovalMode.MIN_PERCENTAGE and config.threshold_value > 100:
        raise PolicyConfigurationError(
            f"threshold_value for {config.mode.value} must be within 0-100, got {config.threshold_value}"
        )


def _evaluate_majority(tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
    # Quorum over eligible approvers, not votes cast
    half = tally.total_eligible_approvers / 2.0
    if tally.approve_count > half:
        return DocumentStatus.APPROVED
    if tally.reject_count >= half:
        return DocumentStatus.REJECTED
    return DocumentStatus.PENDING


def _evaluate_unanimous(tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
    if tally.approve_count == tally.total_eligible_approvers:
        return DocumentStatus.APPROVED
    if tally.reject_count > 0:
        return DocumentStatus.REJECTED
    return DocumentStatus.PENDING


def _evaluate_min_votes(tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
    if tally.approve_count >= config.threshold_value:
        return DocumentStatus.APPROVED
    everyone_voted = tally.total_votes_cast == tally.total_eligible_approvers
    if everyone_voted and tally.approve_count < config.threshold_value:
        return DocumentStatus.REJECTED
    return DocumentStatus.PENDING


def _evaluate_min_percentage(tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
    percentage = tally.approve_count / tally.total_eligible_approvers * 100
    if percentage >= config.threshold_value:
        return DocumentStatus.APPROVED
    everyone_voted = tally.total_votes_cast == tally.total_eligible_approvers
    if everyone_voted and percentage < config.threshold_value:
        return DocumentStatus.REJECTED
    return DocumentStatus.PENDING


MODE_EVALUATORS: Dict[ApprovalMode, Callable[[VoteTally, ApprovalConfig], DocumentStatus]] = {
    ApprovalMode.MAJORITY: _evaluate_majority,
    ApprovalMode.UNANIMOUS: _evaluate_unanimous,
    ApprovalMode.MIN_VOTES: _evaluate_min_votes,
    ApprovalMode.MIN_PERCENTAGE: _evaluate_min_percentage,
}


class ApprovalPolicy:
    """
    Evaluates a vote tally against the approval configuration.

    Returns one of:
    - APPROVED: the configured condition for approval is met
    - REJECTED: approval is no longer reachable under the mode's rule
    - PENDING: neither, keep collecting votes

    With zero eligible approvers the result is always PENDING.
    """

    def __init__(self, evaluators: Optional[Dict[ApprovalMode, Callable]] = None):
        self._evaluators = dict(evaluators or MODE_EVALUATORS)

    def evaluate(self, tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
        """
        Decide the document status for the given tally.

        Args:
            tally: Counts derived from the document's current votes
            config: Active approval configuration

        Returns:
            The policy outcome

        Raises:
            PolicyConfigurationError: If the mode is unknown or the config is invalid
        """
        evaluator = self._evaluators.get(config.mode)
        if evaluator is None:
            raise PolicyConfigurationError(f"Unknown approval mode: {config.mode!r}")
        validate_config(config)

        if tally.total_eligible_approvers < 0:
            raise PolicyConfigurationError(
                f"total_eligible_approvers must be >= 0, got {tally.total_eligible_approvers}"
            )
        if tally.total_eligible_approvers == 0:
            return DocumentStatus.PENDING

        return evaluator(tally, config)


def evaluate(tally: VoteTally, config: ApprovalConfig) -> DocumentStatus:
    """Evaluate with the default mode table."""
    return ApprovalPolicy().evaluate(tally, config)

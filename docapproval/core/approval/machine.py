"""Document status state machine.

Validates transitions out of review and builds the record written to the
document history table.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any
from uuid import UUID

from .states import (
    DocumentStatus,
    DocumentTransition,
    get_transition_rule,
)


class TransitionError(Exception):
    """Raised when a state transition is invalid."""

    def __init__(self, message: str, from_state: DocumentStatus, transition: DocumentTransition):
        super().__init__(message)
        self.from_state = from_state
        self.transition = transition


class DocumentStateMachine:
    """State machine for a single document under review."""

    def __init__(self, document_id: UUID, current_state: DocumentStatus):
        """
        Initialize the state machine.

        Args:
            document_id: ID of the document
            current_state: Current review status
        """
        self.document_id = document_id
        self._state = DocumentStatus(current_state)

    @property
    def state(self) -> DocumentStatus:
        """Current status of the document."""
        return self._state

    def transition(
        self,
        transition: DocumentTransition,
        *,
        user_id: Optional[UUID] = None,
        comment: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Perform a state transition.

        Args:
            transition: The transition to perform
            user_id: ID of the user whose vote caused the transition
            comment: Optional note for the audit trail
            metadata: Additional metadata to record

        Returns:
            The transition record

        Raises:
            TransitionError: If the transition is invalid
        """
        rule = get_transition_rule(self._state, transition)
        if rule is None:
            raise TransitionError(
                f"Cannot perform {transition.value} from state {self._state.value}",
                self._state,
                transition,
            )

        record = {
            "id": uuid.uuid4(),
            "document_id": self.document_id,
            "from_state": self._state.value,
            "to_state": rule.to_state.value,
            "transition": transition.value,
            "user_id": user_id,
            "comment": comment,
            "metadata": metadata or {},
            "timestamp": datetime.utcnow(),
        }
        self._state = rule.to_state
        return record

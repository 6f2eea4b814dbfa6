from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import ApprovalStatus, ReviewPriority
from ...validation.validator import ValidationResult


@dataclass(frozen=True)
class AdmissionDecision:
    approval_status: ApprovalStatus
    priority: Optional[ReviewPriority] = None

    @property
    def needs_review(self) -> bool:
        return self.approval_status == ApprovalStatus.PENDING


class AdmissionStrategy(ABC):
    """Strategy Pattern: decide what happens to a scored attendance attempt."""

    @abstractmethod
    def decide(self, result: ValidationResult) -> AdmissionDecision:
        raise NotImplementedError

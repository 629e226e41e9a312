"""Pydantic schemas for the calculation result handed to presentation, persistence and email"""

import hashlib
import json
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

CalculationType = Literal[
    "bond",
    "transfer",
    "eligibility",
    "additional-payment",
    "amortisation",
    "affordability",
    "deposit",
    "comparison",
]


class DisplayItem(BaseModel):
    """Single formatted line of a result summary"""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    tooltip: Optional[str] = None


class CalculationResult(BaseModel):
    """
    Output of one engine call.

    ``inputs`` and ``outputs`` are stored verbatim so a persisted record never
    needs re-deriving; ``display_results`` is the flattened, already
    formatted list that email and summary views render as-is.
    """

    model_config = ConfigDict(frozen=True)

    calculation_type: CalculationType
    inputs: Dict[str, Any]
    outputs: Dict[str, Any]
    display_results: List[DisplayItem] = Field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        """Opaque persistence record keyed by calculation type"""
        return {
            "calculation_type": self.calculation_type,
            "input": self.inputs,
            "output": self.outputs,
        }

    def fingerprint(self) -> str:
        """Stable hash of the record, used to skip saving unchanged results"""
        payload = json.dumps(self.to_record(), sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def should_persist(last_fingerprint: Optional[str], result: CalculationResult) -> Tuple[bool, str]:
    """
    Decide whether ``result`` differs from the last saved one.

    Returns the new fingerprint alongside the decision; the caller keeps it
    and passes it back in next time.
    """
    current = result.fingerprint()
    return current != last_fingerprint, current

"""
Error taxonomy for the progression and assessment engines.

Every error carries the documented API error code so the HTTP layer can
translate it verbatim. Errors are deterministic and are raised, never logged
or swallowed, by the engine.
"""

from typing import Any, Dict, List, Optional, Sequence


class ProgressionEngineError(Exception):
    """Base class for all engine errors."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def details(self) -> Dict[str, Any]:
        """Structured payload surfaced next to the error code."""
        return {}


class CycleError(ProgressionEngineError):
    """The prerequisite graph contains a cycle."""

    code = "CIRCULAR_PREREQUISITE"

    def __init__(self, cycle: Sequence[str]):
        self.cycle: List[str] = list(cycle)
        super().__init__(
            "Prerequisites would create circular dependency: " + " -> ".join(self.cycle)
        )

    def details(self) -> Dict[str, Any]:
        return {"cycle": self.cycle}


class DanglingRefError(ProgressionEngineError):
    """A prerequisite, gate or prescribed-order entry references an unknown id."""

    code = "INVALID_PREREQUISITE"

    def __init__(self, module_id: str, target_id: str, kind: str = "module"):
        self.module_id = module_id
        self.target_id = target_id
        self.kind = kind
        if kind == "module":
            message = f"Prerequisite module {target_id} of module {module_id} does not exist in this course"
        else:
            message = f"Module {module_id} references unknown {kind} {target_id}"
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"module_id": self.module_id, "target_id": self.target_id, "kind": self.kind}


class InvalidCriteriaConfigError(ProgressionEngineError):
    """Completion criteria or presentation rules are incomplete or inconsistent."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"field": self.field}


class ReorderError(ProgressionEngineError):
    """A reorder request does not list exactly the modules of the course."""

    MISSING_MODULES = "MISSING_MODULES"
    INVALID_MODULE = "INVALID_MODULE"

    def __init__(self, code: str, module_ids: Sequence[str]):
        self.module_ids = sorted(module_ids)
        if code == self.INVALID_MODULE:
            message = "Module does not belong to this course: " + ", ".join(self.module_ids)
        else:
            message = "Not all course modules included: " + ", ".join(self.module_ids)
        super().__init__(message, code=code)

    def details(self) -> Dict[str, Any]:
        return {"module_ids": self.module_ids}


class InsufficientQuestionsError(ProgressionEngineError):
    """The filtered question pool is smaller than the requested count."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        if available == 0:
            super().__init__("No questions available for the selection", code="NO_QUESTIONS")
        else:
            super().__init__(
                f"Not enough questions in banks for requested count ({available} < {required})",
                code="INSUFFICIENT_QUESTIONS",
            )

    def details(self) -> Dict[str, Any]:
        return {"available": self.available, "required": self.required}


class QuestionBankNotFoundError(ProgressionEngineError):
    """One or more referenced question banks are missing or inactive."""

    code = "INVALID_QUESTION_BANK"

    def __init__(self, bank_ids: Sequence[str]):
        self.bank_ids = list(bank_ids)
        super().__init__("One or more question banks do not exist: " + ", ".join(self.bank_ids))

    def details(self) -> Dict[str, Any]:
        return {"bank_ids": self.bank_ids}


class ActiveAttemptsError(ProgressionEngineError):
    """An assessment cannot be changed while attempts reference it."""

    HAS_ACTIVE_ATTEMPTS = "HAS_ACTIVE_ATTEMPTS"
    HAS_ATTEMPTS = "HAS_ATTEMPTS"

    def __init__(self, action: str, attempt_ids: Sequence[str], code: str = HAS_ACTIVE_ATTEMPTS):
        self.action = action
        self.attempt_ids = list(attempt_ids)
        if code == self.HAS_ATTEMPTS:
            message = f"Cannot {action} assessment with existing attempts"
        else:
            message = f"Cannot {action} assessment with active attempts"
        super().__init__(message, code=code)

    def details(self) -> Dict[str, Any]:
        return {"action": self.action, "attempt_ids": self.attempt_ids}

# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Well-formedness checks for declaration corpora (optional ordering, literal unions, links, etc.)."""

from catsdecl.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]

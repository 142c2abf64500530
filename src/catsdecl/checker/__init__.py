# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Call-site type checking against a declaration corpus."""

from catsdecl.checker.assignability import is_assignable
from catsdecl.checker.calls import Call, CallDiagnostic, check_call, check_value, parse_call, parse_value

__all__ = [
    "Call",
    "CallDiagnostic",
    "check_call",
    "check_value",
    "is_assignable",
    "parse_call",
    "parse_value",
]

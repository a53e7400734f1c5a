"""Shared type aliases for pipeline modules."""

from __future__ import annotations

from typing import Literal

type FailurePolicy = Literal["abort", "continue"]

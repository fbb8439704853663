"""Validators — Checks on cleaning runs."""

from twclean.validate.idempotence import IdempotenceValidator, check_idempotent

__all__ = ["IdempotenceValidator", "check_idempotent"]

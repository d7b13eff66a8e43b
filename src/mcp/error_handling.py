"""Consistent error handling for MCP tool functions."""

from __future__ import annotations

import functools
import logging
from typing import Callable

from pydantic import ValidationError

from src.core.money import InvalidAmount
from src.core.plan_store import PlanStoreError

logger = logging.getLogger("budget_mcp")


def handle_tool_errors(fn: Callable) -> Callable:
    """Decorator that catches known exceptions and returns user-friendly error strings.

    MCP tools must return ``str``, not raise.  This ensures all tools
    follow that contract without duplicating try/except blocks.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except InvalidAmount as e:
            return f"Invalid amount: {e}"
        except PlanStoreError as e:
            return f"Plan file error: {e.detail} ({e.path})"
        except ValidationError as e:
            return f"Invalid data: {e.error_count()} validation error(s). Check your plan file or input."
        except Exception as e:
            logger.exception("Unexpected error in tool %s", fn.__name__)
            return f"Unexpected error: {type(e).__name__}: {e}"

    return wrapper

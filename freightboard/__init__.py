"""Mini README: Core package initializer for the Freightboard finance engine.

Freightboard turns snapshots of dispatch-board finance records (load
payments, fixed and variable expenses, driver pay and custom income) into a
cash-flow projection. The heavy lifting lives in ``freightboard.finance``;
this module only exposes the logging helper shared by every sub-package.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]

"""
commission_services -- orchestration over the commission kernel.

``CommissionCalculator`` drives records through the kernel one at a time and
owns the per-run weekly history. ``cli`` is the command-line entrypoint.
"""

from commission_services.calculator import CommissionCalculator, CommissionOutcome, OnError

__all__ = [
    "CommissionCalculator",
    "CommissionOutcome",
    "OnError",
]

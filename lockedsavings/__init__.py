"""
Locked Savings - Term Deposit Engine

Accrual and settlement for fixed-term savings accounts: a customer locks a
principal for a chosen period at a fixed annual rate and is paid principal
plus simple interest at maturity, or principal minus a penalty on early exit.

DESIGN PRINCIPLES:
1. Money is Decimal, rounded only where it leaves the engine
2. A withdrawal pays out exactly once
3. Time is an argument, never a timer
4. Every deposit and payout is auditable
5. Storage layer is swappable

Entry point: lockedsavings.settlement.SettlementService
"""

__version__ = "1.0.0"
__author__ = "Locked Savings Team"

"""Test helpers module for shared test utilities.

- constants: Asset and account addresses, common amounts
- factories: Manager construction and account funding
"""

from tests.helpers.constants import ALICE, BOB, CAROL, DAI, FUNDING, ONE, USDC, WETH
from tests.helpers.factories import fund, make_funded_pool, make_manager, mover_of

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "ALICE",
    "BOB",
    "CAROL",
    "ONE",
    "FUNDING",
    # Factories
    "fund",
    "make_funded_pool",
    "make_manager",
    "mover_of",
]

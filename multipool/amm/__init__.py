"""AMM pricing math."""

from multipool.amm.constant_product import ConstantProduct, DepositQuote, constant_product

__all__ = ["ConstantProduct", "DepositQuote", "constant_product"]

"""
Portfolio tracker: portfolios of debit/credit transactions with a
reconciling working copy, served over the Model Context Protocol.
"""

__version__ = "0.1.0"

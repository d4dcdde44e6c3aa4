"""
BUIDL Token Ledger

An in-process ERC-20 style token ledger:
- Balances, allowances and total supply with conservation checks
- Typed error taxonomy instead of revert-string matching
- A request boundary that decodes caller-native amounts and addresses
- A click CLI for demos and scripted replays
"""

__version__ = "0.1.0"

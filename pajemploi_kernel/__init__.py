"""
Pajemploi Kernel

Shared foundation for the declaration engine:
- Typed exceptions with machine-readable codes
- Structured JSON logging
- Domain values: ISO date keys, day states, childcare contracts
"""

__version__ = "0.1.0"

"""
FPL Transfer Engine Package

Squad and transfer optimization engine for Fantasy Premier League managers.
Selects the best starting XI from a 15-man squad, ranks expendable players,
builds legal replacement pools, suggests single swaps, chains greedy
multi-transfer plans (with or without point hits) and constructs wildcard
line-ups from the whole player universe.
"""

__version__ = "0.3.0"

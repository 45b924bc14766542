"""Pure roster rules: ranks, roles, scope kinds, eligibility, fairness.

Nothing here touches files, logging, or the snapshot store; functions take
models and return values, so every rule can be tested in isolation.
"""

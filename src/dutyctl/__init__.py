"""dutyctl: duty-roster scope, eligibility, and fairness toolkit."""

__version__ = "0.4.0"

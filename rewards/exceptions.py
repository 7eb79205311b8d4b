"""Rewards tracker exceptions."""


class RewardsError(Exception):
    pass


class ValidationError(RewardsError):
    """Rejected input. Raised before anything is written."""


class StoreError(RewardsError):
    """The ledger store could not complete a read or write."""

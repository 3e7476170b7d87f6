"""
Error taxonomy shared by the coordinator, creation and the HTTP layer.

NotFound and InvalidParticipant are deterministic and never retried.
TransientFailure subclasses come out of the transaction runner once its
retries are exhausted.
"""


class BailoutError(RuntimeError):
    pass


class NotFound(BailoutError):
    """Plan does not exist or is past the expiry window."""


class InvalidParticipant(BailoutError):
    """Plan is live but the secret matches none of its participants."""


class InvalidPlanRequest(BailoutError, ValueError):
    pass


class TransientFailure(BailoutError):
    pass


class TransactionConflict(TransientFailure):
    """The transaction kept losing to concurrent writers."""


class StorageUnavailable(TransientFailure):
    pass

"""Exception hierarchy for the snapshot pipeline."""


class SnapshotError(Exception):
    """Base class for every error raised by the pipeline."""


class ResolutionError(SnapshotError):
    """No usable homepage could be identified for the company."""


class DeliveryError(SnapshotError):
    """The report could not be handed to the email transport."""


class DeadlineExceededError(SnapshotError):
    """The run exceeded its configured overall deadline."""


class CollaboratorError(SnapshotError):
    """An external service call failed."""


class SearchError(CollaboratorError):
    pass


class ExtractionError(CollaboratorError):
    pass


class FetchError(CollaboratorError):
    pass


class PostFetchError(CollaboratorError):
    pass


class GenerationError(CollaboratorError):
    pass


class TransportError(CollaboratorError):
    pass

class UIForgeError(Exception):
    """Base class for errors surfaced to the user as a transient notice."""


class GatewayError(UIForgeError):
    """The remote generative call failed or returned something unusable."""


class AnalysisFailed(GatewayError):
    pass


class WorkspaceBusy(UIForgeError):
    """A gateway call is already in flight for this workspace."""


class InvalidImage(UIForgeError):
    pass

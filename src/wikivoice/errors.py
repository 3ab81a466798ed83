"""Error taxonomy for the search pipeline.

Every error carries a machine-readable ``code`` and a short human-readable
message. Neither ever includes raw provider payloads.
"""


class WikiVoiceError(Exception):
    """Base class for all WikiVoice errors."""

    code = "wikivoice_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidQuery(WikiVoiceError):
    """The caller sent an empty or whitespace-only query."""

    code = "invalid_query"


class ProviderUnavailable(WikiVoiceError):
    """Network or transport fault talking to the search provider.

    Transient. A caller-level retry of the whole search is safe.
    """

    code = "provider_unavailable"


class ProviderError(WikiVoiceError):
    """The provider answered, but with an unsuccessful or malformed response."""

    code = "provider_error"


class StoreUnavailable(WikiVoiceError):
    """The history store could not be reached or is not open."""

    code = "store_unavailable"


class AssemblyViolation(WikiVoiceError):
    """An internal contract was broken while assembling results."""

    code = "assembly_violation"

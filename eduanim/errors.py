from __future__ import annotations


class EduAnimError(Exception):
    """Base class for errors surfaced to the user."""


class GenerationError(EduAnimError):
    """The script provider failed, returned nothing, or returned unparseable JSON."""


class MalformedScriptError(GenerationError):
    """The provider returned JSON that is not a valid animation script."""

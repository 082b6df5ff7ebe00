"""Course catalogue factory.

Provides get_catalogue() / set_catalogue() to swap implementations:
- InMemoryCatalogue for development and testing
- an adapter over the catalogue service in deployments
"""

from academy.catalogue.memory_adapter import InMemoryCatalogue
from academy.catalogue.port import CourseCatalogue

_current_catalogue: CourseCatalogue | None = None


def get_catalogue() -> CourseCatalogue:
    """Return the current course catalogue. Defaults to InMemoryCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = InMemoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: CourseCatalogue) -> None:
    """Override the active course catalogue (useful for tests)."""
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None

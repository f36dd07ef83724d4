"""updvcspins: pin floating VCS sources in PKGBUILD manifests.

Resolves each ``vcspins`` entry's tag to the tag object hash and the commit
it peels to, then rewrites ``_commit=``, ``_tag=`` and the ``source=()``
array in place.
"""

__version__ = "0.1.0"
__description__ = "Pin floating VCS tags in PKGBUILD manifests to immutable hashes"

from updvcspins.core.updater import PinUpdater, UpdateResult
from updvcspins.models import GitSource, Input, ResolvedPin, ResolvedPins

__all__ = [
    "PinUpdater",
    "UpdateResult",
    "GitSource",
    "Input",
    "ResolvedPin",
    "ResolvedPins",
    "__version__",
]

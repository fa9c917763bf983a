"""
GA4 audit checks. Each module registers its checks on import; importing them
here fixes the checklist order no matter which module a caller imports first.
"""

from . import property_checks     # noqa: F401
from . import collection_checks   # noqa: F401
from . import definition_checks   # noqa: F401
from . import quality_checks      # noqa: F401
from . import integration_checks  # noqa: F401

"""
==============================================================================
Runtime Package
==============================================================================

Hosts that drive scanner components.

- hub: ARCallbackHub event source
- live: OpenCV window loop (imports cv2)

==============================================================================
"""

from .hub import ARCallbackHub

__all__ = ["ARCallbackHub"]

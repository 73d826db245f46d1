"""
Models module initialization - earth smile design and view interaction
"""

from .design import SiteInput, DesignResult, EarthSmileDesignModel, compute_design
from .viewport import (
    ViewState, InteractionController,
    WheelEvent, PointerDown, PointerMove, PointerUp,
    TouchStart, TouchMove, TouchEnd
)

__all__ = [
    'SiteInput',
    'DesignResult',
    'EarthSmileDesignModel',
    'compute_design',
    'ViewState',
    'InteractionController',
    'WheelEvent',
    'PointerDown',
    'PointerMove',
    'PointerUp',
    'TouchStart',
    'TouchMove',
    'TouchEnd'
]

"""
Data package: loader adapters and demo data.
"""

from .overpass import MAX_PER_TYPE, classify_element, element_position, entities_from_overpass
from .survivors import simulate_survivors
from .sample_data import CHENNAI_CENTER, SAMPLE_SERVICES, sample_city

__all__ = [
    'MAX_PER_TYPE', 'classify_element', 'element_position', 'entities_from_overpass',
    'simulate_survivors',
    'CHENNAI_CENTER', 'SAMPLE_SERVICES', 'sample_city'
]

"""
Disaster Comm Network - Nearest Responder Discovery

Finds the nearest relevant counterpart for a Hospital, Police, Rescuer or
Survivor over a k-nearest-neighbor proximity graph, using Bellman-Ford
relaxation, and dispatches broadcasts and notifications.
"""

__version__ = '1.0.0'
__author__ = 'Disaster Comm Team'

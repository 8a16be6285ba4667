"""Fixed-tick car physics"""

from .physics_engine import (
    PhysicsEngine,
    SensorEvent,
    TickResult,
    TickStatus,
    ROOF_COLLISION,
    FLOOR_COLLISION,
)

__all__ = [
    'PhysicsEngine',
    'SensorEvent',
    'TickResult',
    'TickStatus',
    'ROOF_COLLISION',
    'FLOOR_COLLISION',
]

import itertools
from abc import ABC, abstractmethod

import simpy


class Entity(ABC):
    """
    Abstract base class for entities that run as SimPy processes.

    Provides an ID, a name, a string state with logged transitions, and
    starts run() as a process on construction.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: str = None):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. If not specified, auto-generated from class name and ID.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"
        self.state: str = "initial_state"

        self._process = self.env.process(self.run())

        print(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) created.')

    @abstractmethod
    def run(self):
        """
        Generator body of the SimPy process. Must be implemented in subclasses.
        """

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._on_state_changed(old_state, new_state)

    def get_state(self) -> str:
        return self.state

    def _on_state_changed(self, old_state: str, new_state: str):
        """Hook for subclasses; logs the transition by default"""
        print(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) state transition: {old_state} -> {new_state}')

    @property
    def process(self) -> simpy.Process:
        """
        SimPy process object for this entity (e.g. to interrupt it).
        """
        return self._process

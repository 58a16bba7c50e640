"""Circuit interface implemented by everything MockProver can run."""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from plonk.constraint_system import ConstraintSystem
from plonk.layouter import SimpleLayouter

ConfigT = TypeVar("ConfigT")


class Circuit(ABC, Generic[ConfigT]):
    """A circuit: a fixed shape (configure) plus a witness (synthesize).

    configure() must not depend on witness values; it may depend on
    parameters held by the circuit object, such as maximum input sizes.
    """

    @abstractmethod
    def configure(self, meta: ConstraintSystem) -> ConfigT:
        """Allocate columns and register gates and lookups."""
        pass

    @abstractmethod
    def synthesize(self, config: ConfigT, layouter: SimpleLayouter) -> None:
        """Assign the witness for one instance of the circuit."""
        pass

    @property
    def k(self) -> Optional[int]:
        """log2 of the row count this circuit was sized for, if fixed."""
        return None

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, TypeVar

StackAxis = Literal["row", "column"]
SizingMode = Literal["fixed", "hug"]

NodeT = TypeVar("NodeT")


@dataclass(frozen=True, slots=True)
class EdgePadding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class ContainerBuilder(Protocol[NodeT]):
    """Operations the converter needs from the host design surface.

    ``row`` stacks children left to right, ``column`` top to bottom. Sizing
    is given for the stacking (primary) axis and the cross (counter) axis.
    """

    def create_container(self, name: str) -> NodeT:
        ...

    def set_stack_axis(self, container: NodeT, axis: StackAxis) -> None:
        ...

    def set_sizing(self, container: NodeT, primary: SizingMode, counter: SizingMode) -> None:
        ...

    def set_spacing(self, container: NodeT, item_spacing: float, padding: EdgePadding) -> None:
        ...

    def detach(self, node: NodeT) -> None:
        ...

    def resize(self, node: NodeT, width: float, height: float) -> None:
        ...

    def append(self, container: NodeT, node: NodeT) -> None:
        ...

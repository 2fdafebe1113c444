"""Opt-in logger for derive / simplify calls.

```
from symdiff import SymExp, symbols, exp
from symdiff.debug.logger import Logger

logger = Logger()
SymExp.logger = logger

x = symbols("x")
exp(x * x).derive(x).simplify()

logger.dump()   # dumps information into symdiff_log.txt
logger.plot()   # creates a bar chart of call times in symdiff_log.png
SymExp.logger = None
```

Same trick as attaching a logger to a class attribute: it's global, so remember to reset it.
"""

from typing import TYPE_CHECKING, List, NamedTuple, Union

from ..utils import count_nodes

if TYPE_CHECKING:
    from ..symexp import SymExp


class Datum(NamedTuple):
    operation: str
    expr: str
    time_spent: float
    size_before: int
    size_after: int


class Logger:
    """Keeps track of time spent on each derive / simplify call and how much the tree grew or shrank."""

    _data: List[Datum] = None

    def __init__(self, path: str = "symdiff_log"):
        """path: dump() writes path + ".txt", plot() writes path + ".png"."""
        self._data = []
        self.path = path

    def log(self, operation: str, source: "SymExp", result: Union["SymExp", List["SymExp"]], time_spent: float):
        """Log one call.

        operation: name of the method called
        source: the SymExp the method was called on
        result: what it returned. A list for multi-variable derive; sizes get summed.
        time_spent: in seconds
        """
        results = result if isinstance(result, list) else [result]
        size_after = sum(count_nodes(r._root) for r in results)
        self._data.append(Datum(operation, source.to_string(), time_spent, count_nodes(source._root), size_after))

    @property
    def data(self) -> List[Datum]:
        return self._data

    def sort(self):
        """sorts the data by time spent, from most time to least time."""
        self._data = sorted(self._data, key=lambda d: d.time_spent, reverse=True)

    def clear(self):
        self._data = []

    def dump(self):
        self.sort()

        with open(self.path + ".txt", "w") as f:
            f.write("Operation: expression: time taken (s): nodes before -> after")
            f.write("\n\n")
            for d in self._data:
                f.write(f"{d.operation}: {d.expr}: {d.time_spent}: {d.size_before} -> {d.size_after}\n")

    def plot(self):
        import matplotlib.pyplot as plt

        self.sort()
        x = [f"{d.operation} {d.expr}" for d in self._data]
        y = [d.time_spent for d in self._data]
        plt.bar(x, y)
        plt.ylabel("Time taken (s)")
        plt.xticks(rotation=90)  # rotate labels vertically
        plt.tight_layout()  # automatically adjust spacing (needed to show the entirety of the vertical labels)
        plt.savefig(self.path + ".png")

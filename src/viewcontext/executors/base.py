"""Abstract base class for template executors.

An executor runs one template file. It receives the resolved path, the
variables the template may use, and the output channel its output must be
written to. Executors never resolve paths or assemble scopes themselves:
that is the view's job.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from viewcontext.buffering import OutputStack


class TemplateExecutor(ABC):
    """Runs template files of one kind.

    Attributes:
        name: Executor identifier (e.g., "python", "jinja")
    """

    name: str = "executor"

    @abstractmethod
    def execute(
        self,
        path: str,
        scope: Mapping[str, Any],
        output: OutputStack,
    ) -> None:
        """Run the template at ``path``.

        Args:
            path: Resolved template path
            scope: Variables visible to the template
            output: Channel receiving the template's output

        Errors raised by the template itself propagate to the caller.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

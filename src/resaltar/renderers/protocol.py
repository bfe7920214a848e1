"""FragmentRenderer protocol: stable interface for output adapters.

Any object with ``render(annotator) -> str`` conforms. The built-in
``HtmlRenderer`` is the reference implementation.

Example:
    from resaltar.renderers.protocol import FragmentRenderer

    def render_cell(renderer: FragmentRenderer, annotator: Annotator) -> str:
        return renderer.render(annotator)

"""

from typing import Protocol, runtime_checkable

from resaltar.annotator import Annotator


@runtime_checkable
class FragmentRenderer(Protocol):
    """Protocol for output adapters."""

    def render(self, annotator: Annotator) -> str:
        """Render an annotated text to a string.

        Args:
            annotator: Annotator whose marks and styles are rendered.

        Returns:
            Rendered string output.

        """
        ...

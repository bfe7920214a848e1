"""resaltar renderers.

Renderers turn an annotated text into output.

Available Renderers:
- render / Fragment: styled fragment sequence (the core output)
- HtmlRenderer: fragments serialized as inline-styled HTML elements

"""

from resaltar.renderers.fragments import Fragment, render
from resaltar.renderers.html import HtmlRenderer
from resaltar.renderers.protocol import FragmentRenderer

__all__ = ["Fragment", "FragmentRenderer", "HtmlRenderer", "render"]

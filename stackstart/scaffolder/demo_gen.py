"""Sample application files added by ``stackstart create --with-demo``."""

from __future__ import annotations

from pathlib import Path

from ..config import TemplateFamily
from ..rendering import TemplateRenderer


class DemoGenerator:
    """Writes a small runnable demo for each template family.

    Full-stack projects get the Node demo in ``server/`` and the React
    component in ``client/``.
    """

    # Family -> (template name, path relative to the project root)
    _DEMOS: dict[TemplateFamily, tuple[tuple[str, str], ...]] = {
        TemplateFamily.NODE: (("demo/demo.js.j2", "src/demo.js"),),
        TemplateFamily.REACT: (("demo/Demo.jsx.j2", "src/components/Demo.jsx"),),
        TemplateFamily.PYTHON: (("demo/demo.py.j2", "src/demo.py"),),
        TemplateFamily.FULL_STACK: (
            ("demo/demo.js.j2", "server/src/demo.js"),
            ("demo/Demo.jsx.j2", "client/src/components/Demo.jsx"),
        ),
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def targets(self, template: TemplateFamily | str) -> list[str]:
        """Relative paths a demo for *template* is written to."""
        return [target for _, target in self._DEMOS[TemplateFamily(template)]]

    async def generate(
        self,
        project_root: Path,
        project_name: str,
        template: TemplateFamily | str,
    ) -> list[Path]:
        family = TemplateFamily(template)
        context = {"project_name": project_name, "template": family.value}
        written: list[Path] = []
        for template_name, target in self._DEMOS[family]:
            path = await self.renderer.render_to_file(
                template_name, project_root / target, context
            )
            written.append(path)
        return written

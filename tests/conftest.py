from pathlib import Path

import pytest

from bpmn_inline.config import BuildConfig

TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <link rel="stylesheet" href="dist/assets/diagram-js.css">
    <link rel="stylesheet" href="dist/assets/bpmn-js.css">
    <link rel="stylesheet" href="dist/assets/bpmn-font/css/bpmn.css">
  </head>
  <body>
    <div id="canvas"></div>
    <script src="dist/bpmn-modeler.development.js"></script>
    <script src="dist/jquery.js"></script>
    <!-- INLINE_BUNDLE -->
  </body>
</html>
"""

ICON_CSS = """@charset "UTF-8";
@font-face {
  font-family: 'bpmn';
  src: url('../font/bpmn.woff2?1') format('woff2'),
       url('../font/bpmn.woff?1') format('woff');
}
[class^="bpmn-icon-"]:before { font-family: "bpmn"; }
"""

WOFF2 = bytes(range(256)) * 3
WOFF = b"wOFF\x00\x01\x00\x00fake-font-payload"


def write(root: Path, relative: str, content) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> BuildConfig:
    """A project tree laid out like the default configuration."""
    write(tmp_path, "src/bpmn.template.html", TEMPLATE)
    write(tmp_path, "build/app.bundle.js", "(function () {\n  app();\n})();\n")
    write(tmp_path, "dist/bpmn-modeler.development.js", "/*! bpmn-js - MIT */\nvar BpmnJS = 1;\n")
    write(tmp_path, "dist/jquery.js", "var jQuery = 2;\n")
    write(tmp_path, "dist/assets/diagram-js.css", ".djs-container { color: red; }\n")
    write(tmp_path, "dist/assets/bpmn-js.css", '@charset "UTF-8";\n.bjs-container { color: blue; }\n')
    write(tmp_path, "dist/assets/bpmn-font/css/bpmn.css", ICON_CSS)
    write(tmp_path, "dist/assets/bpmn-font/font/bpmn.woff2", WOFF2)
    write(tmp_path, "dist/assets/bpmn-font/font/bpmn.woff", WOFF)
    return BuildConfig.default(tmp_path)

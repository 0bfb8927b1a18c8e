"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


UNITY_HTML = """<!DOCTYPE html>
<html lang="en-us">
  <head>
    <meta charset="utf-8">
    <title>Unity WebGL Player</title>
    <script src="Build/UnityLoader.js"></script>
  </head>
  <body>
    <div id="unityContainer">
      <canvas id="unity-canvas" width="960" height="600"></canvas>
    </div>
    <div id="unity-fullscreen-button"></div>
  </body>
</html>
"""


BITSY_HTML = """<!DOCTYPE html>
<html>
  <head><title>my bitsy game</title></head>
  <body>
    <div id="bitsy-gamedata" ontouchstart="handleTouch()"></div>
    <canvas width="512" height="512" style="image-rendering: pixelated"></canvas>
    <script>var exportedGameData = "# BITSY VERSION 8.0";</script>
  </body>
</html>
"""


TWINE_HTML = """<!DOCTYPE html>
<html>
  <body>
    <tw-story>
      <tw-passage class="passage" name="Start">You wake up.</tw-passage>
    </tw-story>
    <script>window.Harlowe = {};</script>
  </body>
</html>
"""


@pytest.fixture
def unity_html():
    """Markup of a Unity WebGL build page."""
    return UNITY_HTML


@pytest.fixture
def bitsy_html():
    """Markup of a Bitsy export."""
    return BITSY_HTML


@pytest.fixture
def twine_html():
    """Markup of a Twine (Harlowe) story."""
    return TWINE_HTML


@pytest.fixture
def webgl2_context():
    """A capable WebGL 2 context."""
    from enginescope.core.context import StaticWebGL2Context

    return StaticWebGL2Context(
        extensions=[
            "OES_texture_float",
            "EXT_texture_filter_anisotropic",
            "EXT_color_buffer_float",
            "WEBGL_depth_texture",
        ],
        parameters={
            "MAX_TEXTURE_SIZE": 16384,
            "MAX_VIEWPORT_DIMS": [16384, 16384],
            "MAX_RENDERBUFFER_SIZE": 16384,
            "MAX_SAMPLES": 4,
        },
    )


@pytest.fixture
def webgl1_context():
    """A limited WebGL 1 context without extensions."""
    from enginescope.core.context import StaticWebGLContext

    return StaticWebGLContext(
        extensions=[],
        parameters={
            "MAX_TEXTURE_SIZE": 2048,
            "MAX_VIEWPORT_DIMS": [2048, 2048],
            "MAX_RENDERBUFFER_SIZE": 2048,
        },
    )

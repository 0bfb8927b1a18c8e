"""Tests for the signature matcher."""

import pytest
from dataclasses import dataclass

from enginescope.classification.signatures import get_webgl_context, match_signature
from enginescope.core.context import Canvas2DContext, StaticWebGL2Context, StaticWebGLContext
from enginescope.core.models import (
    CanvasElement,
    CanvasPattern,
    CanvasSize,
    DocumentSnapshot,
    DomPattern,
    HtmlSubstring,
    ScriptPattern,
    Signature,
    WebGLProbe,
)
from enginescope.core.snapshot import build_snapshot


class TestDomPattern:
    """Tests for DOM signatures."""

    def test_match_class(self):
        """Test matching by class."""
        snapshot = build_snapshot('<div class="tw-passage"></div>')
        assert match_signature(DomPattern(patterns=("tw-passage",)), snapshot) is True

    def test_match_id(self):
        """Test matching by id."""
        snapshot = build_snapshot('<div id="tw-story"></div>')
        assert match_signature(DomPattern(patterns=("tw-story",)), snapshot) is True

    def test_match_data_attribute(self):
        """Test matching by data- attribute."""
        snapshot = build_snapshot('<div data-passage="Start"></div>')
        assert match_signature(DomPattern(patterns=("passage",)), snapshot) is True

    def test_any_pattern_matches(self):
        """Test that a single matching pattern is enough."""
        snapshot = build_snapshot('<div id="b"></div>')
        assert match_signature(DomPattern(patterns=("a", "b", "c")), snapshot) is True

    def test_no_match(self):
        """Test that unrelated markup does not match."""
        snapshot = build_snapshot('<div class="content"></div>')
        assert match_signature(DomPattern(patterns=("passage",)), snapshot) is False


class TestScriptPattern:
    """Tests for script signatures."""

    def test_match_inline_text(self):
        """Test matching inline script text."""
        snapshot = build_snapshot("<script>var x = SugarCube.State;</script>")
        assert match_signature(ScriptPattern(patterns=("SugarCube",)), snapshot) is True

    def test_match_src(self):
        """Test matching script src."""
        snapshot = build_snapshot('<script src="js/c3runtime.js"></script>')
        assert match_signature(ScriptPattern(patterns=("c3runtime",)), snapshot) is True

    def test_case_sensitive(self):
        """Test that script matching is case-sensitive."""
        snapshot = build_snapshot("<script>unityloader()</script>")
        assert match_signature(ScriptPattern(patterns=("UnityLoader",)), snapshot) is False

    def test_no_scripts(self):
        """Test that a document without scripts never matches."""
        snapshot = build_snapshot("<div>UnityLoader</div>")
        assert match_signature(ScriptPattern(patterns=("UnityLoader",)), snapshot) is False


class TestCanvasPattern:
    """Tests for canvas signatures."""

    def test_match_id_substring(self):
        """Test matching a substring of the canvas id."""
        snapshot = build_snapshot('<canvas id="godot-canvas-main"></canvas>')
        assert match_signature(CanvasPattern(patterns=("godot-canvas",)), snapshot) is True

    def test_match_class_substring(self):
        """Test matching a substring of the canvas class name."""
        snapshot = build_snapshot('<canvas class="p5Canvas defaultCanvas0"></canvas>')
        assert match_signature(CanvasPattern(patterns=("defaultCanvas",)), snapshot) is True

    def test_match_any_canvas(self):
        """Test that patterns are checked against every canvas."""
        snapshot = build_snapshot('<canvas id="overlay"></canvas><canvas id="gameCanvas"></canvas>')
        assert match_signature(CanvasPattern(patterns=("gameCanvas",)), snapshot) is True

    def test_match_size(self):
        """Test that an explicit size takes precedence over patterns."""
        snapshot = build_snapshot('<canvas width="128" height="128"></canvas>')

        assert match_signature(CanvasPattern(width=128, height=128), snapshot) is True
        assert (
            match_signature(CanvasPattern(patterns=("unused",), width=128, height=128), snapshot)
            is True
        )
        assert match_signature(CanvasPattern(width=240, height=136), snapshot) is False

    def test_presence(self):
        """Test that a pattern-less canvas signature matches any canvas."""
        snapshot = build_snapshot("<canvas></canvas>")
        assert match_signature(CanvasPattern(), snapshot) is True

    def test_no_canvas(self):
        """Test that canvas signatures never match without a canvas."""
        snapshot = build_snapshot('<div id="godot-canvas"></div>')

        assert match_signature(CanvasPattern(), snapshot) is False
        assert match_signature(CanvasPattern(patterns=("godot-canvas",)), snapshot) is False
        assert match_signature(CanvasSize(width=300, height=150), snapshot) is False


class TestCanvasSize:
    """Tests for exact canvas size signatures."""

    def test_exact_size(self):
        """Test exact size matching."""
        snapshot = build_snapshot('<canvas width="512" height="512"></canvas>')

        assert match_signature(CanvasSize(width=512, height=512), snapshot) is True
        assert match_signature(CanvasSize(width=512, height=256), snapshot) is False

    def test_default_size(self):
        """Test that an unsized canvas has the HTML default size."""
        snapshot = build_snapshot("<canvas></canvas>")
        assert match_signature(CanvasSize(width=300, height=150), snapshot) is True


class TestHtmlSubstring:
    """Tests for raw markup signatures."""

    def test_match(self):
        """Test substring matching on markup."""
        snapshot = build_snapshot('<div id="unity-mobile-warning"></div>')
        assert match_signature(HtmlSubstring(patterns=("unity-mobile-warning",)), snapshot) is True

    def test_no_patterns(self):
        """Test that an empty pattern list never matches."""
        snapshot = build_snapshot("<div></div>")
        assert match_signature(HtmlSubstring(patterns=()), snapshot) is False


class TestWebGLProbe:
    """Tests for WebGL signatures."""

    def test_match_webgl_context(self):
        """Test matching a canvas with a WebGL 1 context."""
        snapshot = build_snapshot("<canvas></canvas>", contexts={"0": StaticWebGLContext()})
        assert match_signature(WebGLProbe(), snapshot) is True

    def test_match_webgl2_context(self):
        """Test matching a canvas with a WebGL 2 context."""
        snapshot = build_snapshot("<canvas></canvas>", contexts={"0": StaticWebGL2Context()})
        assert match_signature(WebGLProbe(), snapshot) is True

    def test_2d_context_does_not_match(self):
        """Test that a 2D-only canvas does not match."""
        snapshot = build_snapshot("<canvas></canvas>", contexts={"0": Canvas2DContext()})
        assert match_signature(WebGLProbe(), snapshot) is False

    def test_no_canvas(self):
        """Test that WebGL signatures never match without a canvas."""
        assert match_signature(WebGLProbe(), DocumentSnapshot.empty()) is False
        assert match_signature(WebGLProbe(require_context=False), DocumentSnapshot.empty()) is False

    def test_presence_only(self):
        """Test that a probe not requiring a context matches any canvas."""
        snapshot = build_snapshot("<canvas></canvas>")
        assert match_signature(WebGLProbe(require_context=False), snapshot) is True

    def test_shaders_are_informational(self):
        """Test that shader names do not affect matching."""
        snapshot = build_snapshot("<canvas></canvas>", contexts={"0": StaticWebGLContext()})
        assert match_signature(WebGLProbe(shaders=("pico8_vert",)), snapshot) is True


class TestGetWebGLContext:
    """Tests for WebGL context lookup."""

    def test_prefers_webgl2(self):
        """Test that WebGL 2 is preferred over WebGL 1."""
        webgl2 = StaticWebGL2Context()
        canvas = CanvasElement(contexts={"webgl": StaticWebGLContext(), "webgl2": webgl2})
        assert get_webgl_context(canvas) is webgl2

    def test_lookup_failure(self):
        """Test that a failing context lookup is treated as unavailable."""

        class BrokenCanvas(CanvasElement):
            def get_context(self, kind):
                raise RuntimeError("context lost")

        assert get_webgl_context(BrokenCanvas()) is None


class TestMatchSignature:
    """Tests for signature dispatch."""

    def test_unknown_signature_type(self):
        """Test that an unknown signature variant is rejected."""

        @dataclass(frozen=True)
        class CustomSignature(Signature):
            pass

        with pytest.raises(TypeError):
            match_signature(CustomSignature(), DocumentSnapshot.empty())

    def test_matching_is_pure(self, unity_html):
        """Test that evaluating a signature twice gives the same answer."""
        snapshot = build_snapshot(unity_html)
        signature = ScriptPattern(patterns=("UnityLoader",))

        assert match_signature(signature, snapshot) == match_signature(signature, snapshot)

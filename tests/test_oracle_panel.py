import pytest

from pyoracle.oracle.annotator import NAV_GLYPH, annotate_output
from pyoracle.ui.widgets.oracle_panel import BANNER, OracleOutputPanel


@pytest.fixture
def panel(qtbot):
    widget = OracleOutputPanel(max_lines=5)
    qtbot.addWidget(widget)
    return widget


def test_present_writes_banner_and_annotated_lines(panel):
    panel.present(annotate_output("/p/a.go:3:1: defined here\nplain line\n"))

    lines = panel.text().splitlines()
    assert lines[0] == BANNER
    assert lines[1] == f"{NAV_GLYPH} defined here"
    assert lines[2] == "plain line"
    assert panel.status_label.text() == "1 location(s)."


def test_second_present_replaces_first(panel):
    panel.present(annotate_output("/p/first.go:1:1: first result\nextra first line\n"))
    panel.present(annotate_output("/p/second.go:2:3: second result\n"))

    text = panel.text()
    assert "first" not in text
    assert text.splitlines() == [BANNER, f"{NAV_GLYPH} second result"]
    assert panel.annotation_for_line(2) is None


def test_annotation_lookup_covers_only_the_glyph(panel):
    panel.present(annotate_output("plain\n/p/a.go:7:2: hit\n"))

    assert panel.annotation_at(1, 0) is None
    assert panel.annotation_at(2, 0).location.line == 7
    assert panel.annotation_at(2, 1) is not None
    assert panel.annotation_at(2, 4) is None


def test_line_activation_emits_location(panel, qtbot):
    panel.present(annotate_output("/p/a.go:7:2: hit\n"))

    with qtbot.waitSignal(panel.locationActivated) as blocker:
        panel.view.lineActivated.emit(1)
    assert blocker.args == ["/p/a.go", 7, 2]


def test_marker_click_emits_location_only_on_glyph(panel, qtbot):
    panel.present(annotate_output("/p/a.go:7:2: hit\n"))

    with qtbot.assertNotEmitted(panel.locationActivated):
        panel.view.markerClicked.emit(1, 5)
    with qtbot.waitSignal(panel.locationActivated) as blocker:
        panel.view.markerClicked.emit(1, 0)
    assert blocker.args == ["/p/a.go", 7, 2]


def test_present_requests_reveal_and_resets_viewport(panel, qtbot):
    raw = "".join(f"/p/a.go:{n}:1: line {n}\n" for n in range(1, 40))
    with qtbot.waitSignal(panel.revealRequested) as blocker:
        panel.present(annotate_output(raw))

    assert blocker.args[0] > 0
    assert panel.view.textCursor().position() == 0
    assert panel.view.verticalScrollBar().value() == 0


def test_preferred_height_is_capped(panel):
    panel.present(annotate_output("one\n"))
    small = panel.preferred_height()
    panel.present(annotate_output("".join(f"line {n}\n" for n in range(100))))
    capped = panel.preferred_height()
    panel.set_max_lines(50)
    assert small < capped < panel.preferred_height()

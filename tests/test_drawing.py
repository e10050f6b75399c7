from datetime import datetime, timezone

from carintel.client.drawing import DrawnLine, SketchCanvas

FIXED = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _canvas() -> SketchCanvas:
    return SketchCanvas(now=lambda: FIXED)


def test_click_places_selected_tool():
    canvas = _canvas()
    assert canvas.click(52.0, 5.0) is None

    canvas.select_tool("auto")
    incident = canvas.click(52.0, 5.0)
    assert incident.type == "auto"
    assert incident.id.startswith("auto-")
    assert incident.position == (52.0, 5.0)
    assert incident.rotation == 0
    assert incident.scale == 1
    assert incident.text is None
    assert incident.timestamp == FIXED.isoformat()


def test_text_tool_gets_placeholder():
    canvas = _canvas()
    canvas.select_tool("tekstblok")
    assert canvas.click(52.0, 5.0).text == "TEKST"


def test_drawing_a_line():
    canvas = _canvas()
    canvas.select_tool("auto")
    canvas.set_drawing_mode(True)
    for point in ((52.0, 5.0), (52.1, 5.1), (52.2, 5.2)):
        assert canvas.click(*point) is None

    line = canvas.double_click()
    assert isinstance(line, DrawnLine)
    assert line.positions == [(52.0, 5.0), (52.1, 5.1), (52.2, 5.2)]
    assert line.color == "#FF0000"
    assert line.weight == 3
    assert canvas.incidents == []
    assert canvas.is_drawing is False


def test_single_point_is_not_a_line():
    canvas = _canvas()
    canvas.set_drawing_mode(True)
    canvas.click(52.0, 5.0)
    assert canvas.double_click() is None
    assert canvas.is_drawing is True


def test_leaving_drawing_mode_drops_unfinished_line():
    canvas = _canvas()
    canvas.set_drawing_mode(True)
    canvas.click(52.0, 5.0)
    canvas.click(52.1, 5.1)
    canvas.set_drawing_mode(False)
    assert canvas.current_line == []
    assert canvas.drawn_lines == []


def test_update_and_remove():
    canvas = _canvas()
    canvas.select_tool("fiets")
    incident = canvas.click(52.0, 5.0)

    updated = canvas.update_incident(incident.id, rotation=90, flipped=True)
    assert updated.rotation == 90
    assert canvas.incidents[0].flipped is True
    assert canvas.update_incident("missing", rotation=1) is None

    canvas.remove_incident(incident.id)
    assert canvas.incidents == []


def test_payload_and_load():
    canvas = _canvas()
    canvas.select_tool("auto")
    canvas.click(52.0, 5.0)
    canvas.set_drawing_mode(True)
    canvas.click(52.0, 5.0)
    canvas.click(52.1, 5.1)
    line = canvas.double_click()

    payload = canvas.payload()
    assert payload["incidents"][0]["position"] == [52.0, 5.0]
    assert "text" not in payload["incidents"][0]
    assert payload["drawnLines"][0]["positions"] == [[52.0, 5.0], [52.1, 5.1]]

    other = _canvas()
    other.load({"incidents": payload["incidents"], "drawn_lines": payload["drawnLines"]})
    assert other.drawn_lines[0].id == line.id
    assert other.incidents[0].type == "auto"

    other.remove_line(line.id)
    other.clear()
    assert other.payload() == {"incidents": [], "drawnLines": []}

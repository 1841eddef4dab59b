from notch8.display import Display


def row(display, y):
    return [display.pixel(x, y) for x in range(display.width)]


def test_draw_then_erase():
    display = Display()
    assert display.draw(0, 0, b"\xff") is False
    assert row(display, 0)[:9] == [1] * 8 + [0]
    assert display.lit() == 8

    assert display.draw(0, 0, b"\xff") is True
    assert display.lit() == 0


def test_msb_is_leftmost():
    display = Display()
    display.draw(10, 5, b"\x80\x01")
    assert display.pixel(10, 5) == 1
    assert display.pixel(17, 6) == 1
    assert display.lit() == 2


def test_collision_only_when_lit_pixel_goes_dark():
    display = Display()
    display.draw(0, 0, b"\xf0")
    # Lights new pixels, clears nothing
    assert display.draw(0, 0, b"\x0f") is False
    assert display.lit() == 8
    # Blank sprite rows change nothing
    assert display.draw(0, 0, b"\x00") is False
    assert display.draw(4, 0, b"\x80") is True
    assert display.pixel(4, 0) == 0


def test_horizontal_wrap():
    display = Display()
    display.draw(62, 0, b"\xff")
    lit = [x for x in range(64) if display.pixel(x, 0)]
    assert lit == [0, 1, 2, 3, 4, 5, 62, 63]


def test_vertical_wrap():
    display = Display()
    display.draw(0, 31, b"\x80\x80\x80")
    assert display.pixel(0, 31) == 1
    assert display.pixel(0, 0) == 1
    assert display.pixel(0, 1) == 1
    assert display.lit() == 3


def test_coordinates_past_the_edge_wrap():
    display = Display()
    display.draw(64 + 3, 32 + 2, b"\x80")
    assert display.pixel(3, 2) == 1
    assert display.lit() == 1


def test_clear():
    display = Display()
    display.draw(0, 0, b"\xff\xff")
    display.clear()
    assert display.lit() == 0


def test_rows_and_str():
    display = Display()
    display.draw(0, 0, b"\xc0")
    rows = list(display.rows())
    assert len(rows) == 32
    assert rows[0][:3] == b"\x01\x01\x00"
    assert str(display).splitlines()[0].startswith("##.")

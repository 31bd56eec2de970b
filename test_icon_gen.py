from datetime import date

from icon_gen import create_icon_image


def test_icon_size_and_colours():
    plain = create_icon_image(date(2024, 1, 15))
    assert plain.size == (64, 64)
    assert plain.getpixel((0, 0)) == (255, 255, 255, 255)

    selected = create_icon_image(date(2024, 1, 15), selected=True)
    assert selected.getpixel((0, 0)) == (0, 120, 212, 255)

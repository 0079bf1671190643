import pytest

from src.domain.sanitize import safe_filename, slugify


@pytest.mark.parametrize(
    "text,slug",
    [
        ("Hello, World!", "hello-world"),
        ("  Crème brûlée  ", "creme-brulee"),
        ("snake_case title", "snake-case-title"),
        ("a -- b", "a-b"),
        ("!!!", ""),
    ],
)
def test_slugify(text, slug):
    assert slugify(text) == slug


def test_safe_filename():
    assert safe_filename("my photo (1).png") == "my_photo_1_.png"
    assert safe_filename("") == "file"

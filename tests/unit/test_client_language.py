import pytest

from recaptcha_theme.client_language import client_language, primary_subtag


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("it-IT,it;q=0.9,en;q=0.8", "it-it"),
        ("  PT-br ; q=0.7 , en", "pt-br"),
        ("fr", "fr"),
        ("*", None),
        ("", None),
        (None, None),
    ],
)
def test_client_language_returns_first_language_tag(header, expected) -> None:
    assert client_language(header) == expected


def test_primary_subtag_strips_region() -> None:
    assert primary_subtag("pt-br") == "pt"
    assert primary_subtag("zh_hant") == "zh"
    assert primary_subtag("de") == "de"
    assert primary_subtag(None) is None

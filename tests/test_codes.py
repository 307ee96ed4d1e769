import pytest

from shortlinks import codes


def test_generate_code_length_and_alphabet():
    for length in (6, 7, 8):
        code = codes.generate_code(length)
        assert len(code) == length
        assert set(code) <= set(codes.ALPHABET)

def test_alphabet_is_62_symbols():
    assert len(set(codes.ALPHABET)) == 62

@pytest.mark.parametrize("code", ["abc123", "ABCDEFG", "a1B2c3D4", "000000"])
def test_validate_code_accepts(code):
    assert codes.validate_code(code)

@pytest.mark.parametrize(
    "code",
    ["", "abc12", "abcdefghi", "abc-12", "abc_123", "abc 123", "abc12é", None, "abc123\n"],
)
def test_validate_code_rejects(code):
    assert not codes.validate_code(code)

@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://example.com/path?q=1#frag",
        "https://sub.example.co.uk:8443/a/b",
        "ftp://files.example.com/pub",
    ],
)
def test_validate_url_accepts(url):
    assert codes.validate_url(url)

@pytest.mark.parametrize(
    "url",
    [
        "",
        None,
        "example.com",
        "/relative/path",
        "http://",
        "https:///nohost",
        "mailto:someone@example.com",
        "http://exa mple.com",
        "http://[::1",
        "not a url",
        "https://example.com/\x00",
        "https://example.com/\x07",
        "https://example.com/\x7f",
    ],
)
def test_validate_url_rejects(url):
    assert not codes.validate_url(url)

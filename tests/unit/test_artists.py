import pytest

from gigcrawl.utils.artists import DEFAULT_VALIDATOR, ValidatorConfig, alpha_ratio, is_likely_artist_name


@pytest.mark.parametrize("name", [
    "The Black Keys",
    "Joe Ely",
    "A.L. West",
    "Mayeux & Broussard",
    "Gary Clark Jr.",
])
def test_accepts_performer_names(name):
    assert is_likely_artist_name(name) is True


@pytest.mark.parametrize("candidate", [
    "",
    None,
    "X",
    "1234 Congress Ave",
    "Buy Tickets Now",
    "8:00 PM",
    "TBA",
    "Jazz",
    "@austinband",
    "www.band.com",
    "Friday Night Live",
    "Austin, TX 78701",
    "Tribute to Prince",
    "one two three four five six seven eight nine",
    "Doors open early. Bring friends",
])
def test_rejects_non_artist_text(candidate):
    assert is_likely_artist_name(candidate) is False


def test_case_policies():
    all_caps = DEFAULT_VALIDATOR.with_overrides(case_policy="reject_all_caps")
    assert is_likely_artist_name("THE ROLLING STONES") is True
    assert is_likely_artist_name("THE ROLLING STONES", all_caps) is False
    assert is_likely_artist_name("The Rolling Stones", all_caps) is True

    title = DEFAULT_VALIDATOR.with_overrides(case_policy="prefer_title")
    assert is_likely_artist_name("jesse dayton", title) is False
    assert is_likely_artist_name("Jesse Dayton", title) is True


def test_venue_overrides():
    mohawk = DEFAULT_VALIDATOR.with_overrides(extra_banned_phrases=("mohawk",))
    assert is_likely_artist_name("Mohawk House Band") is True
    assert is_likely_artist_name("Mohawk House Band", mohawk) is False

    strict = ValidatorConfig(max_length=10)
    assert is_likely_artist_name("Charley Crockett", strict) is False

    assert DEFAULT_VALIDATOR.case_policy == "any"


def test_alpha_ratio():
    assert alpha_ratio("ab12") == 0.5
    assert alpha_ratio("   ") == 0.0

from gigcrawl.errors import ConfigurationError
from gigcrawl.venues import (
    antones,
    broken_spoke,
    cboys,
    continental_club,
    elephant_room,
    hautespot,
    mohawk,
    three_ten,
)


def get_scrapers():
    """Build scraper registry keyed by venue display name."""
    return {
        antones.PROFILE.name: antones.scrape_antones,
        cboys.PROFILE.name: cboys.scrape_cboys,
        mohawk.PROFILE.name: mohawk.scrape_mohawk,
        hautespot.PROFILE.name: hautespot.scrape_hautespot,
        three_ten.PROFILE.name: three_ten.scrape_three_ten,
        broken_spoke.PROFILE.name: broken_spoke.scrape_broken_spoke,
        continental_club.PROFILE.name: continental_club.scrape_continental_club,
        elephant_room.PROFILE.name: elephant_room.scrape_elephant_room,
    }


def get_profiles():
    return {
        module.PROFILE.name: module.PROFILE
        for module in (antones, cboys, mohawk, hautespot, three_ten, broken_spoke, continental_club, elephant_room)
    }


def select_scrapers(names=None):
    """
    Resolve --venue values (display name or short key, any case) to
    (profile, scraper) pairs. Unknown names raise ConfigurationError.
    """
    scrapers = get_scrapers()
    profiles = get_profiles()
    if not names:
        return [(profiles[name], scrapers[name]) for name in scrapers]

    lookup = {}
    for name, profile in profiles.items():
        lookup[name.lower()] = name
        lookup[profile.key.lower()] = name

    selected = []
    for requested in names:
        name = lookup.get(requested.strip().lower())
        if name is None:
            raise ConfigurationError(f"unknown venue {requested!r}, expected one of: {', '.join(sorted(lookup))}")
        selected.append((profiles[name], scrapers[name]))
    return selected

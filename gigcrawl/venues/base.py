from dataclasses import dataclass

from gigcrawl import config
from gigcrawl.utils.artists import DEFAULT_VALIDATOR
from gigcrawl.utils.lineup import LineupContext


@dataclass(frozen=True)
class VenueProfile:
    """
    Per-venue configuration for the shared parsing pipeline.

    Everything that used to be forked per venue script lives here: the
    boilerplate regexes, separator behaviour, keyword lists, validator
    thresholds and the dedupe key.
    """
    key: str
    name: str
    start_url: str
    aliases: tuple = ()
    boilerplate_patterns: tuple = ()
    split_headliner_on_and: bool = False
    # None keeps the shared NON_CONCERT_KEYWORDS list
    non_concert_keywords: tuple = None
    extra_non_concert_keywords: tuple = ()
    validator: object = DEFAULT_VALIDATOR
    dedupe_policy: str = "artist"
    default_evening: bool = False
    parse_set_times: bool = False
    timezone: str = "America/Chicago"
    market: str = config.MARKET
    use_cloudscraper: bool = False

    @property
    def lineup_context(self):
        return LineupContext(
            venue_name=self.name,
            venue_aliases=self.aliases,
            boilerplate_patterns=self.boilerplate_patterns,
            split_headliner_on_and=self.split_headliner_on_and,
            validator=self.validator,
        )

    def start_url_for(self, run_config):
        return run_config.start_url or self.start_url

    def owns_venue_name(self, venue_name):
        """True for records this venue wrote, stage names like "Mohawk - Inside" included."""
        lower = (venue_name or "").lower()
        return any(lower.startswith(name.lower()) for name in (self.name,) + tuple(self.aliases))

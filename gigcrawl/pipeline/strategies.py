def first_match(strategies, *args):
    """
    Run extraction strategies in order and return the first non-empty result.
    Each strategy takes *args and returns a value or None. Exceptions are not
    caught here; a strategy that can fail on missing markup should return
    None instead.
    """
    for strategy in strategies:
        value = strategy(*args)
        if value:
            return value
    return None


def select_text(selector):
    """Strategy: text of the first element matching a CSS selector."""
    def strategy(page):
        return page.query_text(selector) or None
    return strategy


def select_attr(selector, attr):
    """Strategy: an attribute of the first element matching a CSS selector."""
    def strategy(page):
        return page.query_attr(selector, attr) or None
    return strategy

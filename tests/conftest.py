"""
Shared pytest setup.

freezegun skips modules whose name starts with "gi" (PyGObject) by default,
which also matches gigcrawl. Drop that entry so frozen clocks reach our code.
"""

import freezegun

freezegun.configure(
    default_ignore_list=[
        "nose.plugins",
        "six.moves",
        "django.utils.six.moves",
        "google.gax",
        "threading",
        "multiprocessing",
        "queue",
        "selenium",
        "_pytest.terminal.",
        "_pytest.runner.",
        "prompt_toolkit",
    ]
)

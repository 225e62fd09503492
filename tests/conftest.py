"""
Shared fixtures for jsondecoder tests.
"""

import pytest

from jsondecoder import Decoder


class Counter:
    """Wraps decoders so that every decode call is counted."""

    def __init__(self):
        self.calls = 0

    def wrap(self, decoder: Decoder) -> Decoder:
        def run(value):
            self.calls += 1
            return decoder.run(value)

        return Decoder(run, decoder.schema)


@pytest.fixture
def counter() -> Counter:
    return Counter()

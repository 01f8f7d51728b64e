"""Tests for the console challenge presenter"""

import pytest
from rich.console import Console

from deadlock_gc.infrastructure.presenter import ConsoleChallengePresenter


@pytest.mark.unit
def test_presenter_prints_url_and_instructions():
    console = Console(record=True, width=120)
    presenter = ConsoleChallengePresenter(console)

    presenter("https://s.team/q/1/abc")

    output = console.export_text()
    assert "https://s.team/q/1/abc" in output
    assert "Steam Mobile App" in output

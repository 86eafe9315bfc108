import pytest


class ScriptedRng:
    """Stands in for random.Random: always picks the first empty cell and spawns a 2 unless told otherwise."""

    def __init__(self, rolls=None, pick=0):
        self.rolls = list(rolls or [])
        self.pick = pick
        self.choices = []

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[self.pick if self.pick < len(seq) else -1]

    def random(self):
        return self.rolls.pop(0) if self.rolls else 0.5


@pytest.fixture
def rng():
    return ScriptedRng()


@pytest.fixture
def save_path(tmp_path):
    return tmp_path / "nested" / "save.json"

import matplotlib

matplotlib.use("Agg")

import pytest

from core.process import make_descriptor
from utils.input_parser import InputParser


def fg(pid, arrival, burst, name=None):
    return make_descriptor(pid, name, arrival, burst, "foreground")


def bg(pid, arrival, burst, name=None):
    return make_descriptor(pid, name, arrival, burst, "background")


def segments(result):
    """Timeline as (name, start, end) tuples."""
    return [(seg.name, seg.start_time, seg.end_time) for seg in result.timeline]


@pytest.fixture
def sample_processes():
    return InputParser.sample_processes()

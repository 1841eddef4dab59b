import pytest

from notch8.cpu import Chip8

from unit_utils import FakeClock, RecordingRenderer, RecordingSpeaker


@pytest.fixture
def clock():
    yield FakeClock()


@pytest.fixture
def renderer():
    yield RecordingRenderer()


@pytest.fixture
def speaker():
    yield RecordingSpeaker()


@pytest.fixture
def boot(clock):
    """Build a headless machine around some program bytes.

    Runs unthrottled on the fake clock unless told otherwise.
    """
    def _boot(program=b"", **kwargs):
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("sleep", clock.sleep)
        kwargs.setdefault("speed", 0)
        return Chip8(bytes(program), **kwargs)
    yield _boot

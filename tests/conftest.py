import pytest

from cogsimple.server import StubServer


class ScriptedSocket:
    """Stands in for a connected socket; recv() hands out the scripted chunks."""

    def __init__(self, *chunks):
        self.chunks = list(chunks)
        self.sent = b""
        self.closed = False

    def recv(self, n):
        item = self.chunks.pop(0)
        if isinstance(item, Exception):
            raise item
        assert len(item) <= n
        return item

    def sendall(self, data):
        self.sent += data

    def close(self):
        self.closed = True


@pytest.fixture
def scripted():
    return ScriptedSocket


@pytest.fixture
def cogserver():
    srv = StubServer().start()
    yield srv
    srv.stop()


@pytest.fixture
def uri(cogserver):
    host, port = cogserver.address
    return f"cog://{host}:{port}/test-space"

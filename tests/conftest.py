"""Shared test helpers."""

from depmap.tools import ToolInvocationError


class FakeRunner:
    """Maps a cargo subcommand to a ToolOutput or an exception to raise."""

    def __init__(self, responses=None, **kwargs):
        self.responses = {**(responses or {}), **kwargs}
        self.calls = []

    def run(self, name, args):
        self.calls.append((name, args))
        response = self.responses.get(args[0])
        if response is None:
            raise ToolInvocationError(name, "executable not found")
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def subcommands(self):
        return [args[0] for _, args in self.calls]

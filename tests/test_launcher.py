import socket

import pytest

from storyforge.launcher import find_available_port, server_command, wait_until_healthy


class ExitedProcess:
    def poll(self):
        return 3


def test_find_available_port_skips_busy_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        assert find_available_port(port) > port


def test_find_available_port_gives_up():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]
        with pytest.raises(RuntimeError):
            find_available_port(port, max_tries=1)


def test_wait_stops_when_server_process_exits():
    assert wait_until_healthy("http://127.0.0.1:9", ExitedProcess(), timeout_s=5) is False


def test_server_command_uses_app_factory():
    cmd = server_command("127.0.0.1", 8123, reload=True)
    assert "storyforge.main:create_app" in cmd
    assert "--factory" in cmd
    assert cmd[cmd.index("--port") + 1] == "8123"
    assert cmd[-1] == "--reload"

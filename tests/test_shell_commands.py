import json
import socket

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from cp750 import SYS_FADER
from cp750_shell.cli import main, parse_target
from cp750_shell.commands import build_registry, execute_line
from cp750_shell.completion import ShellCompleter, value_candidates
from cp750_shell.context import ShellContext
from cp750_shell.parser import split_command


@pytest.fixture
def ctx(device):
    context = ShellContext(host="127.0.0.1", port=device.port, timeout=2.0)
    yield context
    context.disconnect()


@pytest.fixture
def registry():
    return build_registry()


def _completions(registry, text):
    completer = ShellCompleter(registry)
    return [item.text for item in completer.get_completions(Document(text), CompleteEvent())]


def test_parse_target():
    assert parse_target("cinema-1") == ("cinema-1", 61408)
    assert parse_target("10.0.0.5:7000") == ("10.0.0.5", 7000)
    assert parse_target("cinema-1", 9000) == ("cinema-1", 9000)
    for bad in ("cinema-1:", "cinema-1:abc", "cinema-1:70000", ":61408"):
        with pytest.raises(ValueError):
            parse_target(bad)


def test_split_command_strips_comments():
    assert split_command("cp750.sys.fader 40  # loud") == ["cp750.sys.fader", "40"]
    assert split_command("   # nothing") == []
    assert split_command("") == []


def test_help_lists_fields_and_commands(ctx, registry, capsys):
    assert execute_line(ctx, registry, "help") == 0
    out = capsys.readouterr().out
    assert "Available commands:" in out
    assert "cp750.sys.fader ?|0..100" in out
    assert "cp750.ctrl.fader_delta -100..100" in out
    assert "interval [MS]" in out


def test_bare_field_line_is_sent(ctx, registry, device, capsys):
    assert execute_line(ctx, registry, "cp750.sys.fader 40") == 0
    assert capsys.readouterr().out.strip() == "< 40"
    assert device.state.fader == 40
    assert execute_line(ctx, registry, "send cp750.sys.mute ?") == 0
    assert capsys.readouterr().out.strip() == "< 0"


def test_value_outside_domain_is_refused(ctx, registry, device, capsys):
    assert execute_line(ctx, registry, "cp750.sys.fader 150") == 1
    assert "value not allowed for cp750.sys.fader: 150" in capsys.readouterr().out
    assert "cp750.sys.fader 150" not in device.received


def test_syntax_and_unknown_field_errors(ctx, registry, capsys):
    assert execute_line(ctx, registry, "cp750.sys.fader") == 1
    assert "syntax error" in capsys.readouterr().out
    assert execute_line(ctx, registry, "cp750.sys.volume 3") == 1
    assert "Unknown field: cp750.sys.volume" in capsys.readouterr().out
    assert execute_line(ctx, registry, "get cp750.sys.volume") == 1
    assert "Unknown field: cp750.sys.volume" in capsys.readouterr().out


def test_get_shows_cached_value(ctx, registry, device, capsys):
    assert execute_line(ctx, registry, "get cp750.sys.fader") == 0
    assert capsys.readouterr().out.strip() == "35"
    device.state.fader = 60
    assert execute_line(ctx, registry, "get cp750.sys.fader") == 0
    assert capsys.readouterr().out.strip() == "35"


def test_refresh_prints_status(ctx, registry, device, capsys):
    device.state.fader = 60
    assert execute_line(ctx, registry, "status") == 0
    out = capsys.readouterr().out
    assert "cp750.sys.fader : 60" in out
    assert "cp750.sysinfo.version : 3.1.2.7" in out


def test_interval_command(ctx, registry, capsys):
    assert execute_line(ctx, registry, "interval") == 0
    assert capsys.readouterr().out.strip() == "refresh interval: disabled"
    assert execute_line(ctx, registry, "interval 250") == 0
    assert capsys.readouterr().out.strip() == "refresh interval: 250ms"
    assert ctx.client.refresh_interval == 250
    assert execute_line(ctx, registry, "interval soon") == 1


def test_json_output(ctx, registry, capsys):
    ctx.json_output = True
    assert execute_line(ctx, registry, "cp750.sys.fader 20") == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"status": "ok", "result": {"field": "cp750.sys.fader", "value": "20"}}
    assert execute_line(ctx, registry, "cp750.sys.mute 7") == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "error"
    assert payload["details"]["allowed"] == "?|0..1"


def test_exit_disconnects(ctx, registry, device):
    ctx.ensure_client()
    with pytest.raises(SystemExit):
        execute_line(ctx, registry, "quit")
    assert ctx.client is None


def test_completion(registry):
    assert "cp750.sys.fader" in _completions(registry, "cp750.sys.f")
    assert "interval" in _completions(registry, "in")
    assert _completions(registry, "get cp750.sys.m") == ["cp750.sys.mute"]
    assert _completions(registry, "send cp750.sys.input_mode d") == ["dig_1", "dig_2", "dig_3", "dig_4"]
    assert _completions(registry, "cp750.sys.fader ") == ["0", "100", "?"]
    assert value_candidates(SYS_FADER) == ["?", "0", "100"]


def test_main_single_command(device, capsys):
    rc = main([f"127.0.0.1:{device.port}", "--timeout", "2", "-c", "cp750.sys.fader 40"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "< 40"
    assert device.state.fader == 40


def test_main_connection_failure(capsys):
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    rc = main(["127.0.0.1", "--port", str(port), "--timeout", "1", "-c", "help"])
    assert rc == 1
    assert "connect to 127.0.0.1" in capsys.readouterr().out


def test_registry_resolves_field_lines(registry):
    command, args = registry.resolve(["cp750.sys.fader", "40"])
    assert command is registry.get("send")
    assert args == ["cp750.sys.fader", "40"]
    command, args = registry.resolve(["STATUS"])
    assert command is registry.get("refresh")
    assert registry.resolve(["bogus"])[0] is None
    with pytest.raises(ValueError):
        registry.register(registry.get("help"))

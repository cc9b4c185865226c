import pytest

from family_calendar.cli import build_parser, main


def test_functions_lists_registered_names(capsys):
    main(["functions", "--category", "family"])

    output = capsys.readouterr().out
    assert "add_family_member" in output
    assert "create_event" not in output


def test_server_commands_accept_overrides():
    args = build_parser().parse_args(["api", "--port", "9000"])
    assert args.command == "api"
    assert args.port == 9000
    assert args.host is None


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])

"""
Unit tests for watcher.cli argument parsing.
"""

from __future__ import annotations

import pytest

from watcher.cli import parse_cli_args


def test_defaults():
    args = parse_cli_args(["play.example.net"])

    assert args.hostname == "play.example.net"
    assert args.port == 25565
    assert args.interval == 1.0
    assert args.timeout == 5.0
    assert args.config == "notify.json"
    assert not args.no_srv


def test_explicit_port_and_options():
    args = parse_cli_args(["play.example.net", "25566", "--no-srv", "--timeout", "0", "--verbose"])

    assert args.port == 25566
    assert args.no_srv
    assert args.timeout == 0
    assert args.verbose


@pytest.mark.parametrize("port", ["abc", "0", "65536", "-1"])
def test_invalid_port(port):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args(["play.example.net", port])
    assert excinfo.value.code == 2


def test_hostname_required():
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args([])
    assert excinfo.value.code == 2

